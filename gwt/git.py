"""Thin wrappers around git CLI commands."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .exceptions import GitCommandError
from .models import WorktreeEntry
from .runner import CommandRunner, SubprocessRunner


@dataclass
class Git:
    """Executes git through a CommandRunner so callers can swap in a fake."""

    runner: CommandRunner = field(default_factory=SubprocessRunner)

    def run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        raise_on_error: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        """Execute a git command with captured output and optionally raise on failure."""

        cmd = ["git", *args]
        proc = self.runner.capture(cmd, cwd=cwd)
        if raise_on_error and proc.returncode != 0:
            raise GitCommandError(cmd, proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
        return proc

    def stream(self, args: Iterable[str], *, cwd: Path, raise_on_error: bool = True) -> int:
        """Execute a git command attached to the terminal."""

        cmd = ["git", *args]
        returncode = self.runner.stream(cmd, cwd=cwd)
        if raise_on_error and returncode != 0:
            raise GitCommandError(cmd, returncode)
        return returncode

    def is_bare_repository(self, cwd: Path) -> bool:
        proc = self.run(["rev-parse", "--is-bare-repository"], cwd=cwd)
        return proc.stdout.strip() == "true"

    def git_dir(self, cwd: Path) -> str:
        return self.run(["rev-parse", "--git-dir"], cwd=cwd).stdout.strip()

    def show_toplevel(self, cwd: Path) -> str:
        return self.run(["rev-parse", "--show-toplevel"], cwd=cwd).stdout.strip()

    def common_dir(self, cwd: Path) -> str:
        return self.run(["rev-parse", "--git-common-dir"], cwd=cwd).stdout.strip()

    def config_get(self, cwd: Path, key: str) -> str | None:
        proc = self.run(["config", key], cwd=cwd, raise_on_error=False)
        if proc.returncode != 0:
            return None
        return proc.stdout.strip()

    def config_set(self, cwd: Path, key: str, value: str) -> None:
        self.run(["config", key, value], cwd=cwd)

    def symbolic_head(self, cwd: Path) -> str | None:
        proc = self.run(["symbolic-ref", "--short", "HEAD"], cwd=cwd, raise_on_error=False)
        if proc.returncode != 0:
            return None
        return proc.stdout.strip() or None

    def worktree_list(self, cwd: Path) -> list[WorktreeEntry]:
        proc = self.run(["worktree", "list", "--porcelain"], cwd=cwd)
        return parse_worktree_porcelain(proc.stdout)

    def worktree_add(self, cwd: Path, args: Iterable[str]) -> None:
        self.stream(["worktree", "add", *args], cwd=cwd)

    def worktree(self, cwd: Path, args: Iterable[str]) -> int:
        return self.stream(["worktree", *args], cwd=cwd, raise_on_error=False)

    def clone_bare(self, url: str, target: Path) -> None:
        self.stream(["clone", "--bare", url, str(target)], cwd=target.parent)

    def fetch(self, cwd: Path, remote: str = "origin") -> None:
        self.stream(["fetch", remote], cwd=cwd)


def parse_worktree_porcelain(output: str) -> list[WorktreeEntry]:
    items: list[WorktreeEntry] = []
    current: dict | None = None
    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        key, _, value = line.partition(" ")
        if key == "worktree":
            if current:
                items.append(WorktreeEntry(**current))
            current = {"path": Path(value.strip())}
        elif not current:
            continue
        elif key == "branch":
            branch = value.strip()
            if branch.startswith("refs/heads/"):
                branch = branch[len("refs/heads/"):]
            current["branch"] = branch
        elif key == "HEAD":
            current["head"] = value.strip()
        elif key == "bare":
            current["is_bare"] = True
        elif key == "detached":
            current["branch"] = None
    if current:
        items.append(WorktreeEntry(**current))
    return items


__all__ = ["Git", "parse_worktree_porcelain"]
