"""Scripted stand-in for the subprocess runner."""

from __future__ import annotations

from pathlib import Path
from subprocess import CompletedProcess
from typing import Callable, Sequence

Handler = Callable[[tuple[str, ...], Path], CompletedProcess]


def ok(stdout: str = "", stderr: str = "") -> CompletedProcess[str]:
    return CompletedProcess(args=["git"], returncode=0, stdout=stdout, stderr=stderr)


def fail(stderr: str = "fatal: error", returncode: int = 128) -> CompletedProcess[str]:
    return CompletedProcess(args=["git"], returncode=returncode, stdout="", stderr=stderr)


class FakeRunner:
    """Answers captured commands from a table and records every call."""

    def __init__(self) -> None:
        self.responses: dict[tuple[tuple[str, ...], str | None], CompletedProcess | Handler] = {}
        self.stream_codes: dict[tuple[str, ...], int | BaseException] = {}
        self.calls: list[tuple[str, tuple[str, ...], Path]] = []

    def on(self, command: Sequence[str], response: CompletedProcess | Handler, *, cwd: Path | None = None) -> None:
        self.responses[(tuple(command), str(cwd) if cwd is not None else None)] = response

    def on_stream(self, command: Sequence[str], result: int | BaseException) -> None:
        self.stream_codes[tuple(command)] = result

    def capture(self, command: Sequence[str], *, cwd: Path) -> CompletedProcess[str]:
        key = tuple(command)
        self.calls.append(("capture", key, cwd))
        response = self.responses.get((key, str(cwd)))
        if response is None:
            response = self.responses.get((key, None))
        if response is None:
            return fail(f"fatal: unexpected command {' '.join(key)}")
        if callable(response):
            return response(key, cwd)
        return response

    def stream(self, command: Sequence[str], *, cwd: Path) -> int:
        key = tuple(command)
        self.calls.append(("stream", key, cwd))
        result = self.stream_codes.get(key, 0)
        if isinstance(result, BaseException):
            raise result
        return result

    def commands(self, mode: str | None = None) -> list[tuple[str, ...]]:
        return [command for kind, command, _ in self.calls if mode is None or kind == mode]


def script_bare_layout(runner: FakeRunner, root: Path, *, cwd: Path | None = None) -> None:
    """Answer the resolver queries for ``root/.bare`` with sibling worktrees."""

    cwd = cwd or root
    runner.on(["git", "rev-parse", "--is-bare-repository"], ok("true\n"), cwd=cwd)
    runner.on(["git", "rev-parse", "--git-dir"], ok(".bare\n"), cwd=cwd)
    runner.on(["git", "rev-parse", "--git-common-dir"], ok(".bare\n"), cwd=cwd)
    runner.on(["git", "rev-parse", "--is-bare-repository"], ok("true\n"), cwd=root / ".bare")
