"""Process execution and ambient-state capabilities."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Protocol, Sequence

from .exceptions import GitCommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Environment:
    """The invocation directory and environment variables the tool may read."""

    cwd: Path
    environ: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def current(cls) -> "Environment":
        return cls(cwd=Path.cwd(), environ=dict(os.environ))

    def get(self, name: str) -> str | None:
        return self.environ.get(name)


class CommandRunner(Protocol):
    def capture(self, command: Sequence[str], *, cwd: Path) -> subprocess.CompletedProcess[str]:
        """Run a command, returning its captured stdout and stderr."""

    def stream(self, command: Sequence[str], *, cwd: Path) -> int:
        """Run a command attached to the parent's stdin, stdout and stderr."""


class SubprocessRunner:
    """CommandRunner backed by :mod:`subprocess`."""

    def capture(self, command: Sequence[str], *, cwd: Path) -> subprocess.CompletedProcess[str]:
        logger.debug("Running (captured) in %s: %s", cwd, " ".join(command))
        return subprocess.run(
            list(command),
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=False,
        )

    def stream(self, command: Sequence[str], *, cwd: Path) -> int:
        logger.debug("Running in %s: %s", cwd, " ".join(command))
        proc = subprocess.run(list(command), cwd=str(cwd), check=False)
        return proc.returncode


def exit_code(err: BaseException | None) -> int:
    """Map the outcome of a child process to the exit code gwt should report."""

    if err is None:
        return 0
    if isinstance(err, GitCommandError):
        return err.returncode
    if isinstance(err, subprocess.CalledProcessError):
        return err.returncode
    return 1


__all__ = ["Environment", "CommandRunner", "SubprocessRunner", "exit_code"]
