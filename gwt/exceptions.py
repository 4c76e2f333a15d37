"""Custom exception hierarchy for gwt."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class GwtError(RuntimeError):
    """Base error for all custom exceptions."""


class NotARepositoryError(GwtError):
    """Raised when the current directory is not inside a git repository or bare store."""

    def __init__(self, detail: str | None = None):
        message = "not in a git repository"
        self.detail = (detail or "").strip()
        if self.detail:
            message = f"{message}: {self.detail}"
        super().__init__(message)


class InvalidArgumentsError(GwtError):
    """Raised when `worktree add` arguments cannot be rewritten."""


class HookExistsError(GwtError):
    """Raised when a post-checkout hook is already installed and force was not given."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"hook already exists at {path}; use --force to overwrite")


class FetchConfigError(GwtError):
    """Raised when the origin fetch refspec cannot be written."""


class ConfigParseError(GwtError):
    """Raised when .gwt.json exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"invalid config file {path}: {reason}")


class GitCommandError(GwtError):
    """Raised when a git invocation exits non-zero."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        *,
        stdout: str | None = None,
        stderr: str | None = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        message = f"git command failed (exit {returncode}): {' '.join(self.command)}"
        details = self.stderr.strip()
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)


class CopyPathError(GwtError):
    """Raised when a copy-file name resolves outside its source or destination directory."""


class ValidationError(GwtError):
    """Raised when user input is invalid."""


class UserAbort(GwtError):
    """Raised when the user cancels an interactive flow."""


__all__ = [
    "GwtError",
    "NotARepositoryError",
    "InvalidArgumentsError",
    "HookExistsError",
    "FetchConfigError",
    "ConfigParseError",
    "GitCommandError",
    "CopyPathError",
    "ValidationError",
    "UserAbort",
]
