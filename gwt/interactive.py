"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys
from typing import Any, Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice

from .exceptions import UserAbort, ValidationError
from .models import PackageManager, VersionManager


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise ValidationError(
            "Interactive mode requires a TTY. Pass the options on the command line instead."
        )


def select(message: str, choices: Sequence[Choice | str], default: Any = None) -> Any:
    _ensure_tty()
    try:
        return inquirer.select(message=message, choices=list(choices), default=default).execute()
    except KeyboardInterrupt as exc:
        raise UserAbort("User cancelled the prompt.") from exc


def text_input(message: str, default: str | None = None) -> str:
    _ensure_tty()
    try:
        return inquirer.text(message=message, default=default or "").execute().strip()
    except KeyboardInterrupt as exc:
        raise UserAbort("User cancelled the prompt.") from exc


def prompt_version_manager(default: VersionManager = VersionManager.NONE) -> VersionManager:
    choices = [Choice(value=item, name=item.value) for item in VersionManager]
    return VersionManager(select("Version manager", choices, default=default))


def prompt_package_manager(default: PackageManager = PackageManager.NONE) -> PackageManager:
    choices = [Choice(value=item, name=item.value) for item in PackageManager]
    return PackageManager(select("Package manager", choices, default=default))


def prompt_copy_files(current: Sequence[str]) -> list[str]:
    """Ask for a comma separated list of files to copy into new worktrees."""

    raw = text_input("Files to copy into new worktrees (comma separated)", ", ".join(current))
    return [item.strip() for item in raw.split(",") if item.strip()]


def prompt_main_branch(current: str) -> str:
    return text_input("Main branch", current) or current


__all__ = [
    "select",
    "text_input",
    "prompt_version_manager",
    "prompt_package_manager",
    "prompt_copy_files",
    "prompt_main_branch",
]
