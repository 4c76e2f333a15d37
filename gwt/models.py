"""Dataclasses shared across modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DEFAULT_MAIN_BRANCH = "main"


class VersionManager(str, Enum):
    NONE = "none"
    ASDF = "asdf"
    MISE = "mise"


class PackageManager(str, Enum):
    NONE = "none"
    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"


@dataclass(frozen=True, slots=True)
class RepoContext:
    """Resolved repository root used as the base for worktree paths and hooks."""

    directory: Path
    is_bare: bool


@dataclass(frozen=True, slots=True)
class AddSpec:
    """Outcome of rewriting `git worktree add` arguments."""

    args: tuple[str, ...]
    path: Path
    branch: str

    @property
    def slug(self) -> str:
        return self.path.name


@dataclass(frozen=True, slots=True)
class HookConfig:
    """Values rendered into the post-checkout hook."""

    base_path: str = ""
    copy_files: tuple[str, ...] = ()
    version_manager: VersionManager = VersionManager.NONE
    package_manager: PackageManager = PackageManager.NONE


@dataclass(slots=True)
class GwtConfig:
    """Contents of .gwt.json. An absent file means every field is at its default."""

    main_branch: str = DEFAULT_MAIN_BRANCH
    copy_files: list[str] = field(default_factory=list)

    def is_default(self) -> bool:
        return self.main_branch == DEFAULT_MAIN_BRANCH and not self.copy_files

    def to_dict(self) -> dict:
        return {"main_branch": self.main_branch, "copy_files": list(self.copy_files)}


@dataclass(frozen=True, slots=True)
class WorktreeEntry:
    """Represents a single worktree tracked by git."""

    path: Path
    branch: str | None = None
    head: str | None = None
    is_bare: bool = False


__all__ = [
    "DEFAULT_MAIN_BRANCH",
    "VersionManager",
    "PackageManager",
    "RepoContext",
    "AddSpec",
    "HookConfig",
    "GwtConfig",
    "WorktreeEntry",
]
