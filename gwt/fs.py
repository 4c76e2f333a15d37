"""Filesystem helpers for gwt."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable

from .exceptions import CopyPathError

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def atomic_write(path: Path, content: str, mode: int = 0o644) -> None:
    """Replace ``path`` so readers observe either the old or the new complete file."""

    ensure_directory(path.parent)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with open(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def contained_path(root: Path, name: str) -> Path:
    """Join ``name`` onto ``root``, refusing results that land outside ``root``."""

    root_abs = Path(os.path.abspath(root))
    candidate = Path(os.path.abspath(root_abs / name))
    if candidate == root_abs or root_abs in candidate.parents:
        return candidate
    raise CopyPathError(f"path {name!r} escapes {root_abs}")


def validate_copy_name(name: str) -> None:
    if not name or Path(name).is_absolute() or ".." in Path(name).parts:
        raise CopyPathError(f"copy file must be a relative path inside the repository: {name!r}")


def copy_file_to_worktree(src_dir: Path, dst_dir: Path, name: str) -> Path:
    """Copy ``src_dir/name`` to ``dst_dir/name``, keeping file permissions."""

    src = contained_path(src_dir, name)
    dst = contained_path(dst_dir, name)
    ensure_directory(dst.parent)
    if src.is_dir():
        shutil.copytree(src, dst, dirs_exist_ok=True)
    else:
        shutil.copy2(src, dst)
    return dst


def copy_files_to_worktree(src_dir: Path, dst_dir: Path, names: Iterable[str]) -> tuple[list[Path], list[str]]:
    """Copy every name; missing or unreadable files become warnings.

    Returns the copied destinations and one warning message per skipped file.
    Traversal attempts raise CopyPathError before anything is copied.
    """

    names = list(names)
    for name in names:
        contained_path(src_dir, name)
        contained_path(dst_dir, name)

    copied: list[Path] = []
    warnings: list[str] = []
    for name in names:
        try:
            copied.append(copy_file_to_worktree(src_dir, dst_dir, name))
        except FileNotFoundError:
            warnings.append(f"skipping {name}: not found in {src_dir}")
        except OSError as exc:
            warnings.append(f"skipping {name}: {exc.strerror or exc}")
    for message in warnings:
        logger.debug(message)
    return copied, warnings


__all__ = [
    "ensure_directory",
    "atomic_write",
    "contained_path",
    "validate_copy_name",
    "copy_file_to_worktree",
    "copy_files_to_worktree",
]
