"""Rewriting of `git worktree add` arguments.

``gwt add`` accepts the same arguments as ``git worktree add`` minus ``<path>``:
the path is derived from the branch name and inserted where git expects it,
following ``git worktree add [<options>] [(-b | -B) <new-branch>] <path> [<commit-ish>]``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .exceptions import InvalidArgumentsError
from .models import AddSpec

VALUE_FLAGS = frozenset({"-b", "-B", "--reason"})
BRANCH_FLAGS = frozenset({"-b", "-B"})
ORPHAN_FLAG = "--orphan"


def slugify_branch(branch: str) -> str:
    """Directory name for a branch: every ``/`` becomes ``-``.

    ``a/b`` and ``a-b`` share a slug; the collision is accepted.
    """

    return branch.replace("/", "-")


def transform_add_args(raw_args: Sequence[str], repo_root: Path) -> AddSpec:
    if not raw_args:
        raise InvalidArgumentsError("requires a branch name")

    flags: list[str] = []
    positionals: list[str] = []
    new_branch: str | None = None
    saw_separator = False
    orphan = False

    tokens = list(raw_args)
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1

        if saw_separator:
            positionals.append(token)
            continue
        if token == "--":
            saw_separator = True
            continue

        stuck = _split_stuck_branch_flag(token)
        if stuck is not None:
            flag, value = stuck
            flags.extend([flag, value])
            new_branch = value
            continue

        if token in VALUE_FLAGS:
            if index >= len(tokens):
                raise InvalidArgumentsError(f"flag {token} requires a value")
            value = tokens[index]
            index += 1
            flags.extend([token, value])
            if token in BRANCH_FLAGS:
                new_branch = value
            continue

        if token == ORPHAN_FLAG:
            orphan = True
        if token.startswith("-"):
            flags.append(token)
            continue

        positionals.append(token)

    if new_branch is not None:
        if len(positionals) > 1:
            raise InvalidArgumentsError("too many positional arguments")
        branch = new_branch
        trailing = positionals
    elif orphan:
        # an unborn branch has no commit-ish; name it with -b
        if not positionals:
            raise InvalidArgumentsError("requires a branch name")
        if len(positionals) > 1:
            raise InvalidArgumentsError("too many positional arguments")
        branch = positionals[0]
        flags.extend(["-b", branch])
        trailing = []
    else:
        if not positionals:
            raise InvalidArgumentsError("requires a branch name")
        if len(positionals) > 1:
            raise InvalidArgumentsError("too many positional arguments")
        branch = positionals[0]
        trailing = [branch]

    slug = slugify_branch(branch)
    _check_slug(branch, slug)

    args = list(flags)
    if saw_separator:
        args.append("--")
    args.append(slug)
    args.extend(trailing)
    return AddSpec(args=tuple(args), path=repo_root / slug, branch=branch)


def _split_stuck_branch_flag(token: str) -> tuple[str, str] | None:
    """Recognize ``-b=<name>`` and git's stuck ``-b<name>`` spelling."""

    for flag in BRANCH_FLAGS:
        if token.startswith(flag) and len(token) > len(flag):
            value = token[len(flag):]
            if value.startswith("="):
                value = value[1:]
            if not value:
                raise InvalidArgumentsError(f"flag {flag} requires a value")
            return flag, value
    return None


def _check_slug(branch: str, slug: str) -> None:
    if slug in ("", ".", "..") or slug.startswith("-"):
        raise InvalidArgumentsError(f"invalid branch name: {branch!r}")


__all__ = ["slugify_branch", "transform_add_args", "VALUE_FLAGS", "BRANCH_FLAGS", "ORPHAN_FLAG"]
