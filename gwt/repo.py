"""Repository root detection and bare-layout configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .exceptions import FetchConfigError, GitCommandError, NotARepositoryError
from .git import Git
from .models import RepoContext
from .runner import Environment

logger = logging.getLogger(__name__)

FETCH_KEY = "remote.origin.fetch"
FETCH_REFSPEC = "+refs/heads/*:refs/remotes/origin/*"


def resolve_repo_context(git: Git, env: Environment) -> RepoContext:
    """Find the repository root and bareness for the invocation directory.

    For a bare store with sibling worktrees (``<root>/.bare`` plus ``<root>/<slug>``)
    the root is the directory holding the store, whichever worktree we are called from.
    """

    cwd = env.cwd
    try:
        is_bare = git.is_bare_repository(cwd)
        raw_dir = git.git_dir(cwd) if is_bare else git.show_toplevel(cwd)
        directory = _absolute(cwd, raw_dir)

        common = _absolute(cwd, git.common_dir(cwd))
        if git.is_bare_repository(common):
            directory = common.parent
            is_bare = True
    except GitCommandError as exc:
        raise NotARepositoryError(exc.stderr) from exc
    except OSError as exc:
        raise NotARepositoryError(str(exc)) from exc

    logger.debug("Resolved repository root %s (bare=%s)", directory, is_bare)
    return RepoContext(directory=directory, is_bare=is_bare)


def hooks_dir(git: Git, ctx: RepoContext) -> Path:
    """Shared hooks directory, i.e. ``<git-common-dir>/hooks``."""

    common = git.common_dir(ctx.directory)
    return _absolute(ctx.directory, common) / "hooks"


def configure_fetch(git: Git, ctx: RepoContext) -> bool:
    """Make `git fetch` retrieve every branch of origin. Returns True when a write happened."""

    current = git.config_get(ctx.directory, FETCH_KEY)
    if current == FETCH_REFSPEC:
        logger.debug("Fetch refspec already configured in %s", ctx.directory)
        return False
    try:
        git.config_set(ctx.directory, FETCH_KEY, FETCH_REFSPEC)
    except GitCommandError as exc:
        raise FetchConfigError(f"failed to configure {FETCH_KEY}: {exc.stderr.strip() or exc}") from exc
    logger.debug("Set %s to %s", FETCH_KEY, FETCH_REFSPEC)
    return True


def worktree_path_for_branch(git: Git, ctx: RepoContext, branch: str) -> Path | None:
    for entry in git.worktree_list(ctx.directory):
        if entry.branch == branch and not entry.is_bare:
            return entry.path
    return None


def _absolute(base: Path, raw: str) -> Path:
    return Path(os.path.normpath(os.path.join(base, raw)))


__all__ = [
    "FETCH_REFSPEC",
    "resolve_repo_context",
    "hooks_dir",
    "configure_fetch",
    "worktree_path_for_branch",
]
