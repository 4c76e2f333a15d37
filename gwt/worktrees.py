"""High-level orchestration for worktree operations."""

from __future__ import annotations

import logging
import os
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from rich.console import Console

from .args import slugify_branch, transform_add_args
from .config import load_config, save_config, write_cd_file
from .exceptions import ValidationError
from .fs import copy_files_to_worktree, ensure_directory, validate_copy_name
from .git import Git
from .hook import hook_installed, install_hook
from .models import (
    DEFAULT_MAIN_BRANCH,
    GwtConfig,
    HookConfig,
    PackageManager,
    RepoContext,
    VersionManager,
)
from .repo import configure_fetch, hooks_dir, resolve_repo_context, worktree_path_for_branch
from .runner import Environment, exit_code

logger = logging.getLogger(__name__)

BARE_STORE = ".bare"


@dataclass
class InitOptions:
    main_branch: str | None = None
    copy_files: list[str] | None = None
    version_manager: VersionManager = VersionManager.NONE
    package_manager: PackageManager = PackageManager.NONE
    force: bool = False
    install_hook: bool = True


@dataclass
class InitResult:
    context: RepoContext
    config: GwtConfig
    hook_path: Path | None
    fetch_configured: bool


@dataclass
class WorktreeService:
    env: Environment
    git: Git = field(default_factory=Git)
    console: Console = field(default_factory=lambda: Console(stderr=True))
    _context: RepoContext | None = field(default=None, init=False, repr=False)

    def context(self) -> RepoContext:
        if self._context is None:
            self._context = resolve_repo_context(self.git, self.env)
        return self._context

    def add(self, raw_args: Sequence[str]) -> Path:
        ctx = self.context()
        spec = transform_add_args(raw_args, ctx.directory)
        config = load_config(ctx.directory)
        logger.debug("Adding worktree for %s at %s", spec.branch, spec.path)
        self.git.worktree_add(ctx.directory, spec.args)
        self._copy_configured_files(ctx, config, spec.path)
        write_cd_file(spec.path, self.env.environ)
        return spec.path

    def clone(self, url: str, directory: str | None = None) -> Path:
        target = Path(os.path.normpath(self.env.cwd / (directory or repo_name_from_url(url))))
        if target.exists() and any(target.iterdir()):
            raise ValidationError(f"Destination already exists and is not empty: {target}")
        created = not target.exists()
        ensure_directory(target)
        try:
            path = self._clone_into(url, target)
        except BaseException:
            self._context = None
            _remove_partial_clone(target, created)
            raise
        write_cd_file(path, self.env.environ)
        return path

    def _clone_into(self, url: str, target: Path) -> Path:
        self.git.clone_bare(url, target / BARE_STORE)
        (target / ".git").write_text(f"gitdir: ./{BARE_STORE}\n", encoding="utf-8")

        ctx = RepoContext(directory=target, is_bare=True)
        self._context = ctx
        configure_fetch(self.git, ctx)
        self.git.fetch(ctx.directory)

        branch = self.git.symbolic_head(ctx.directory) or DEFAULT_MAIN_BRANCH
        spec = transform_add_args([branch], ctx.directory)
        self.git.worktree_add(ctx.directory, spec.args)
        return spec.path

    def init(self, options: InitOptions) -> InitResult:
        ctx = self.context()
        config = load_config(ctx.directory)
        if options.main_branch:
            config.main_branch = options.main_branch
        if options.copy_files is not None:
            config.copy_files = list(options.copy_files)
        for name in config.copy_files:
            validate_copy_name(name)

        fetch_configured = configure_fetch(self.git, ctx) if ctx.is_bare else False

        hook_path = None
        if options.install_hook:
            base = self.main_worktree_path(ctx, config)
            if base is None:
                base = ctx.directory / slugify_branch(config.main_branch)
            hook_config = HookConfig(
                base_path=str(base),
                copy_files=tuple(config.copy_files),
                version_manager=options.version_manager,
                package_manager=options.package_manager,
            )
            hook_path = install_hook(hooks_dir(self.git, ctx), hook_config, force=options.force)

        save_config(ctx.directory, config)
        return InitResult(
            context=ctx,
            config=config,
            hook_path=hook_path,
            fetch_configured=fetch_configured,
        )

    def forward(self, args: Sequence[str]) -> int:
        ctx = self.context()
        try:
            return self.git.worktree(ctx.directory, args)
        except OSError as exc:
            self.console.print(f"[red]error:[/red] failed to run git: {exc}")
            return exit_code(exc)

    def main_worktree_path(self, ctx: RepoContext, config: GwtConfig) -> Path | None:
        path = worktree_path_for_branch(self.git, ctx, config.main_branch)
        if path is not None:
            return path
        if not ctx.is_bare:
            return ctx.directory
        return None

    def _copy_configured_files(self, ctx: RepoContext, config: GwtConfig, target: Path) -> None:
        if not config.copy_files:
            return
        if hook_installed(hooks_dir(self.git, ctx)):
            logger.debug("post-checkout hook installed; leaving file copies to it")
            return
        source = self.main_worktree_path(ctx, config)
        if source is None:
            self.console.print(
                f"[yellow]warning:[/yellow] no worktree has {config.main_branch} checked out; "
                "skipping file copies"
            )
            return
        if source == target:
            return
        copied, warnings = copy_files_to_worktree(source, target, config.copy_files)
        for message in warnings:
            self.console.print(f"[yellow]warning:[/yellow] {message}")
        logger.debug("Copied %d file(s) into %s", len(copied), target)


def _remove_partial_clone(target: Path, created: bool) -> None:
    """Undo a failed clone so it can be retried into the same directory."""

    logger.debug("Removing partial clone at %s", target)
    if created:
        shutil.rmtree(target, ignore_errors=True)
        return
    for child in target.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child, ignore_errors=True)
        else:
            child.unlink(missing_ok=True)


def repo_name_from_url(url: str) -> str:
    name = re.split(r"[/:]", url.rstrip("/"))[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not name or name in (".", ".."):
        raise ValidationError(f"Cannot derive a directory name from {url}; pass one explicitly.")
    return name


__all__ = ["WorktreeService", "InitOptions", "InitResult", "repo_name_from_url", "BARE_STORE"]
