"""Typer-based CLI for gwt."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NoReturn

import typer
from rich.console import Console
from typer.core import TyperCommand, TyperGroup

from . import __version__
from .config import load_config
from .exceptions import GitCommandError, GwtError
from .interactive import (
    prompt_copy_files,
    prompt_main_branch,
    prompt_package_manager,
    prompt_version_manager,
)
from .models import PackageManager, VersionManager
from .runner import Environment, exit_code
from .shell import render_shell_init
from .worktrees import InitOptions, WorktreeService

PASSTHROUGH = "passthrough"
RAW_ARGS_KEY = "gwt.raw_args"
RAW_CONTEXT = {"allow_extra_args": True, "ignore_unknown_options": True}


class RawArgsCommand(TyperCommand):
    """Keeps the untouched argument list, including ``--``, for forwarding to git."""

    def parse_args(self, ctx: typer.Context, args: list[str]) -> list[str]:
        ctx.meta[RAW_ARGS_KEY] = list(args)
        return super().parse_args(ctx, args)


class GwtGroup(TyperGroup):
    """Routes subcommands gwt does not define to `git worktree`."""

    def resolve_command(self, ctx: typer.Context, args: list[str]):
        if args and not args[0].startswith("-") and self.get_command(ctx, args[0]) is None:
            return PASSTHROUGH, self.get_command(ctx, PASSTHROUGH), list(args)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=GwtGroup,
    add_completion=False,
    no_args_is_help=True,
    help="Use git worktrees with ease. Unknown commands are passed to `git worktree`.",
)
console = Console()


@dataclass(slots=True)
class AppState:
    env: Environment
    verbose: bool = False


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gwt {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show git invocations and debug output."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the gwt version and exit.",
    ),
) -> None:
    _ = version  # handled via callback
    configure_logging(verbose)
    ctx.obj = AppState(env=Environment.current(), verbose=verbose)


@app.command(
    cls=RawArgsCommand,
    context_settings=RAW_CONTEXT,
    help="Add a worktree named after its branch: gwt add [-b <new-branch>] <branch | start-point>",
)
def add(ctx: typer.Context) -> None:
    service = _build_service(ctx)
    try:
        path = service.add(_raw_args(ctx))
    except GwtError as err:
        _fail_with(err)
    except OSError as err:
        _fail(str(err))
    console.print(f"Created worktree at {path}")


@app.command(help="Clone a repository as a bare store with a worktree for its default branch")
def clone(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Repository URL or path."),
    directory: str | None = typer.Argument(None, help="Target directory (defaults to the repository name)."),
) -> None:
    service = _build_service(ctx)
    try:
        path = service.clone(url, directory)
    except GwtError as err:
        _fail_with(err)
    except OSError as err:
        _fail(str(err))
    console.print(f"Cloned into {path.parent}; default branch checked out at {path}")


@app.command(help="Configure the repository and install the post-checkout hook")
def init(
    ctx: typer.Context,
    copy: list[str] | None = typer.Option(
        None,
        "--copy",
        "-c",
        help="File to copy from the main worktree into new worktrees (repeatable).",
    ),
    no_copy: bool = typer.Option(False, "--no-copy", help="Stop copying files into new worktrees."),
    main_branch: str | None = typer.Option(None, "--main-branch", help="Branch of the main worktree."),
    version_manager: VersionManager = typer.Option(
        VersionManager.NONE, "--version-manager", case_sensitive=False, help="Tool version manager to activate."
    ),
    package_manager: PackageManager = typer.Option(
        PackageManager.NONE, "--package-manager", case_sensitive=False, help="Install and build with this tool."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing post-checkout hook."),
    no_hook: bool = typer.Option(False, "--no-hook", help="Only write .gwt.json; do not install the hook."),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Prompt for each setting."),
) -> None:
    if copy and no_copy:
        _fail("--copy and --no-copy cannot be used together.")
    copy_files = [] if no_copy else (list(copy) if copy else None)
    service = _build_service(ctx)
    options = InitOptions(
        main_branch=main_branch,
        copy_files=copy_files,
        version_manager=version_manager,
        package_manager=package_manager,
        force=force,
        install_hook=not no_hook,
    )
    try:
        if interactive:
            _prompt_init_options(service, options)
        result = service.init(options)
    except GwtError as err:
        _fail_with(err)
    except OSError as err:
        _fail(str(err))

    if result.fetch_configured:
        console.print("Configured origin to fetch all branches.")
    if result.hook_path is not None:
        console.print(f"Installed hook at {result.hook_path}")
    if result.config.is_default():
        console.print("Using default configuration (no .gwt.json written).")
    else:
        console.print(f"Saved configuration to {result.context.directory / '.gwt.json'}")


@app.command("shell-init", help="Print a shell function that cds into new worktrees")
def shell_init(shell: str = typer.Argument("bash", help="Shell to generate for (bash or zsh).")) -> None:
    try:
        script = render_shell_init(shell)
    except GwtError as err:
        _fail(str(err))
    typer.echo(script, nl=False)


@app.command(
    PASSTHROUGH,
    cls=RawArgsCommand,
    hidden=True,
    add_help_option=False,
    context_settings=RAW_CONTEXT,
)
def passthrough(ctx: typer.Context) -> None:
    service = _build_service(ctx)
    try:
        code = service.forward(_raw_args(ctx))
    except GwtError as err:
        _fail_with(err)
    raise typer.Exit(code)


def _build_service(ctx: typer.Context) -> WorktreeService:
    state = ctx.find_object(AppState)
    env = state.env if state is not None else Environment.current()
    return WorktreeService(env=env)


def _raw_args(ctx: typer.Context) -> list[str]:
    return list(ctx.meta.get(RAW_ARGS_KEY, ctx.args))


def _prompt_init_options(service: WorktreeService, options: InitOptions) -> None:
    current = load_config(service.context().directory)
    options.main_branch = prompt_main_branch(options.main_branch or current.main_branch)
    options.copy_files = prompt_copy_files(current.copy_files if options.copy_files is None else options.copy_files)
    options.version_manager = prompt_version_manager(options.version_manager)
    options.package_manager = prompt_package_manager(options.package_manager)


def _fail_with(err: GwtError) -> NoReturn:
    if isinstance(err, GitCommandError):
        if not err.stderr:
            # git wrote its own diagnostics to the terminal
            raise typer.Exit(exit_code(err))
        _fail(str(err), exit_code(err))
    _fail(str(err))


def _fail(message: str, code: int = 1) -> NoReturn:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
