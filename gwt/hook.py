"""Rendering and installation of the post-checkout hook."""

from __future__ import annotations

import logging
from pathlib import Path

from .exceptions import HookExistsError
from .fs import atomic_write
from .models import HookConfig, PackageManager, VersionManager

logger = logging.getLogger(__name__)

HOOK_NAME = "post-checkout"
NULL_SHA = "0" * 40


def shell_escape(value: str) -> str:
    """Escape ``value`` for use inside single quotes."""

    return value.replace("'", "'\\''")


def quote(value: str) -> str:
    return f"'{shell_escape(value)}'"


def build_command(package_manager: PackageManager | str | None) -> str:
    if not package_manager:
        return ""
    name = PackageManager(package_manager).value
    if name == PackageManager.NONE.value:
        return ""
    if name == PackageManager.YARN.value:
        return "yarn build"
    return f"{name} run build"


def render_hook(config: HookConfig) -> str:
    lines = [
        "#!/bin/bash",
        "# Generated by gwt. Re-run `gwt init --force` to regenerate.",
        "",
        f'if [[ "$3" == "1" && "$1" == "{NULL_SHA}" ]]; then',
        '    worktree_dir="$(pwd)"',
    ]
    if config.copy_files:
        lines.extend(_copy_section(config))
    if config.package_manager != PackageManager.NONE:
        lines.extend(_package_section(config))
    lines.append("fi")
    return "\n".join(lines) + "\n"


def _copy_section(config: HookConfig) -> list[str]:
    files = " ".join(quote(name) for name in config.copy_files)
    return [
        "",
        f"    base_path={quote(config.base_path)}",
        '    if [[ -n "$base_path" && "$base_path" != "$worktree_dir" ]]; then',
        f"        for file in {files}; do",
        '            if [[ -e "$base_path/$file" ]]; then',
        '                mkdir -p "$(dirname "$worktree_dir/$file")"',
        '                cp -R "$base_path/$file" "$worktree_dir/$file"',
        "            else",
        '                echo "gwt: skipping $file: not found in $base_path" >&2',
        "            fi",
        "        done",
        "    fi",
    ]


def _package_section(config: HookConfig) -> list[str]:
    pm = PackageManager(config.package_manager).value
    prefix = ""
    lines = [""]
    if config.version_manager == VersionManager.ASDF:
        lines.extend(
            [
                '    if [[ -f "${ASDF_DIR:-$HOME/.asdf}/asdf.sh" ]]; then',
                '        . "${ASDF_DIR:-$HOME/.asdf}/asdf.sh"',
                "    fi",
            ]
        )
    elif config.version_manager == VersionManager.MISE:
        prefix = "mise exec -- "
    lines.append(f"    {prefix}{pm} install && {prefix}{build_command(pm)}")
    return lines


def install_hook(hooks_dir: Path, config: HookConfig, *, force: bool = False) -> Path:
    """Write the rendered hook to ``hooks_dir/post-checkout`` with mode 0755."""

    hook_path = hooks_dir / HOOK_NAME
    if not force and (hook_path.exists() or hook_path.is_symlink()):
        raise HookExistsError(hook_path)
    content = render_hook(config)
    atomic_write(hook_path, content, mode=0o755)
    logger.debug("Installed %s", hook_path)
    return hook_path


def hook_installed(hooks_dir: Path) -> bool:
    return (hooks_dir / HOOK_NAME).exists()


__all__ = [
    "HOOK_NAME",
    "shell_escape",
    "build_command",
    "render_hook",
    "install_hook",
    "hook_installed",
]
