"""Shell wrapper that lets `gwt add` and `gwt clone` change the caller's directory."""

from __future__ import annotations

from .config import CD_FILE_ENV
from .exceptions import ValidationError

SUPPORTED_SHELLS = ("bash", "zsh")

_POSIX_WRAPPER = """\
gwt() {{
    if [ "${{1:-}}" = "add" ] || [ "${{1:-}}" = "clone" ]; then
        local _gwt_cd_file _gwt_exit
        _gwt_cd_file=$(mktemp)
        {env}="$_gwt_cd_file" command {binary} "$@"
        _gwt_exit=$?
        if [ -s "$_gwt_cd_file" ]; then
            builtin cd "$(cat "$_gwt_cd_file")" || true
        fi
        rm -f "$_gwt_cd_file"
        return $_gwt_exit
    else
        command {binary} "$@"
    fi
}}
"""


def render_shell_init(shell: str, binary: str = "gwt") -> str:
    if shell not in SUPPORTED_SHELLS:
        raise ValidationError(
            f"Unsupported shell: {shell}. Choose one of: {', '.join(SUPPORTED_SHELLS)}."
        )
    return _POSIX_WRAPPER.format(env=CD_FILE_ENV, binary=binary)


__all__ = ["SUPPORTED_SHELLS", "render_shell_init"]
