"""Load and persist .gwt.json and other runtime configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping

from .exceptions import ConfigParseError
from .fs import atomic_write
from .models import DEFAULT_MAIN_BRANCH, GwtConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = ".gwt.json"
CD_FILE_ENV = "GWT_CD_FILE"


def config_path(repo_root: Path) -> Path:
    return repo_root / CONFIG_FILE


def load_config(repo_root: Path) -> GwtConfig:
    """Read .gwt.json; a missing file yields the defaults."""

    path = config_path(repo_root)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return GwtConfig()
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ConfigParseError(path, str(exc)) from exc
    return _from_dict(path, data)


def save_config(repo_root: Path, config: GwtConfig) -> None:
    """Persist ``config``; a default config removes the file instead."""

    path = config_path(repo_root)
    if config.is_default():
        path.unlink(missing_ok=True)
        logger.debug("Config is default; %s removed", path)
        return
    payload = json.dumps(config.to_dict(), indent=2) + "\n"
    atomic_write(path, payload)
    logger.debug("Wrote %s", path)


def write_cd_file(target: Path | str | None, environ: Mapping[str, str]) -> bool:
    """Tell the shell wrapper which directory to cd into after we exit."""

    cd_file = environ.get(CD_FILE_ENV)
    if not cd_file or not target or not str(target):
        return False
    Path(cd_file).write_text(str(target), encoding="utf-8")
    return True


def _from_dict(path: Path, data: object) -> GwtConfig:
    if not isinstance(data, dict):
        raise ConfigParseError(path, "expected a JSON object")
    main_branch = data.get("main_branch", DEFAULT_MAIN_BRANCH)
    copy_files = data.get("copy_files")
    if copy_files is None:
        copy_files = []
    if not isinstance(main_branch, str):
        raise ConfigParseError(path, "main_branch must be a string")
    if not isinstance(copy_files, list) or not all(isinstance(item, str) for item in copy_files):
        raise ConfigParseError(path, "copy_files must be a list of strings")
    return GwtConfig(main_branch=main_branch, copy_files=list(copy_files))


__all__ = [
    "CONFIG_FILE",
    "CD_FILE_ENV",
    "config_path",
    "load_config",
    "save_config",
    "write_cd_file",
]
