"""Persistent settings stored as JSON next to the user's other dotfiles."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from consolicalm.models import AppConfig

log = logging.getLogger(__name__)


def _config_dir() -> Path:
    override = os.environ.get("CONSOLICALM_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "consolicalm"


_CONFIG_DIR = _config_dir()
_CONFIG_FILE = _CONFIG_DIR / "config.json"
_DB_DIR = Path.home() / ".local" / "share" / "consolicalm"
_DB_NAME = "consolicalm.db"


def load_config() -> AppConfig:
    """Read settings, falling back to defaults when the file is absent or broken."""
    if not _CONFIG_FILE.exists():
        return AppConfig()
    try:
        return AppConfig.model_validate_json(_CONFIG_FILE.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        log.warning("Ignoring unreadable config %s: %s", _CONFIG_FILE, exc)
        return AppConfig()


def save_config(config: AppConfig) -> Path:
    """Persist *config* and return the file it was written to."""
    _CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    _CONFIG_FILE.write_text(config.model_dump_json(indent=2), encoding="utf-8")
    log.debug("Saved config to %s", _CONFIG_FILE)
    return _CONFIG_FILE


def get_db_path() -> Path:
    """Where the SQLite file lives. The parent directory is created on demand."""
    custom = load_config().db_path
    path = Path(custom) if custom else _DB_DIR / _DB_NAME
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def set_db_path(path: str) -> AppConfig:
    """Point the app at another database file.

    Passing an existing directory stores the database inside it under the
    default file name.
    """
    target = Path(path).expanduser().resolve()
    if target.is_dir():
        target = target / _DB_NAME
    target.parent.mkdir(parents=True, exist_ok=True)

    config = load_config().model_copy(update={"db_path": str(target)})
    save_config(config)
    return config


def reset_db_path() -> AppConfig:
    config = load_config().model_copy(update={"db_path": None})
    save_config(config)
    return config
