"""Tests for the config module."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from consolicalm.config import (
    get_db_path,
    load_config,
    reset_db_path,
    save_config,
    set_db_path,
)
from consolicalm.models import AppConfig


def _patch_config_paths(tmp_path: Path):
    """Return context managers that redirect config dir/file to tmp_path."""
    cfg_dir = tmp_path / "config"
    cfg_file = cfg_dir / "config.json"
    return (
        patch("consolicalm.config._CONFIG_DIR", cfg_dir),
        patch("consolicalm.config._CONFIG_FILE", cfg_file),
    )


class TestLoadSaveConfig:
    def test_load_default_when_missing(self, tmp_path: Path) -> None:
        p1, p2 = _patch_config_paths(tmp_path)
        with p1, p2:
            config = load_config()
            assert config.db_path is None
            assert config.starting_points == 240
            assert config.log_level == "WARNING"

    def test_save_and_load(self, tmp_path: Path) -> None:
        p1, p2 = _patch_config_paths(tmp_path)
        with p1, p2:
            path = save_config(AppConfig(db_path="/tmp/calm.db", starting_points=50))
            assert path.exists()

            loaded = load_config()
            assert loaded.db_path == "/tmp/calm.db"
            assert loaded.starting_points == 50

    def test_load_handles_corrupt_file(self, tmp_path: Path) -> None:
        p1, p2 = _patch_config_paths(tmp_path)
        with p1, p2:
            cfg_dir = tmp_path / "config"
            cfg_dir.mkdir(parents=True, exist_ok=True)
            (cfg_dir / "config.json").write_text("not valid json{{{")
            assert load_config().db_path is None

    def test_load_handles_invalid_values(self, tmp_path: Path) -> None:
        p1, p2 = _patch_config_paths(tmp_path)
        with p1, p2:
            cfg_dir = tmp_path / "config"
            cfg_dir.mkdir(parents=True, exist_ok=True)
            (cfg_dir / "config.json").write_text(json.dumps({"starting_points": -5}))
            assert load_config().starting_points == 240


class TestDbPath:
    def test_default_path(self, tmp_path: Path) -> None:
        p1, p2 = _patch_config_paths(tmp_path)
        data_dir = tmp_path / "data"
        with p1, p2, patch("consolicalm.config._DB_DIR", data_dir):
            path = get_db_path()
            assert path == data_dir / "consolicalm.db"
            assert data_dir.is_dir()

    def test_set_custom_path(self, tmp_path: Path) -> None:
        p1, p2 = _patch_config_paths(tmp_path)
        with p1, p2:
            custom = tmp_path / "elsewhere" / "mine.db"
            config = set_db_path(str(custom))
            assert config.db_path == str(custom.resolve())
            assert get_db_path() == custom.resolve()

    def test_set_directory_appends_filename(self, tmp_path: Path) -> None:
        p1, p2 = _patch_config_paths(tmp_path)
        with p1, p2:
            folder = tmp_path / "folder"
            folder.mkdir()
            config = set_db_path(str(folder))
            assert config.db_path.endswith("consolicalm.db")

    def test_reset(self, tmp_path: Path) -> None:
        p1, p2 = _patch_config_paths(tmp_path)
        with p1, p2:
            set_db_path(str(tmp_path / "x.db"))
            assert reset_db_path().db_path is None
            assert load_config().db_path is None
