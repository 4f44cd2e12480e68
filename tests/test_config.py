"""Tests for configuration loading.

**Feature: simulated-portfolio**
"""

from pathlib import Path

import pytest
import toml
from pydantic import ValidationError

from simfolio.config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    SimfolioConfig,
    get_config_path,
    load_config,
    parse_config,
    write_default_config,
)


class TestConfigPath:

    def test_explicit_path_wins(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "env.toml"))

        assert get_config_path(tmp_path / "explicit.toml") == tmp_path / "explicit.toml"

    def test_env_var(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "env.toml"))

        assert get_config_path() == tmp_path / "env.toml"

    def test_default_path(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

        assert get_config_path() == DEFAULT_CONFIG_PATH


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "missing.toml")

        assert config == SimfolioConfig()
        assert config.portfolio.starting_balance == 10000.0
        assert config.feed.latency_seconds == 1.5
        assert config.feed.refresh_interval == 30.0
        assert config.logging.level == "WARNING"
        assert config.source is None
        assert config.error is None

    def test_valid_file(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text(
            "[portfolio]\nstarting_balance = 50000\n\n"
            "[feed]\nlatency_seconds = 0\nseed = 7\n"
        )

        config = load_config(path)

        assert config.error is None
        assert config.source == path
        assert config.portfolio.starting_balance == 50000.0
        assert config.feed.latency_seconds == 0.0
        assert config.feed.seed == 7
        # Unset sections keep their defaults
        assert config.feed.refresh_interval == 30.0
        assert config.logging.level == "WARNING"

    def test_env_var_file(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "env.toml"
        path.write_text('[logging]\nlevel = "DEBUG"\n')
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert load_config().logging.level == "DEBUG"

    def test_malformed_toml_falls_back(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[portfolio\nstarting_balance = ")

        config = load_config(path)

        assert config.error is not None
        assert config.source == path
        assert config.portfolio.starting_balance == 10000.0

    def test_invalid_values_fall_back(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[portfolio]\nstarting_balance = -5\n")

        config = load_config(path)

        assert config.error is not None
        assert config.error.startswith("Invalid config")
        assert config.portfolio.starting_balance == 10000.0

    @pytest.mark.parametrize(
        "data",
        [
            {"feed": {"refresh_interval": 0}},
            {"feed": {"latency_seconds": -1}},
            {"logging": {"level": "LOUD"}},
        ],
    )
    def test_parse_config_rejects(self, data):
        with pytest.raises(ValidationError):
            parse_config(data)


class TestWriteDefaultConfig:

    def test_written_file_loads_back(self, tmp_path: Path):
        path = tmp_path / "nested" / "config.toml"

        written = write_default_config(path)
        config = load_config(written)

        assert written == path
        assert config.error is None
        assert config.model_dump() == SimfolioConfig().model_dump()

    def test_internal_fields_not_written(self, tmp_path: Path):
        path = write_default_config(tmp_path / "config.toml")

        data = toml.load(path)

        assert set(data) == {"portfolio", "feed", "logging"}
