# Area: Config Tests
"""Tests for configuration loading and validation."""

import json
import os

import pytest

from quiz_battle._config import DEFAULTS, load_config, validate_config
from quiz_battle.errors import ConfigError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run from an empty directory with no QUIZ_BATTLE_* variables."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("QUIZ_BATTLE_"):
            monkeypatch.delenv(key)
    yield
    for key in list(os.environ):
        if key.startswith("QUIZ_BATTLE_"):
            del os.environ[key]


class TestLoadConfig:
    """Tests for load_config sources and precedence."""

    def test_defaults(self):
        assert load_config() == DEFAULTS

    def test_json_overrides(self, tmp_path):
        path = tmp_path / "battle.json"
        path.write_text(json.dumps({"unit_seconds": 90, "db_path": "x.db"}))

        config = load_config(str(path))
        assert config["unit_seconds"] == 90
        assert config["db_path"] == "x.db"
        assert config["points_per_correct"] == 10

    def test_env_beats_json(self, tmp_path, monkeypatch):
        path = tmp_path / "battle.json"
        path.write_text(json.dumps({"unit_seconds": 90}))
        monkeypatch.setenv("QUIZ_BATTLE_UNIT_SECONDS", "45")
        monkeypatch.setenv("QUIZ_BATTLE_POLL_INTERVAL_SECONDS", "0.5")

        config = load_config(str(path))
        assert config["unit_seconds"] == 45
        assert config["poll_interval_seconds"] == 0.5

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text(
            "QUIZ_BATTLE_DB_PATH=from_dotenv.db\nQUIZ_BATTLE_LOG_LEVEL=DEBUG\n"
        )
        config = load_config()
        assert config["db_path"] == "from_dotenv.db"
        assert config["log_level"] == "DEBUG"

    def test_explicit_env_file(self, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("QUIZ_BATTLE_MATCH_CEILING_SECONDS=600\n")
        assert load_config(env_file=str(env_file))["match_ceiling_seconds"] == 600

    def test_missing_file(self):
        with pytest.raises(ConfigError, match="not found"):
            load_config("nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(str(path))

    def test_json_must_be_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_non_numeric_env(self, monkeypatch):
        monkeypatch.setenv("QUIZ_BATTLE_UNIT_SECONDS", "soon")
        with pytest.raises(ConfigError, match="must be a number"):
            load_config()


class TestValidateConfig:
    """Tests for validate_config."""

    def test_defaults_are_valid(self):
        validate_config(dict(DEFAULTS))

    def test_missing_key(self):
        config = dict(DEFAULTS)
        del config["unit_seconds"]
        with pytest.raises(ConfigError, match="Missing"):
            validate_config(config)

    @pytest.mark.parametrize("value", [0, -5, "120", True])
    def test_bad_duration(self, value):
        config = {**DEFAULTS, "match_ceiling_seconds": value}
        with pytest.raises(ConfigError):
            validate_config(config)

    def test_zero_poll_interval_allowed(self):
        validate_config({**DEFAULTS, "poll_interval_seconds": 0})

    def test_unknown_log_level(self):
        with pytest.raises(ConfigError, match="log_level"):
            validate_config({**DEFAULTS, "log_level": "LOUD"})

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)
