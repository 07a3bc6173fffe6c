# Area: Shared
"""
quiz_battle._config — Battle configuration
==========================================

Defaults, loading and validation of the engine's settings.

Sources, later wins:
    1. DEFAULTS below
    2. JSON config file (``--config``)
    3. Environment variables (QUIZ_BATTLE_*), with a ``.env`` file
       in the working directory loaded first
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger("quiz_battle.config")

DEFAULTS: Dict[str, Any] = {
    "db_path": "quiz_battle.db",
    "log_file": "quiz_battle.log",
    "log_level": "INFO",
    "unit_seconds": 120,
    "points_per_correct": 10,
    "monitor_interval_seconds": 10,
    "match_ceiling_seconds": 300,
    "forfeit_threshold_seconds": 1800,
    "invitation_ttl_seconds": 86400,
    "poll_interval_seconds": 1,
    "default_difficulty": "moyen",
}

ENV_MAPPINGS = {
    "QUIZ_BATTLE_DB_PATH": "db_path",
    "QUIZ_BATTLE_LOG_FILE": "log_file",
    "QUIZ_BATTLE_LOG_LEVEL": "log_level",
    "QUIZ_BATTLE_UNIT_SECONDS": "unit_seconds",
    "QUIZ_BATTLE_MATCH_CEILING_SECONDS": "match_ceiling_seconds",
    "QUIZ_BATTLE_FORFEIT_THRESHOLD_SECONDS": "forfeit_threshold_seconds",
    "QUIZ_BATTLE_MONITOR_INTERVAL_SECONDS": "monitor_interval_seconds",
    "QUIZ_BATTLE_POLL_INTERVAL_SECONDS": "poll_interval_seconds",
}

DURATION_KEYS = [
    "unit_seconds",
    "monitor_interval_seconds",
    "match_ceiling_seconds",
    "forfeit_threshold_seconds",
    "invitation_ttl_seconds",
]

REQUIRED_CONFIG_KEYS = list(DEFAULTS)

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _as_number(key: str, value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {value!r}") from None
    return int(number) if number.is_integer() else number


def load_config(
    config_path: Optional[str] = None, env_file: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build the effective configuration.

    Args:
        config_path: Optional JSON file with overrides
        env_file: Optional .env path, defaults to ./.env

    Raises:
        ConfigError: If the JSON file cannot be read or a numeric
            environment value does not parse
    """
    load_dotenv(env_file or Path.cwd() / ".env")
    config: Dict[str, Any] = dict(DEFAULTS)

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        try:
            with open(path, encoding="utf-8") as f:
                overrides = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e
        if not isinstance(overrides, dict):
            raise ConfigError(f"{config_path} must contain a JSON object")
        config.update(overrides)

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            value: Any = os.environ[env_key]
            if isinstance(DEFAULTS[config_key], (int, float)):
                value = _as_number(env_key, value)
            config[config_key] = value

    logger.debug("Effective config: %s", config)
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration keys and values.

    Raises:
        ConfigError: If keys are missing or values are out of range
    """
    missing = [k for k in REQUIRED_CONFIG_KEYS if k not in config]
    if missing:
        raise ConfigError(f"Missing required config keys: {missing}")

    for key in DURATION_KEYS + ["points_per_correct"]:
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigError(f"{key} must be a positive number, got {value!r}")

    poll = config["poll_interval_seconds"]
    if isinstance(poll, bool) or not isinstance(poll, (int, float)) or poll < 0:
        raise ConfigError(f"poll_interval_seconds must be >= 0, got {poll!r}")

    if str(config["log_level"]).upper() not in LOG_LEVELS:
        raise ConfigError(f"Unknown log_level {config['log_level']!r}")
