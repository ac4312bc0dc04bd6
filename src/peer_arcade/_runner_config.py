# Area: Shared
"""
peer_arcade._runner_config — Runner Configuration
=================================================

Defaults, loading (JSON file, then ``.env`` / environment overrides)
and validation for PeerRunner and the CLI.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from ._engines import GAME_TYPES
from ._roles import is_valid_room_code, normalize_room_code
from .errors import ConfigError

logger = logging.getLogger("peer_arcade")

DEFAULTS: Dict[str, Any] = {
    "game_type": "caro",
    "room_code": None,
    "display_name": None,
    "user_id": None,
    "connect_timeout_seconds": 10,
    "heartbeat_interval_seconds": 60,
    "room_expiry_seconds": 180,
    "log_file": "peer_arcade.log",
    "db_path": "peer_arcade.db",
    "chat_history_limit": 100,
    "emoji_ttl_seconds": 3,
}

# env var -> (config key, converter)
ENV_MAPPINGS = {
    "PEER_ARCADE_GAME": ("game_type", str),
    "PEER_ARCADE_ROOM": ("room_code", str),
    "PEER_ARCADE_NAME": ("display_name", str),
    "PEER_ARCADE_USER_ID": ("user_id", str),
    "PEER_ARCADE_CONNECT_TIMEOUT": ("connect_timeout_seconds", float),
    "PEER_ARCADE_HEARTBEAT_INTERVAL": ("heartbeat_interval_seconds", float),
    "PEER_ARCADE_DB_PATH": ("db_path", str),
    "PEER_ARCADE_LOG_FILE": ("log_file", str),
}

POSITIVE_NUMBER_KEYS = [
    "connect_timeout_seconds",
    "heartbeat_interval_seconds",
    "room_expiry_seconds",
    "emoji_ttl_seconds",
]


def load_config(config_path: Optional[str] = None, env_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the runner config.

    Precedence: defaults < JSON file < environment (``.env`` included).

    Args:
        config_path: Optional JSON config file
        env_file: Optional ``.env`` path (default: search from cwd)

    Returns:
        Config dict (not yet validated)

    Raises:
        ConfigError: If a file or environment value cannot be read
    """
    config: Dict[str, Any] = dict(DEFAULTS)
    problems: List[str] = []

    if config_path:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    config.update(json.load(f))
            except json.JSONDecodeError as e:
                problems.append(f"{config_path}: invalid JSON ({e})")
        else:
            logger.warning(f"Config file not found: {config_path}")

    load_dotenv(env_file)
    for env_key, (config_key, convert) in ENV_MAPPINGS.items():
        if env_key in os.environ:
            try:
                config[config_key] = convert(os.environ[env_key])
            except ValueError:
                problems.append(f"{env_key} must be a number, got '{os.environ[env_key]}'")

    if problems:
        raise ConfigError(problems)
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate a config dict.

    Raises:
        ConfigError: Listing every problem found
    """
    problems: List[str] = []

    game_type = config.get("game_type")
    if game_type not in GAME_TYPES:
        problems.append(f"game_type must be one of {list(GAME_TYPES)}, got '{game_type}'")

    room_code = config.get("room_code")
    if room_code and not is_valid_room_code(normalize_room_code(room_code, game_type), game_type):
        problems.append(f"room_code '{room_code}' is not a valid {game_type} room code")

    for key in POSITIVE_NUMBER_KEYS:
        value = config.get(key)
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            problems.append(f"{key} must be a positive number, got {value!r}")

    limit = config.get("chat_history_limit")
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        problems.append(f"chat_history_limit must be a positive integer, got {limit!r}")

    if problems:
        raise ConfigError(problems)
