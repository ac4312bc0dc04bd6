# Area: Shared
"""
Shared infrastructure.

This package contains:
- Channel interface and the in-process InMemoryHub
- Collaborator interfaces and SQLite implementations
- Logging setup and protocol logging
"""

from .channel import InMemoryHub
from .collaborators import (
    SqliteGameHistoryStore,
    SqliteRoomRegistry,
    StaticIdentityProvider,
    resolve_display_name,
)
from .database import init_database
from .heartbeat import IntervalTracker
from .logging_config import (
    disable_protocol_mode,
    enable_protocol_mode,
    is_protocol_mode_enabled,
    log_error,
    setup_logging,
)
from .protocol_logger import ProtocolLogger, get_protocol_logger

__all__ = [
    "InMemoryHub",
    "IntervalTracker",
    "ProtocolLogger",
    "SqliteGameHistoryStore",
    "SqliteRoomRegistry",
    "StaticIdentityProvider",
    "disable_protocol_mode",
    "enable_protocol_mode",
    "get_protocol_logger",
    "init_database",
    "is_protocol_mode_enabled",
    "log_error",
    "resolve_display_name",
    "setup_logging",
]
