"""Backend boundary - the streaming session and its actors.

This package handles:
- The session protocol the core depends on
- The login handshake with a bounded wait
- A local-library session played through mpv
- The catalog actor answering searches
"""

from .session import (
    ConnectionState,
    Session,
    wait_for_login,
    connect_session,
)
from .catalog import CatalogActor

__all__ = [
    "ConnectionState",
    "Session",
    "wait_for_login",
    "connect_session",
    "CatalogActor",
]
