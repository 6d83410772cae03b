"""
Transport layer for the Ogmios node.

Provides the health check and the persistent WebSocket session.
"""

from .connection import Connection, ConnectionConfig, create_connection_object
from .health import ServerHealth, get_server_health
from .session import NodeSession, SessionState, open_session

__all__ = [
    "Connection",
    "ConnectionConfig",
    "create_connection_object",
    "ServerHealth",
    "get_server_health",
    "NodeSession",
    "SessionState",
    "open_session"
]
