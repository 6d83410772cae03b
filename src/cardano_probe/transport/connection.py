"""
Connection settings for an Ogmios node.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 1337
MAX_PAYLOAD = 128 * 1024 * 1024  # 128MB


@dataclass(frozen=True)
class ConnectionConfig:
    """User supplied connection settings."""
    host: Optional[str] = None
    port: Optional[int] = None
    tls: bool = False
    max_payload: Optional[int] = None
    open_timeout: float = 10.0


@dataclass(frozen=True)
class Connection:
    """Resolved connection with HTTP and WebSocket addresses."""
    host: str
    port: int
    tls: bool
    max_payload: int
    http_address: str
    websocket_address: str
    open_timeout: float = 10.0


def create_connection_object(config: Optional[ConnectionConfig] = None) -> Connection:
    """
    Resolve connection settings into addresses.

    The port only appears in the addresses when it was configured, so a host
    behind a reverse proxy is reached on the scheme's default port.

    Args:
        config: Connection settings, defaults are used for missing values

    Returns:
        Resolved connection
    """
    config = config or ConnectionConfig()
    host = config.host or DEFAULT_HOST
    port = config.port or DEFAULT_PORT
    max_payload = config.max_payload or MAX_PAYLOAD

    host_and_port = f"{host}:{config.port}" if config.port else host
    http_scheme = "https" if config.tls else "http"
    ws_scheme = "wss" if config.tls else "ws"

    return Connection(
        host=host,
        port=port,
        tls=config.tls,
        max_payload=max_payload,
        http_address=f"{http_scheme}://{host_and_port}",
        websocket_address=f"{ws_scheme}://{host_and_port}",
        open_timeout=config.open_timeout,
    )
