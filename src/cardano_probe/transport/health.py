"""
Ogmios health endpoint.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp
from pydantic import BaseModel, Field, ValidationError

from ..runtime.errors import SessionError
from .connection import Connection

logger = logging.getLogger(__name__)

HEALTH_TIMEOUT = 10.0


class ServerHealth(BaseModel):
    """Subset of the Ogmios /health document the probe relies on."""

    last_tip_update: Optional[str] = Field(default=None, alias="lastTipUpdate")
    last_known_tip: Optional[Dict[str, Any]] = Field(default=None, alias="lastKnownTip")
    network_synchronization: Optional[float] = Field(default=None, alias="networkSynchronization")
    connection_status: Optional[str] = Field(default=None, alias="connectionStatus")
    version: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "allow"}

    @property
    def is_ready(self) -> bool:
        """The node has seen at least one chain tip."""
        return self.last_tip_update is not None


async def get_server_health(connection: Connection, timeout: float = HEALTH_TIMEOUT) -> ServerHealth:
    """
    Fetch the node's health document.

    Args:
        connection: Resolved connection
        timeout: Total request timeout in seconds

    Returns:
        Parsed health document

    Raises:
        SessionError: If the endpoint is unreachable or answers garbage
    """
    url = f"{connection.http_address}/health"
    logger.debug(f"Checking node health: {url}")

    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                document = await response.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        raise SessionError(f"Health check failed: {e}", details={"url": url}, cause=e)

    try:
        return ServerHealth.model_validate(document)
    except ValidationError as e:
        raise SessionError("Malformed health document", details={"url": url}, cause=e)
