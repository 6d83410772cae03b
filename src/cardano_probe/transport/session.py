"""
WebSocket session with an Ogmios node.

A session is opened in two phases. While connecting, any failure is raised
from ``open()``. Once the socket is confirmed open, the caller's long-lived
error and close handlers take over and a reader task routes JSON-RPC
responses to the request that is waiting for them.
"""

import asyncio
import itertools
import json
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

import websockets
from websockets.exceptions import ConnectionClosed, InvalidMessage, InvalidStatus, WebSocketException

from ..runtime.codec import encode_json
from ..runtime.errors import (
    ErrorCode, NodeNotReadyError, QueryError, SessionClosedError, SessionError,
    error_from_response
)
from .connection import Connection, ConnectionConfig, create_connection_object
from .health import get_server_health

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[BaseException], None]
CloseHandler = Callable[[int, str], None]

ABNORMAL_CLOSURE = 1006


class SessionState(str, Enum):
    """Lifecycle of a node session."""
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    FAILED = "failed"


def _close_info(error: ConnectionClosed) -> Tuple[int, str]:
    frame = error.rcvd or error.sent
    if frame is None:
        return ABNORMAL_CLOSURE, ""
    return frame.code, frame.reason


def _handshake_close_reason(error: WebSocketException) -> Optional[str]:
    """Why the node hung up before the upgrade completed, None for other failures."""
    if isinstance(error, InvalidStatus):
        return f"Node rejected the connection: HTTP {error.response.status_code}"
    if isinstance(error, InvalidMessage) and isinstance(error.__cause__, (EOFError, ConnectionError)):
        return "Connection closed during handshake"
    return None


class NodeSession:
    """
    Persistent JSON-RPC session over a WebSocket.

    The session is owned by a single flow; requests are issued one at a time
    but responses are matched by id regardless.
    """

    def __init__(self, connection: Connection,
                 on_error: Optional[ErrorHandler] = None,
                 on_close: Optional[CloseHandler] = None):
        """
        Initialize session.

        Args:
            connection: Resolved connection
            on_error: Called with any transport error after the session is open
            on_close: Called with (code, reason) when an open session closes
        """
        self.connection = connection
        self.state = SessionState.IDLE
        self.websocket = None
        self.reader_task: Optional[asyncio.Task] = None
        self.close_code: Optional[int] = None
        self.close_reason: Optional[str] = None

        self._on_error = on_error
        self._on_close = on_close
        self._pending: Dict[int, asyncio.Future] = {}
        self._ids = itertools.count(1)

    async def _create_connection(self):
        """Create WebSocket connection."""
        return await websockets.connect(
            self.connection.websocket_address,
            max_size=self.connection.max_payload,
            open_timeout=self.connection.open_timeout,
        )

    async def open(self) -> "NodeSession":
        """
        Open the WebSocket.

        Resolves once the socket is open, or raises exactly once if it never
        gets there.

        Raises:
            SessionClosedError: If the node closed the connection or refused the upgrade
                during the handshake
            SessionError: On any other transport failure
        """
        if self.state is not SessionState.IDLE:
            raise SessionError(f"Session cannot be opened from state '{self.state.value}'")

        self.state = SessionState.CONNECTING
        logger.info(f"Connecting to node: {self.connection.websocket_address}")

        try:
            websocket = await self._create_connection()
        except ConnectionClosed as e:
            code, reason = _close_info(e)
            self.state = SessionState.FAILED
            raise SessionClosedError(reason or "Connection closed before open",
                                     details={"code": code}, cause=e)
        except (InvalidMessage, InvalidStatus) as e:
            self.state = SessionState.FAILED
            reason = _handshake_close_reason(e)
            if reason is None:
                raise SessionError(f"Failed to open session: {e}",
                                   details={"url": self.connection.websocket_address}, cause=e)
            raise SessionClosedError(reason, details={"code": ABNORMAL_CLOSURE}, cause=e)
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            self.state = SessionState.FAILED
            raise SessionError(f"Failed to open session: {e}",
                               details={"url": self.connection.websocket_address}, cause=e)

        self.websocket = websocket
        self.state = SessionState.OPEN
        self.reader_task = asyncio.create_task(self._reader_loop())

        logger.info("Node session open")
        return self

    async def request(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Send one JSON-RPC request and wait for its result.

        Args:
            method: Ogmios method name
            params: Optional method parameters

        Returns:
            The ``result`` member of the response

        Raises:
            SessionError: If the session is not open or fails while waiting
            QueryError: If the node answers with an error or a malformed response
            SubmissionError: If the node rejects a submitted transaction
        """
        if self.state is not SessionState.OPEN:
            raise SessionClosedError(f"Session is {self.state.value}; cannot call {method}",
                                     details={"code": self.close_code})

        request_id = next(self._ids)
        payload: Dict[str, Any] = {"jsonrpc": "2.0", "method": method, "id": request_id}
        if params is not None:
            payload["params"] = params

        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future

        logger.debug(f"Request {request_id}: {method}")
        try:
            await self.websocket.send(encode_json(payload))
        except ConnectionClosed as e:
            self._pending.pop(request_id, None)
            code, reason = _close_info(e)
            raise SessionClosedError(reason or "Session closed", details={"code": code}, cause=e)
        except (OSError, WebSocketException) as e:
            self._pending.pop(request_id, None)
            raise SessionError(f"Failed to send {method}: {e}", cause=e)

        response = await future

        error = error_from_response(response, method)
        if error is not None:
            raise error
        if "result" not in response:
            raise QueryError(f"Malformed response to {method}", ErrorCode.MALFORMED_RESPONSE,
                             details={"response": response})
        return response["result"]

    async def close(self) -> None:
        """Close the session and wait for the reader task to finish."""
        if self.state is SessionState.OPEN and self.websocket is not None:
            logger.info("Closing node session")
            try:
                await self.websocket.close()
            except (OSError, WebSocketException) as e:
                logger.debug(f"Error closing WebSocket: {e}")

        if self.reader_task is not None:
            await self.reader_task
            self.reader_task = None

        self._mark_closed(1000, "closed by client")

    async def __aenter__(self) -> "NodeSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _reader_loop(self) -> None:
        """Route incoming messages until the socket closes."""
        logger.debug("Starting session reader loop")
        try:
            while True:
                message = await self.websocket.recv()
                self._handle_message(message)
        except ConnectionClosed as e:
            code, reason = _close_info(e)
            self._mark_closed(code, reason)
        except Exception as e:
            self._report_error(e)
            self._mark_closed(ABNORMAL_CLOSURE, str(e))
        finally:
            logger.debug("Reader loop exiting")

    def _handle_message(self, message: Any) -> None:
        try:
            data = json.loads(message)
        except (TypeError, ValueError) as e:
            self._report_error(SessionError(f"Invalid JSON message: {e}", cause=e))
            return

        request_id = data.get("id") if isinstance(data, dict) else None
        future = self._pending.pop(request_id, None)
        if future is None:
            logger.warning(f"Dropping message without a pending request: id={request_id}")
            return
        if not future.done():
            future.set_result(data)

    def _report_error(self, error: BaseException) -> None:
        if self._on_error is None:
            logger.error(f"Session error: {error}")
            return
        try:
            self._on_error(error)
        except Exception:
            logger.exception("Session error handler failed")

    def _mark_closed(self, code: int, reason: str) -> None:
        if self.state is not SessionState.OPEN:
            return

        self.state = SessionState.CLOSED
        self.close_code = code
        self.close_reason = reason

        pending, self._pending = self._pending, {}
        for future in pending.values():
            if not future.done():
                future.set_exception(SessionClosedError(reason or "Session closed", details={"code": code}))

        if self._on_close is None:
            logger.info(f"Session closed: {code} {reason}")
            return
        try:
            self._on_close(code, reason)
        except Exception:
            logger.exception("Session close handler failed")


async def open_session(config: Optional[ConnectionConfig],
                       on_error: Optional[ErrorHandler] = None,
                       on_close: Optional[CloseHandler] = None) -> NodeSession:
    """
    Check node health, then open a session.

    Args:
        config: Connection settings
        on_error: Long-lived error handler
        on_close: Long-lived close handler

    Returns:
        An open session

    Raises:
        NodeNotReadyError: If the node does not know a chain tip; no socket is opened
        SessionError: If the health check or the connection fails
    """
    connection = create_connection_object(config)
    health = await get_server_health(connection)
    if not health.is_ready:
        raise NodeNotReadyError(details={"health": health.model_dump(by_alias=True)})

    session = NodeSession(connection, on_error, on_close)
    return await session.open()
