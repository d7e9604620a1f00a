"""WebSocket implementation of a ConnectionHandle."""

import asyncio
import logging
from typing import Any, Optional
from uuid import uuid4

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


class WebSocketConnection:
    """
    A connected player.
    ----
    send() only puts the message on an outbox; run_writer() drains it onto the socket.
    A slow peer therefore only delays its own messages, never the broker.
    """

    def __init__(self, websocket: WebSocket, connection_id: Optional[str] = None) -> None:
        self.websocket = websocket
        self._connection_id = connection_id or uuid4().hex
        self._outbox: asyncio.Queue[Optional[dict[str, Any]]] = asyncio.Queue()
        self.closed = False

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def pending(self) -> int:
        """Messages queued but not yet written to the socket."""
        return self._outbox.qsize()

    def send(self, message: dict[str, Any]) -> None:
        if self.closed:
            logger.debug("[%s] dropping %s, connection closed.", self.connection_id, message.get("type"))
            return
        self._outbox.put_nowait(message)

    def close(self) -> None:
        """Stop accepting messages. The writer finishes once the outbox is empty."""
        if self.closed:
            return
        self.closed = True
        self._outbox.put_nowait(None)

    async def run_writer(self) -> None:
        while True:
            message = await self._outbox.get()
            if message is None:
                return
            try:
                await self.websocket.send_json(message)
            except (WebSocketDisconnect, RuntimeError, OSError) as exc:
                # No retries: the reader sees the close and tears the game down
                logger.debug("[%s] send failed: %r", self.connection_id, exc)
                self.closed = True
                return
