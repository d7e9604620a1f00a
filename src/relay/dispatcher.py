"""
Single serialized command stream.

Reader coroutines (one per connection) only enqueue; one consumer task hands each item to the broker
and lets it run to completion before taking the next. Items from one connection keep their order.
"""

import asyncio
import logging
from dataclasses import dataclass

from src.core.models import ConnectionHandle
from src.services.broker import GameBroker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InboundMessage:
    connection: ConnectionHandle
    raw: str | bytes


@dataclass(frozen=True)
class ConnectionClosed:
    connection: ConnectionHandle


Inbound = InboundMessage | ConnectionClosed


class CommandDispatcher:
    def __init__(self, broker: GameBroker) -> None:
        self.broker = broker
        self._queue: asyncio.Queue[Inbound] = asyncio.Queue()

    def submit_message(self, connection: ConnectionHandle, raw: str | bytes) -> None:
        self._queue.put_nowait(InboundMessage(connection, raw))

    def submit_close(self, connection: ConnectionHandle) -> None:
        self._queue.put_nowait(ConnectionClosed(connection))

    async def run(self) -> None:
        """Consume the queue forever (cancel the task to stop)."""
        while True:
            item = await self._queue.get()
            try:
                self.process(item)
            except Exception:
                # one bad item must not stop the loop for every other game
                logger.exception("[%s] failed to process %r", item.connection.connection_id, item)
            finally:
                self._queue.task_done()

    async def drain(self) -> None:
        """Wait until everything submitted so far has been processed."""
        await self._queue.join()

    def process(self, item: Inbound) -> None:
        match item:
            case InboundMessage(connection=connection, raw=raw):
                self.broker.handle_message(connection, raw)
            case ConnectionClosed(connection=connection):
                self.broker.disconnect(connection)
