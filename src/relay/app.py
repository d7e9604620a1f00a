"""FastAPI application exposing the relay as a single WebSocket endpoint."""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, WebSocket

from src.relay.connection import WebSocketConnection
from src.relay.dispatcher import CommandDispatcher
from src.services.broker import GameBroker
from src.services.registry import SessionRegistry
from src.services.rules_engine import PythonChessEngine

logger = logging.getLogger(__name__)


def build_broker() -> GameBroker:
    engine = PythonChessEngine()
    return GameBroker(SessionRegistry(engine), engine)


def create_app(broker: Optional[GameBroker] = None) -> FastAPI:
    """Wire broker, dispatcher and transport together."""
    broker = broker or build_broker()
    dispatcher = CommandDispatcher(broker)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        task = asyncio.create_task(dispatcher.run())
        logger.info("Chess relay accepting connections.")
        try:
            yield
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    app = FastAPI(title="Chess Relay", lifespan=lifespan)
    app.state.broker = broker
    app.state.dispatcher = dispatcher

    @app.websocket("/")
    async def relay_endpoint(websocket: WebSocket) -> None:
        await websocket.accept()
        connection = WebSocketConnection(websocket)
        writer = asyncio.create_task(connection.run_writer())
        logger.info("[%s] connected.", connection.connection_id)

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""
                dispatcher.submit_message(connection, raw)
        finally:
            dispatcher.submit_close(connection)
            connection.close()
            await writer
            logger.info("[%s] disconnected.", connection.connection_id)

    return app
