"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/helpers required for testing multiple layers.
"""

import json
from typing import Any

import pytest

from src.services.broker import GameBroker
from src.services.registry import SessionRegistry
from src.services.rules_engine import PythonChessEngine


class RecordingConnection:
    """Mock a ConnectionHandle: keeps every message the broker sends to it."""

    def __init__(self, connection_id: str) -> None:
        self._connection_id = connection_id
        self.sent: list[dict[str, Any]] = []

    @property
    def connection_id(self) -> str:
        return self._connection_id

    def send(self, message: dict[str, Any]) -> None:
        self.sent.append(message)

    @property
    def last(self) -> dict[str, Any]:
        return self.sent[-1]

    def of_type(self, message_type: str) -> list[dict[str, Any]]:
        return [message for message in self.sent if message["type"] == message_type]

    def clear(self) -> None:
        self.sent.clear()


def command(message_type: str, payload: Any = None) -> str:
    """Encode a client command the way the browser does."""
    return json.dumps({"type": message_type, "payload": payload})


def move_command(from_square: str, to_square: str, promotion: str | None = "q") -> str:
    move: dict[str, Any] = {"from": from_square, "to": to_square}
    if promotion is not None:
        move["promotion"] = promotion
    return command("move", {"move": move})


@pytest.fixture
def engine() -> PythonChessEngine:
    return PythonChessEngine()


@pytest.fixture
def registry(engine: PythonChessEngine) -> SessionRegistry:
    return SessionRegistry(engine)


@pytest.fixture
def broker(registry: SessionRegistry, engine: PythonChessEngine) -> GameBroker:
    return GameBroker(registry, engine)


@pytest.fixture
def white() -> RecordingConnection:
    return RecordingConnection("white")


@pytest.fixture
def black() -> RecordingConnection:
    return RecordingConnection("black")
