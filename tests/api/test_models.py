import json

import pytest

from src.api.models import (
    CreateGameCommand,
    ErrorEvent,
    GameInfoPayload,
    GameJoinedEvent,
    JoinGameCommand,
    MoveCommand,
    OpponentLeftEvent,
    decode_command,
)
from src.core.exceptions import MalformedCommandError
from src.core.models import MoveSpec
from src.core.shared_types import Color, PieceType


# -- Decoding - commands --
def test_decode_create_game() -> None:
    command = decode_command('{"type": "createGame", "payload": {"hardcore": true}}')
    assert isinstance(command, CreateGameCommand)
    assert command.payload.hardcore is True
    assert command.payload.chaos is False


def test_decode_create_game_without_payload() -> None:
    command = decode_command('{"type": "createGame"}')
    assert isinstance(command, CreateGameCommand)
    assert not command.payload.hardcore


def test_decode_join_game() -> None:
    command = decode_command('{"type": "joinGame", "payload": {"gameId": 12}}')
    assert isinstance(command, JoinGameCommand)
    assert command.payload.game_id == 12


def test_decode_move_to_spec() -> None:
    raw = json.dumps({"type": "move", "payload": {"move": {"from": "a7", "to": "a8", "promotion": "Q"}}})
    command = decode_command(raw)
    assert isinstance(command, MoveCommand)
    assert command.payload.move.to_spec() == MoveSpec("a7", "a8", PieceType.QUEEN)


def test_decode_move_without_promotion() -> None:
    raw = json.dumps({"type": "move", "payload": {"move": {"from": "e2", "to": "e4"}}})
    assert decode_command(raw).payload.move.to_spec() == MoveSpec("e2", "e4")


@pytest.mark.parametrize(
    "move",
    [
        {"from": "e2", "to": "e9"},
        {"from": "i2", "to": "e4"},
        {"from": "e2e4", "to": "e4"},
        {"from": "e7", "to": "e8", "promotion": "k"},
        {"to": "e4"},
    ],
)
def test_invalid_move_payloads(move: dict) -> None:
    with pytest.raises(MalformedCommandError):
        decode_command(json.dumps({"type": "move", "payload": {"move": move}}))


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "{",
        '"createGame"',
        '{"type": "createGame", "payload": {"hardcore": "very"}}',
        '{"type": "joinGame", "payload": {"gameId": 1.5}}',
        '{"type": "joinGame", "payload": {"gameId": null}}',
        '{"type": "spectate", "payload": {"gameId": 1}}',
    ],
)
def test_malformed_commands(raw: str) -> None:
    with pytest.raises(MalformedCommandError) as exc_info:
        decode_command(raw)
    assert exc_info.value.message == "Malformed message."


# -- Encoding - events --
def test_game_info_uses_wire_names() -> None:
    event = GameJoinedEvent(
        payload=GameInfoPayload(
            game_id=3, player_color=Color.BLACK, fen="fen", is_hardcore=True, is_chaos=False
        )
    )
    assert event.to_message() == {
        "type": "gameJoined",
        "payload": {
            "gameId": 3,
            "playerColor": "b",
            "fen": "fen",
            "isHardcore": True,
            "isChaos": False,
        },
    }


def test_error_payload_is_plain_text() -> None:
    assert ErrorEvent(payload="Invalid move.").to_message() == {"type": "error", "payload": "Invalid move."}


def test_empty_events() -> None:
    assert OpponentLeftEvent().to_message() == {"type": "opponentLeft", "payload": {}}
