"""Wire messages: commands sent by clients and events sent back by the relay.

Every message is a JSON object {"type": ..., "payload": ...}. Both directions are closed tagged unions
discriminated on "type", so an unknown type is a validation error rather than something silently ignored.
"""

import re
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from src.core.exceptions import MalformedCommandError
from src.core.models import AppliedMove, MoveSpec
from src.core.shared_types import Color, PieceType

SQUARE_PATTERN = re.compile(r"^[a-h][1-8]$")
PROMOTION_PIECES = ("q", "r", "b", "n")


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# --- CLIENT -> SERVER ---
class CreateGamePayload(WireModel):
    hardcore: bool = False
    chaos: bool = False


class JoinGamePayload(WireModel):
    game_id: int = Field(alias="gameId", strict=True)


class MovePayloadMove(WireModel):
    from_square: str = Field(alias="from")
    to_square: str = Field(alias="to")
    promotion: Optional[str] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not SQUARE_PATTERN.match(value):
            raise ValueError(f"Cannot interpret {value!r} as a square name.")
        return value

    @field_validator("promotion")
    @classmethod
    def validate_promotion(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        letter = value.lower()
        if letter not in PROMOTION_PIECES:
            raise ValueError(f"Cannot promote to {value!r}.")
        return letter

    def to_spec(self) -> MoveSpec:
        return MoveSpec(
            from_square=self.from_square,
            to_square=self.to_square,
            promotion=PieceType(self.promotion) if self.promotion else None,
        )


class MovePayload(WireModel):
    move: MovePayloadMove


class CreateGameCommand(WireModel):
    type: Literal["createGame"]
    payload: CreateGamePayload = Field(default_factory=CreateGamePayload)

    @field_validator("payload", mode="before")
    @classmethod
    def default_payload(cls, value: Any) -> Any:
        # Clients may send "payload": null for a standard game
        return {} if value is None else value


class JoinGameCommand(WireModel):
    type: Literal["joinGame"]
    payload: JoinGamePayload


class MoveCommand(WireModel):
    type: Literal["move"]
    payload: MovePayload


Command = Annotated[
    Union[CreateGameCommand, JoinGameCommand, MoveCommand],
    Field(discriminator="type"),
]

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def decode_command(raw: str | bytes) -> Command:
    """Parse one inbound message. Anything that is not a well-formed command raises MalformedCommandError."""
    try:
        return _command_adapter.validate_json(raw)
    except ValidationError as exc:
        raise MalformedCommandError() from exc


# --- SERVER -> CLIENT ---
class GameInfoPayload(WireModel):
    game_id: int = Field(serialization_alias="gameId")
    player_color: Color = Field(serialization_alias="playerColor")
    fen: str
    is_hardcore: bool = Field(serialization_alias="isHardcore")
    is_chaos: bool = Field(serialization_alias="isChaos")


class MoveInfo(WireModel):
    color: Color
    from_square: str = Field(serialization_alias="from")
    to_square: str = Field(serialization_alias="to")
    piece: PieceType
    san: str
    lan: str
    captured: Optional[PieceType] = None
    promotion: Optional[PieceType] = None

    @classmethod
    def from_applied(cls, move: AppliedMove) -> "MoveInfo":
        return cls(
            color=move.color,
            from_square=move.from_square,
            to_square=move.to_square,
            piece=move.piece,
            san=move.san,
            lan=move.lan,
            captured=move.captured,
            promotion=move.promotion,
        )


class GameMovePayload(WireModel):
    move: MoveInfo
    fen: str


class EmptyPayload(WireModel):
    pass


class Event(WireModel):
    def to_message(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GameCreatedEvent(Event):
    type: Literal["gameCreated"] = "gameCreated"
    payload: GameInfoPayload


class GameJoinedEvent(Event):
    type: Literal["gameJoined"] = "gameJoined"
    payload: GameInfoPayload


class OpponentJoinedEvent(Event):
    type: Literal["opponentJoined"] = "opponentJoined"
    payload: EmptyPayload = Field(default_factory=EmptyPayload)


class GameMoveEvent(Event):
    type: Literal["gameMove"] = "gameMove"
    payload: GameMovePayload


class OpponentLeftEvent(Event):
    type: Literal["opponentLeft"] = "opponentLeft"
    payload: EmptyPayload = Field(default_factory=EmptyPayload)


class ErrorEvent(Event):
    type: Literal["error"] = "error"
    payload: str
