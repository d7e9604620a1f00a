"""
Domain data model of the relay.

The Service layer (broker, registry) and the Rules Engine adapter exchange these objects.
The API layer converts them into wire messages (see src/api/models.py).
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from src.core.shared_types import Color, PieceType, SessionStatus

MAX_PLAYERS = 2
SEAT_COLORS: tuple[Color, ...] = (Color.WHITE, Color.BLACK)


class ConnectionHandle(Protocol):
    """One participant's message channel, as seen by the broker."""

    @property
    def connection_id(self) -> str: ...

    def send(self, message: dict[str, Any]) -> None:
        """Queue a message for delivery. Must never block the caller."""
        ...


@dataclass(frozen=True)
class VariantFlags:
    hardcore: bool = False
    chaos: bool = False


@dataclass(frozen=True)
class PlayerSeat:
    """What a connection is bound to once it created or joined a game."""

    session_id: int
    color: Color


@dataclass(frozen=True)
class MoveSpec:
    """A move as requested by a player, in algebraic square names ('e2' -> 'e4')."""

    from_square: str
    to_square: str
    promotion: Optional[PieceType] = None


@dataclass(frozen=True)
class AppliedMove:
    """A move accepted by the Rules Engine."""

    color: Color
    from_square: str
    to_square: str
    piece: PieceType
    san: str
    lan: str
    captured: Optional[PieceType] = None
    promotion: Optional[PieceType] = None


@dataclass
class GameSession:
    id: int
    board: Any  # Rules Engine handle, only ever touched through the RulesEngine
    flags: VariantFlags
    players: list[ConnectionHandle] = field(default_factory=list)
    status: SessionStatus = SessionStatus.AWAITING_OPPONENT

    @property
    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    def seat(self, connection: ConnectionHandle) -> None:
        """Place a connection in the next free slot. Slot 0 plays white, slot 1 black."""
        if self.is_full:
            raise ValueError(f"Session {self.id} already has {MAX_PLAYERS} players.")
        self.players.append(connection)

    def color_of_slot(self, slot: int) -> Color:
        return SEAT_COLORS[slot]

    def opponents_of(self, connection: ConnectionHandle) -> list[ConnectionHandle]:
        return [
            player
            for player in self.players
            if player is not connection
        ]
