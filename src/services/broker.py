"""
Game Session Broker: the protocol state machine of the relay.

Consumes decoded commands from connections, mutates GameSession state through the Rules Engine and
emits events to one or both players. Every public method runs to completion before the next one starts
(see src/relay/dispatcher.py), so neither the registry nor the sessions need locking.
"""

import logging
from typing import Optional

from src.api.models import (
    Command,
    CreateGameCommand,
    ErrorEvent,
    Event,
    GameCreatedEvent,
    GameInfoPayload,
    GameJoinedEvent,
    GameMoveEvent,
    GameMovePayload,
    JoinGameCommand,
    MoveCommand,
    MoveInfo,
    OpponentJoinedEvent,
    OpponentLeftEvent,
    decode_command,
)
from src.core.exceptions import (
    AlreadyInGameError,
    GameError,
    NotYourTurnError,
    SessionFullError,
    SessionNotFoundError,
)
from src.core.models import ConnectionHandle, GameSession, PlayerSeat, VariantFlags
from src.core.shared_types import SessionStatus
from src.services.chaos import apply_chaos_mutation
from src.services.registry import SessionRegistry
from src.services.rules_engine import RulesEngine

logger = logging.getLogger(__name__)

# Missing and full games are reported with the same text
JOIN_REJECTED = "Game not found or is full."


class GameBroker:
    """Routes player commands to game sessions."""

    def __init__(self, registry: SessionRegistry, engine: RulesEngine) -> None:
        self.registry = registry
        self.engine = engine
        self._seats: dict[ConnectionHandle, PlayerSeat] = {}

    # -- Entry points used by the transport --
    def handle_message(self, connection: ConnectionHandle, raw: str | bytes) -> None:
        """Decode and execute one inbound message. Failures are reported to the sender only."""
        try:
            command = decode_command(raw)
            logger.debug("[%s] %s", connection.connection_id, command.type)
            self.handle_command(connection, command)
        except GameError as exc:
            logger.info("[%s] rejected: %s", connection.connection_id, exc.message)
            self._send(connection, ErrorEvent(payload=exc.message))

    def handle_command(self, connection: ConnectionHandle, command: Command) -> None:
        match command:
            case CreateGameCommand():
                self.create_game(connection, command)
            case JoinGameCommand():
                self.join_game(connection, command)
            case MoveCommand():
                self.make_move(connection, command)

    def disconnect(self, connection: ConnectionHandle) -> None:
        """The connection closed: end its game (if any) and tell the opponent."""
        seat = self._seats.pop(connection, None)
        if seat is None:
            return

        session = self.registry.get(seat.session_id)
        if session is None:
            # the opponent left first and the game is already gone
            return

        logger.info("Player %s left game %d.", seat.color, session.id)
        for opponent in session.opponents_of(connection):
            self._send(opponent, OpponentLeftEvent())
        session.status = SessionStatus.TERMINATED
        self.registry.remove(session.id)

    # -- Commands --
    def create_game(self, connection: ConnectionHandle, command: CreateGameCommand) -> None:
        """First player requested a new game. The creator always plays white."""
        self._ensure_unassigned(connection)

        flags = VariantFlags(hardcore=command.payload.hardcore, chaos=command.payload.chaos)
        session = self.registry.create(flags)
        session.seat(connection)
        seat = PlayerSeat(session_id=session.id, color=session.color_of_slot(0))
        self._seats[connection] = seat

        self._send(connection, GameCreatedEvent(payload=self._game_info(session, seat)))

    def join_game(self, connection: ConnectionHandle, command: JoinGameCommand) -> None:
        """Second player requested to join an open game. The joiner always plays black."""
        self._ensure_unassigned(connection)

        session = self.registry.get(command.payload.game_id)
        if session is None:
            raise SessionNotFoundError(JOIN_REJECTED)
        if session.is_full or session.status != SessionStatus.AWAITING_OPPONENT:
            raise SessionFullError(JOIN_REJECTED)

        session.seat(connection)
        session.status = SessionStatus.ACTIVE
        seat = PlayerSeat(session_id=session.id, color=session.color_of_slot(1))
        self._seats[connection] = seat
        logger.info("Player %s joined game %d.", seat.color, session.id)

        self._send(connection, GameJoinedEvent(payload=self._game_info(session, seat)))
        self._send(session.players[0], OpponentJoinedEvent())

    def make_move(self, connection: ConnectionHandle, command: MoveCommand) -> None:
        """Validate and apply a move, then broadcast the new position to both players."""
        seat = self._seats.get(connection)
        session = self.registry.get(seat.session_id) if seat else None
        if seat is None or session is None:
            raise SessionNotFoundError()

        # Side to move is read from the position itself, never tracked separately
        if seat.color != self.engine.current_turn(session.board):
            raise NotYourTurnError()

        applied = self.engine.apply_move(session.board, command.payload.move.to_spec())
        if session.flags.chaos:
            apply_chaos_mutation(self.engine, session.board, applied)

        event = GameMoveEvent(
            payload=GameMovePayload(
                move=MoveInfo.from_applied(applied), fen=self.engine.fen(session.board)
            )
        )
        logger.debug("Game %d: %s played %s.", session.id, seat.color, applied.san)
        for player in session.players:
            self._send(player, event)

    # -- Internal helpers --
    def seat_of(self, connection: ConnectionHandle) -> Optional[PlayerSeat]:
        return self._seats.get(connection)

    def _ensure_unassigned(self, connection: ConnectionHandle) -> None:
        if connection in self._seats:
            raise AlreadyInGameError()

    def _game_info(self, session: GameSession, seat: PlayerSeat) -> GameInfoPayload:
        return GameInfoPayload(
            game_id=session.id,
            player_color=seat.color,
            fen=self.engine.fen(session.board),
            is_hardcore=session.flags.hardcore,
            is_chaos=session.flags.chaos,
        )

    def _send(self, connection: ConnectionHandle, event: Event) -> None:
        connection.send(event.to_message())
