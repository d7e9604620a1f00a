"""In-memory registry of the running game sessions."""

import itertools
import logging
from typing import Optional

from src.core.models import GameSession, VariantFlags
from src.services.rules_engine import HARDCORE_FEN, STARTING_FEN, RulesEngine

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Owns session creation, lookup and deletion.
    ----
    Not thread-safe: only the broker's serialized command path may touch it.
    Identifiers come from a counter that only goes up, so an id is never handed out twice.
    """

    def __init__(self, engine: RulesEngine) -> None:
        self.engine = engine
        self._sessions: dict[int, GameSession] = {}
        self._ids = itertools.count(1)

    def create(self, flags: VariantFlags) -> GameSession:
        """Allocate the next id and store a fresh session at its starting position."""
        session_id = next(self._ids)
        starting_fen = HARDCORE_FEN if flags.hardcore else STARTING_FEN
        session = GameSession(
            id=session_id,
            board=self.engine.load_position(starting_fen),
            flags=flags,
        )
        self._sessions[session_id] = session
        logger.info(
            "Game %d created (hardcore=%s, chaos=%s).", session_id, flags.hardcore, flags.chaos
        )
        return session

    def get(self, session_id: int) -> Optional[GameSession]:
        return self._sessions.get(session_id)

    def remove(self, session_id: int) -> None:
        """Delete a session. Removing an unknown id does nothing."""
        if self._sessions.pop(session_id, None) is not None:
            logger.info("Game %d removed.", session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
