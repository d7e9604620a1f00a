"""
Chaos mode: a queen or knight that lands on the edge of the board is downgraded to a pawn.

The downgrade happens after the Rules Engine accepted and applied the move, and the resulting
position is not checked again (it may well be a position normal chess can never reach).
"""

import logging
from string import ascii_lowercase

import chess

from src.core.models import AppliedMove
from src.core.shared_types import PieceType
from src.services.rules_engine import RulesEngine

logger = logging.getLogger(__name__)

FILES = ascii_lowercase[:8]
RANKS = "12345678"

# Outer ring of the board: ranks 1 and 8 in full, plus files a and h without their corners (28 squares).
BOUNDARY_SQUARES: frozenset[str] = frozenset(
    [f"{file}{rank}" for file in FILES for rank in (RANKS[0], RANKS[-1])]
    + [f"{file}{rank}" for file in (FILES[0], FILES[-1]) for rank in RANKS[1:-1]]
)

DOWNGRADED_PIECES: frozenset[PieceType] = frozenset([PieceType.QUEEN, PieceType.KNIGHT])


def triggers_downgrade(move: AppliedMove) -> bool:
    return move.piece in DOWNGRADED_PIECES and move.to_square in BOUNDARY_SQUARES


def apply_chaos_mutation(engine: RulesEngine, board: chess.Board, move: AppliedMove) -> bool:
    """Downgrade the piece that just moved if the rule applies. Returns True when the board was changed."""
    if not triggers_downgrade(move):
        return False
    engine.place_piece(board, move.to_square, PieceType.PAWN, move.color)
    logger.debug(
        "Chaos: %s %s on %s downgraded to a pawn.", move.color, move.piece, move.to_square
    )
    return True
