"""Unit tests for src/services/chaos.py"""

import pytest

from src.core.models import AppliedMove, MoveSpec
from src.core.shared_types import Color, PieceType
from src.services.chaos import BOUNDARY_SQUARES, apply_chaos_mutation, triggers_downgrade
from src.services.rules_engine import STARTING_FEN, PythonChessEngine


def _applied(piece: PieceType, to_square: str, color: Color = Color.WHITE) -> AppliedMove:
    return AppliedMove(
        color=color, from_square="d4", to_square=to_square, piece=piece, san="-", lan="-"
    )


def test_boundary_is_the_outer_ring() -> None:
    assert len(BOUNDARY_SQUARES) == 28
    for corner in ["a1", "a8", "h1", "h8"]:
        assert corner in BOUNDARY_SQUARES
    for square in BOUNDARY_SQUARES:
        assert square[0] in "ah" or square[1] in "18"


@pytest.mark.parametrize("square", ["b2", "g7", "d4", "e5", "b7", "g2"])
def test_inner_squares_are_not_boundary(square: str) -> None:
    assert square not in BOUNDARY_SQUARES


@pytest.mark.parametrize(
    "piece, to_square, expected",
    [
        (PieceType.KNIGHT, "h3", True),
        (PieceType.QUEEN, "a5", True),
        (PieceType.QUEEN, "e8", True),
        (PieceType.KNIGHT, "f3", False),
        (PieceType.QUEEN, "d5", False),
        (PieceType.BISHOP, "a6", False),
        (PieceType.ROOK, "a4", False),
        (PieceType.PAWN, "e8", False),
        (PieceType.KING, "e1", False),
    ],
)
def test_trigger_condition(piece: PieceType, to_square: str, expected: bool) -> None:
    assert triggers_downgrade(_applied(piece, to_square)) is expected


def test_knight_on_boundary_becomes_pawn(engine: PythonChessEngine) -> None:
    board = engine.load_position(STARTING_FEN)
    applied = engine.apply_move(board, MoveSpec("g1", "h3"))

    assert apply_chaos_mutation(engine, board, applied)
    assert engine.piece_at(board, "h3") == (PieceType.PAWN, Color.WHITE)
    assert engine.fen(board) == "rnbqkbnr/pppppppp/8/8/8/7P/PPPPPPPP/RNBQKB1R b KQkq - 1 1"


def test_black_piece_downgrades_to_black_pawn(engine: PythonChessEngine) -> None:
    board = engine.load_position(STARTING_FEN)
    engine.apply_move(board, MoveSpec("e2", "e4"))
    applied = engine.apply_move(board, MoveSpec("b8", "a6"))

    assert apply_chaos_mutation(engine, board, applied)
    assert engine.piece_at(board, "a6") == (PieceType.PAWN, Color.BLACK)


def test_no_downgrade_off_boundary(engine: PythonChessEngine) -> None:
    board = engine.load_position(STARTING_FEN)
    applied = engine.apply_move(board, MoveSpec("g1", "f3"))
    fen_after_move = engine.fen(board)

    assert not apply_chaos_mutation(engine, board, applied)
    assert engine.fen(board) == fen_after_move
    assert engine.piece_at(board, "f3") == (PieceType.KNIGHT, Color.WHITE)


def test_promotion_to_queen_on_back_rank_is_kept(engine: PythonChessEngine) -> None:
    """The moved piece is a pawn, so the freshly promoted queen is not downgraded."""
    board = engine.load_position("8/P6k/8/8/8/8/8/K7 w - - 0 1")
    applied = engine.apply_move(board, MoveSpec("a7", "a8", PieceType.QUEEN))

    assert not apply_chaos_mutation(engine, board, applied)
    assert engine.piece_at(board, "a8") == (PieceType.QUEEN, Color.WHITE)
