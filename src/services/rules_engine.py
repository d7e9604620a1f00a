"""
Rules Engine collaborator.

The broker never computes chess rules itself: legality, side to move, FEN notation and terminal
conditions all come from an object implementing RulesEngine. The default implementation wraps python-chess.
"""

import logging
from typing import Optional, Protocol

import chess

from src.core.exceptions import IllegalMoveError
from src.core.models import AppliedMove, MoveSpec
from src.core.shared_types import Color, PieceType

logger = logging.getLogger(__name__)

STARTING_FEN = chess.STARTING_FEN
# Both queens replaced by a rook on the d-file.
HARDCORE_FEN = "rnbrkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBRKBNR w KQkq - 0 1"

_TO_CHESS_COLOR: dict[Color, chess.Color] = {Color.WHITE: chess.WHITE, Color.BLACK: chess.BLACK}
_FROM_CHESS_COLOR: dict[chess.Color, Color] = {value: key for key, value in _TO_CHESS_COLOR.items()}


class RulesEngine(Protocol):
    """Chess rules as consumed by the broker (and, for terminal conditions, by the clients)."""

    def load_position(self, fen: str) -> chess.Board:
        """Build an engine handle from FEN notation."""
        ...

    def fen(self, board: chess.Board) -> str: ...

    def current_turn(self, board: chess.Board) -> Color:
        """Side to move, derived from the position."""
        ...

    def apply_move(self, board: chess.Board, spec: MoveSpec) -> AppliedMove:
        """Apply a legal move in place. Raise IllegalMoveError and leave the board untouched otherwise."""
        ...

    def piece_at(self, board: chess.Board, square: str) -> Optional[tuple[PieceType, Color]]: ...

    def place_piece(self, board: chess.Board, square: str, piece: PieceType, color: Color) -> None:
        """Overwrite whatever stands on the square. No legality check."""
        ...

    def is_check(self, board: chess.Board) -> bool: ...

    def is_checkmate(self, board: chess.Board) -> bool: ...

    def is_draw(self, board: chess.Board) -> bool: ...


def _to_piece_type(chess_piece_type: chess.PieceType) -> PieceType:
    return PieceType(chess.piece_symbol(chess_piece_type))


def _to_chess_piece_type(piece: PieceType) -> chess.PieceType:
    return chess.PIECE_SYMBOLS.index(piece.value)


def _parse_square(square: str) -> chess.Square:
    try:
        return chess.parse_square(square)
    except ValueError as exc:
        raise IllegalMoveError() from exc


class PythonChessEngine:
    """RulesEngine backed by python-chess Boards."""

    def load_position(self, fen: str) -> chess.Board:
        return chess.Board(fen)

    def fen(self, board: chess.Board) -> str:
        return board.fen()

    def current_turn(self, board: chess.Board) -> Color:
        return _FROM_CHESS_COLOR[board.turn]

    def apply_move(self, board: chess.Board, spec: MoveSpec) -> AppliedMove:
        move = self._find_legal_move(board, spec)
        if move is None:
            logger.debug("Rejected move %s -> %s on %s", spec.from_square, spec.to_square, board.fen())
            raise IllegalMoveError()

        captured: Optional[PieceType] = None
        if board.is_en_passant(move):
            captured = PieceType.PAWN
        elif board.is_capture(move):
            captured_piece = board.piece_at(move.to_square)
            captured = _to_piece_type(captured_piece.piece_type) if captured_piece else None

        applied = AppliedMove(
            color=self.current_turn(board),
            from_square=spec.from_square,
            to_square=spec.to_square,
            piece=_to_piece_type(board.piece_type_at(move.from_square)),
            san=board.san(move),
            lan=board.lan(move),
            captured=captured,
            promotion=_to_piece_type(move.promotion) if move.promotion else None,
        )
        board.push(move)
        return applied

    def piece_at(self, board: chess.Board, square: str) -> Optional[tuple[PieceType, Color]]:
        piece = board.piece_at(_parse_square(square))
        if piece is None:
            return None
        return _to_piece_type(piece.piece_type), _FROM_CHESS_COLOR[piece.color]

    def place_piece(self, board: chess.Board, square: str, piece: PieceType, color: Color) -> None:
        board.set_piece_at(
            _parse_square(square),
            chess.Piece(_to_chess_piece_type(piece), _TO_CHESS_COLOR[color]),
        )

    def is_check(self, board: chess.Board) -> bool:
        return board.is_check()

    def is_checkmate(self, board: chess.Board) -> bool:
        return board.is_checkmate()

    def is_draw(self, board: chess.Board) -> bool:
        return (
            board.is_stalemate()
            or board.is_insufficient_material()
            or board.is_fifty_moves()
            or board.is_repetition(3)
        )

    # -- Internal helpers --
    def _find_legal_move(self, board: chess.Board, spec: MoveSpec) -> Optional[chess.Move]:
        """
        Match the request against the legal moves.
        ----
        Clients may always send a promotion piece; it is only used when the move actually promotes.
        """
        from_square = _parse_square(spec.from_square)
        to_square = _parse_square(spec.to_square)

        candidates = []
        if spec.promotion is not None:
            candidates.append(
                chess.Move(from_square, to_square, promotion=_to_chess_piece_type(spec.promotion))
            )
        candidates.append(chess.Move(from_square, to_square))

        return next((move for move in candidates if board.is_legal(move)), None)
