"""
Type definitions used across layers
"""

from enum import StrEnum


class SessionStatus(StrEnum):
    AWAITING_OPPONENT = "awaiting opponent"
    ACTIVE = "active"
    TERMINATED = "terminated"


# --- Values follow the letters used in FEN strings, so they go on the wire as-is.
class Color(StrEnum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"
