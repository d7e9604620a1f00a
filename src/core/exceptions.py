"""
Custom exceptions shared across layers.

Every GameError carries a human-readable message that is safe to send back to the client.
"""

from typing import Optional


class GameError(Exception):
    """Top-level exception for anything the relay reports back to a player."""

    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class SessionNotFoundError(GameError):
    default_message = "Game not found."


class SessionFullError(GameError):
    default_message = "Game not found or is full."


class AlreadyInGameError(GameError):
    default_message = "You are already in a game."


class IllegalMoveError(GameError):
    default_message = "Invalid move."


class NotYourTurnError(GameError):
    default_message = "It is not your turn."


class MalformedCommandError(GameError):
    default_message = "Malformed message."


class ConfigError(Exception):
    """Raised at startup when the environment holds an unusable setting."""
