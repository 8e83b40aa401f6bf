"""
Domain errors for the score keeper.

Every failure the engine can report is a subclass of `ScoreKeeperError`, so
the application layer can catch them in one place and turn them into
user-facing messages. A rejected operation never changes any match state.
"""

from __future__ import annotations

from typing import Any


class ScoreKeeperError(Exception):
    """Base class for all score keeper validation failures."""


class InvalidWinner(ScoreKeeperError):
    """The round's winner is missing or not part of the roster."""

    def __init__(self, winner_id: Any) -> None:
        self.winner_id = winner_id
        if not winner_id:
            super().__init__("A round needs a winner.")
        else:
            super().__init__(f"Winner {winner_id} is not playing in this match.")


class InvalidTileCount(ScoreKeeperError):
    """A tile count could not be read as a whole number."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Tile count must be a whole number, got {value!r}.")


class InsufficientPlayers(ScoreKeeperError):
    """Fewer than two players."""


class TooManyPlayers(ScoreKeeperError):
    """More players than there are seats."""


class InvalidMatchStatus(ScoreKeeperError):
    """The operation is not allowed in the match's current status."""


class UnknownPlayer(ScoreKeeperError):
    """A reference to a player that is not in the roster."""

    def __init__(self, player_ref: Any, message: str = "") -> None:
        self.player_ref = player_ref
        super().__init__(message or f"No player matches {player_ref!r}.")


class ConcurrentUpdate(ScoreKeeperError):
    """The stored match changed between reading and saving it."""
