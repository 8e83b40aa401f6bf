from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


# One accent per seat, handed out in registration order.
PLAYER_ACCENTS: Tuple[str, ...] = (
    "#EF4444",
    "#3B82F6",
    "#EAB308",
    "#22C55E",
    "#A855F7",
    "#F97316",
)

MIN_PLAYERS = 2
MAX_PLAYERS = 6


class MatchStatus(str, Enum):
    SETUP = "setup"
    PLAYING = "playing"
    # Declared for completeness; no transition leads here yet.
    FINISHED = "finished"


@dataclass(frozen=True)
class Player:
    """
    A seat in the match.

    `total_score` is only ever advanced by applying a round, so it always
    equals the sum of this player's deltas in the match history.
    """

    id: str
    name: str
    accent: str
    total_score: int = 0


@dataclass(frozen=True)
class RoundScore:
    """One player's result in one round."""

    player_id: str
    tile_count: int
    score_change: int
    is_winner: bool


@dataclass(frozen=True)
class Round:
    id: str
    number: int
    timestamp: datetime
    scores: Tuple[RoundScore, ...]

    @property
    def winner_id(self) -> Optional[str]:
        for score in self.scores:
            if score.is_winner:
                return score.player_id
        return None

    def score_for(self, player_id: str) -> Optional[RoundScore]:
        for score in self.scores:
            if score.player_id == player_id:
                return score
        return None


@dataclass(frozen=True)
class MatchState:
    """
    The whole match: roster, completed rounds and status.

    Instances are never modified; every transition in `domain.match`
    returns a new `MatchState`. `match_id` changes whenever a match is
    started or reset, so a stored match can tell those apart from a later
    round on the same match.
    """

    players: Tuple[Player, ...] = ()
    rounds: Tuple[Round, ...] = ()
    status: MatchStatus = MatchStatus.SETUP
    match_id: str = ""

    @property
    def round_count(self) -> int:
        return len(self.rounds)

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None
