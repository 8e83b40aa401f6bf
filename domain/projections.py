"""
Read-side views derived from a `MatchState`.

Nothing here is cached: every call walks the current roster and round list,
so the views can never drift from the recorded history.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from domain.exceptions import UnknownPlayer
from domain.models import MatchState, Player


RECENT_ROUNDS_WINDOW = 5


@dataclass(frozen=True)
class RecentResult:
    round_number: int
    score_change: int
    is_winner: bool


@dataclass(frozen=True)
class LeaderboardEntry:
    player: Player
    rank: int
    is_leader: bool
    recent: Tuple[RecentResult, ...]


@dataclass(frozen=True)
class RoundLine:
    player_id: str
    name: str
    accent: str
    tile_count: int
    score_change: int
    is_winner: bool


@dataclass(frozen=True)
class RoundView:
    round_id: str
    number: int
    timestamp: datetime
    winner_name: Optional[str]
    lines: Tuple[RoundLine, ...]


def _sorted_players(state: MatchState) -> List[Player]:
    # sorted() is stable: equal totals keep registration order.
    return sorted(state.players, key=lambda p: p.total_score, reverse=True)


def leader(state: MatchState) -> Optional[Player]:
    """The top player, but only once they are actually ahead of zero."""

    ranked = _sorted_players(state)
    if ranked and ranked[0].total_score > 0:
        return ranked[0]
    return None


def recent_results(
    state: MatchState,
    player_id: str,
    window: int = RECENT_ROUNDS_WINDOW,
) -> Tuple[RecentResult, ...]:
    results = []
    for round_ in state.rounds[-window:]:
        score = round_.score_for(player_id)
        if score is None:
            continue
        results.append(
            RecentResult(
                round_number=round_.number,
                score_change=score.score_change,
                is_winner=score.is_winner,
            )
        )
    return tuple(results)


def rank(state: MatchState) -> List[LeaderboardEntry]:
    """Players ordered by running total, highest first."""

    top = leader(state)
    return [
        LeaderboardEntry(
            player=player,
            rank=position,
            is_leader=top is not None and player.id == top.id,
            recent=recent_results(state, player.id),
        )
        for position, player in enumerate(_sorted_players(state), start=1)
    ]


def totals_from_history(state: MatchState) -> Dict[str, int]:
    """Recompute every player's total from the round list alone."""

    totals = {player.id: 0 for player in state.players}
    for round_ in state.rounds:
        for score in round_.scores:
            totals[score.player_id] = totals.get(score.player_id, 0) + score.score_change
    return totals


def history(state: MatchState, newest_first: bool = False) -> List[RoundView]:
    """
    Per-round breakdown with player names resolved from the roster.

    Raises `UnknownPlayer` if a round refers to someone outside the roster.
    """

    names = {player.id: player for player in state.players}
    views = []
    for round_ in state.rounds:
        lines = []
        winner_name = None
        for score in round_.scores:
            player = names.get(score.player_id)
            if player is None:
                raise UnknownPlayer(
                    score.player_id,
                    f"Round {round_.number} refers to unknown player {score.player_id}.",
                )
            if score.is_winner:
                winner_name = player.name
            lines.append(
                RoundLine(
                    player_id=player.id,
                    name=player.name,
                    accent=player.accent,
                    tile_count=score.tile_count,
                    score_change=score.score_change,
                    is_winner=score.is_winner,
                )
            )
        views.append(
            RoundView(
                round_id=round_.id,
                number=round_.number,
                timestamp=round_.timestamp,
                winner_name=winner_name,
                lines=tuple(lines),
            )
        )

    if newest_first:
        views.reverse()
    return views
