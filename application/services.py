from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from domain.exceptions import InvalidMatchStatus, ScoreKeeperError, UnknownPlayer
from domain.match import apply_round, reset_match, start_match
from domain.models import MatchState, MatchStatus, Player, Round
from domain.projections import LeaderboardEntry, RoundView, history, rank
from domain.repositories import MatchRepository


logger = logging.getLogger(__name__)


@dataclass
class TableContext:
    """
    Where a command came from (a Discord channel, a Telegram chat).

    The application layer never depends on concrete SDK types; it only sees
    this small context object. Each table has its own match.
    """

    provider: str
    channel_id: str

    @property
    def table_id(self) -> str:
        return f"{self.provider}:{self.channel_id}"


@dataclass
class OperationResult:
    """Generic result type for match operations."""

    success: bool
    error_message: Optional[str] = None
    state: Optional[MatchState] = None
    round: Optional[Round] = None


def resolve_player(state: MatchState, ref: str) -> Player:
    """
    Find a player by 1-based seat number or by name (case-insensitive).

    Names shared by several players cannot be resolved; the caller has to
    use the seat number instead.
    """

    ref = ref.strip()
    if ref.isdigit():
        seat = int(ref)
        if 1 <= seat <= len(state.players):
            return state.players[seat - 1]
        raise UnknownPlayer(ref, f"There is no seat {seat} at this table.")

    matches = [p for p in state.players if p.name.casefold() == ref.casefold()]
    if not matches:
        raise UnknownPlayer(ref)
    if len(matches) > 1:
        raise UnknownPlayer(
            ref, f"More than one player is called {ref!r}; use the seat number."
        )
    return matches[0]


def start_new_match(
    ctx: TableContext,
    names: Iterable[str],
    match_repo: MatchRepository,
) -> OperationResult:
    """
    Open a match at the table with the given player names.

    A match already in progress has to be reset first; this never throws
    away recorded rounds on its own.
    """

    current = match_repo.get_match(ctx.table_id)
    try:
        if current.status is MatchStatus.PLAYING:
            raise InvalidMatchStatus(
                "A match is already in progress. Reset it before starting a new one."
            )
        state = start_match(names)
        match_repo.save_match(ctx.table_id, state)
    except ScoreKeeperError as exc:
        logger.info("Start rejected for %s: %s", ctx.table_id, exc)
        return OperationResult(success=False, error_message=str(exc))

    return OperationResult(success=True, state=state)


def record_round(
    ctx: TableContext,
    winner_ref: str,
    tiles: Mapping[str, Any],
    match_repo: MatchRepository,
) -> OperationResult:
    """
    Record a finished round.

    - `winner_ref` and the keys of `tiles` are player references (seat
      number or name), see `resolve_player`.
    - The values of `tiles` are the raw tile counts as typed.
    - The save is checked against the match read here, so two overlapping
      submissions cannot both land and a reset or new match started in
      between is never overwritten.
    """

    state = match_repo.get_match(ctx.table_id)
    try:
        if state.status is not MatchStatus.PLAYING:
            raise InvalidMatchStatus("No match in progress. Start one first.")

        winner = resolve_player(state, winner_ref)
        tile_counts = {
            resolve_player(state, ref).id: raw for ref, raw in tiles.items()
        }

        new_state = apply_round(state, winner.id, tile_counts)
        match_repo.save_match(ctx.table_id, new_state, expected=state)
    except ScoreKeeperError as exc:
        logger.info("Round rejected for %s: %s", ctx.table_id, exc)
        return OperationResult(success=False, error_message=str(exc), state=state)

    return OperationResult(success=True, state=new_state, round=new_state.rounds[-1])


def reset_current_match(
    ctx: TableContext,
    match_repo: MatchRepository,
) -> OperationResult:
    """
    Throw away the table's match.

    Confirmation is the interface layer's job; once called this always
    succeeds.
    """

    state = reset_match()
    match_repo.save_match(ctx.table_id, state)
    return OperationResult(success=True, state=state)


def get_leaderboard(
    ctx: TableContext,
    match_repo: MatchRepository,
) -> List[LeaderboardEntry]:
    return rank(match_repo.get_match(ctx.table_id))


def get_history(
    ctx: TableContext,
    match_repo: MatchRepository,
    newest_first: bool = True,
) -> List[RoundView]:
    return history(match_repo.get_match(ctx.table_id), newest_first=newest_first)
