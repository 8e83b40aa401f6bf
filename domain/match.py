from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from domain.exceptions import InsufficientPlayers, InvalidMatchStatus, TooManyPlayers
from domain.models import (
    MAX_PLAYERS,
    MIN_PLAYERS,
    PLAYER_ACCENTS,
    MatchState,
    MatchStatus,
    Player,
    Round,
)
from domain.scoring import compute_round


logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


def start_match(names: Iterable[str]) -> MatchState:
    """
    Register the players and open a match.

    Names are trimmed and blank entries dropped before counting, so
    `["Alice", "", "  ", "Bob"]` starts a two-player match.
    """

    cleaned = [name.strip() for name in names if name and name.strip()]

    if len(cleaned) < MIN_PLAYERS:
        raise InsufficientPlayers(
            f"Need at least {MIN_PLAYERS} player names, got {len(cleaned)}."
        )
    if len(cleaned) > MAX_PLAYERS:
        raise TooManyPlayers(
            f"At most {MAX_PLAYERS} players can join a match, got {len(cleaned)}."
        )

    players = tuple(
        Player(
            id=_new_id(),
            name=name,
            accent=PLAYER_ACCENTS[index % len(PLAYER_ACCENTS)],
        )
        for index, name in enumerate(cleaned)
    )

    logger.info("Match started with %d players", len(players))
    return MatchState(
        players=players,
        rounds=(),
        status=MatchStatus.PLAYING,
        match_id=_new_id(),
    )


def apply_round(
    state: MatchState,
    winner_id: Optional[str],
    tile_counts: Mapping[str, Any],
    timestamp: Optional[datetime] = None,
) -> MatchState:
    """
    Score a round and return the match with it appended.

    This is the only way totals change. `state` itself is left as it was,
    so a rejected round leaves the caller's match untouched.
    """

    if state.status is not MatchStatus.PLAYING:
        raise InvalidMatchStatus(
            f"Rounds can only be recorded while playing, match is {state.status.value}."
        )

    scores = compute_round(state.players, winner_id, tile_counts)

    new_round = Round(
        id=_new_id(),
        number=len(state.rounds) + 1,
        timestamp=timestamp or datetime.now(timezone.utc),
        scores=tuple(scores),
    )

    deltas = {score.player_id: score.score_change for score in scores}
    players = tuple(
        replace(player, total_score=player.total_score + deltas[player.id])
        if player.id in deltas
        else player
        for player in state.players
    )

    logger.info(
        "Round %d recorded, winner %s takes %d",
        new_round.number,
        winner_id,
        deltas[winner_id],
    )
    return replace(state, players=players, rounds=state.rounds + (new_round,))


def reset_match() -> MatchState:
    """Discard the roster and all rounds."""

    logger.info("Match reset")
    return MatchState(match_id=_new_id())
