from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional, Sequence

from domain.exceptions import InsufficientPlayers, InvalidTileCount, InvalidWinner, UnknownPlayer
from domain.models import MIN_PLAYERS, Player, RoundScore


_WHOLE_NUMBER = re.compile(r"^[+-]?\d+$")


def parse_tile_count(raw: Any) -> int:
    """
    Turn user input for a loser's remaining tiles into an integer.

    A blank entry (None, "" or whitespace) means nothing was typed and counts
    as 0. Anything that is not a whole number is rejected instead of being
    coerced. The sign is left alone here; `compute_round` applies abs().
    """

    if raw is None:
        return 0
    if isinstance(raw, bool):
        raise InvalidTileCount(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not raw.is_integer():
            raise InvalidTileCount(raw)
        return int(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return 0
        if not _WHOLE_NUMBER.match(text):
            raise InvalidTileCount(raw)
        return int(text)
    raise InvalidTileCount(raw)


def compute_round(
    roster: Sequence[Player],
    winner_id: Optional[str],
    tile_counts: Mapping[str, Any],
) -> List[RoundScore]:
    """
    Score one round.

    Every loser is charged the number of tiles left in their rack; the
    winner collects the sum of those penalties, so the round is zero-sum.
    Losers missing from `tile_counts` are charged nothing.

    Losers come first in roster order, the winner last.
    """

    if len(roster) < MIN_PLAYERS:
        raise InsufficientPlayers(
            f"A round needs at least {MIN_PLAYERS} players, got {len(roster)}."
        )

    roster_ids = {player.id for player in roster}
    if not winner_id or winner_id not in roster_ids:
        raise InvalidWinner(winner_id)

    for player_id in tile_counts:
        if player_id not in roster_ids:
            raise UnknownPlayer(player_id)

    # Parse everything up front so a bad entry rejects the whole round.
    counts = {player_id: parse_tile_count(raw) for player_id, raw in tile_counts.items()}

    scores: List[RoundScore] = []
    winner_gain = 0
    for player in roster:
        if player.id == winner_id:
            continue
        tiles = abs(counts.get(player.id, 0))
        penalty = -tiles
        scores.append(
            RoundScore(
                player_id=player.id,
                tile_count=tiles,
                score_change=penalty,
                is_winner=False,
            )
        )
        winner_gain += abs(penalty)

    scores.append(
        RoundScore(
            player_id=winner_id,
            tile_count=0,
            score_change=winner_gain,
            is_winner=True,
        )
    )
    return scores
