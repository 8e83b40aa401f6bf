from __future__ import annotations

import shlex
from typing import Dict, List, Sequence, Tuple


def split_names(text: str) -> List[str]:
    """
    Split the argument text of the new-match command into player names.

    Quotes group words, so `Alice "Mary Ann" Bob` gives three names.
    """

    try:
        return shlex.split(text)
    except ValueError as exc:
        raise ValueError(f"Could not read player names: {exc}") from exc


def parse_round_args(args: Sequence[str]) -> Tuple[str, Dict[str, str]]:
    """
    Parse `<winner> <player>=<tiles> ...` into the winner and a tile mapping.

    Values are returned as typed; validating them is the engine's job.
    """

    if not args:
        raise ValueError("Usage: round <winner> <player>=<tiles> ...")

    winner = args[0]
    tiles: Dict[str, str] = {}
    for token in args[1:]:
        if "=" not in token:
            raise ValueError(f"Expected <player>=<tiles>, got {token!r}.")
        player, _, count = token.rpartition("=")
        if not player:
            raise ValueError(f"Missing player before '=' in {token!r}.")
        tiles[player] = count
    return winner, tiles


def parse_round_text(text: str) -> Tuple[str, Dict[str, str]]:
    try:
        args = shlex.split(text)
    except ValueError as exc:
        raise ValueError(f"Could not read round: {exc}") from exc
    return parse_round_args(args)
