from __future__ import annotations

from typing import List, Sequence

from domain.models import MatchState, Round
from domain.projections import LeaderboardEntry, RoundView


def _signed(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)


def format_leaderboard(entries: Sequence[LeaderboardEntry]) -> str:
    """
    One line per player: rank, name, total and the last few deltas.

    The leader (if any) is marked with a trophy.
    """

    if not entries:
        return "No match in progress."

    lines = []
    for entry in entries:
        marker = " 🏆" if entry.is_leader else ""
        recent = " ".join(
            f"[{_signed(r.score_change)}]" if r.is_winner else _signed(r.score_change)
            for r in entry.recent
        )
        line = f"#{entry.rank} {entry.player.name}{marker}: {entry.player.total_score}"
        if recent:
            line += f"  ({recent})"
        lines.append(line)
    return "\n".join(lines)


def format_round(view: RoundView) -> str:
    lines = [f"Round {view.number} ({view.timestamp:%H:%M} UTC)"]
    for line in view.lines:
        crown = " 👑" if line.is_winner else ""
        tiles = "" if line.is_winner else f" ({line.tile_count} tiles)"
        lines.append(f"  {line.name}{crown}: {_signed(line.score_change)}{tiles}")
    return "\n".join(lines)


def format_history(views: Sequence[RoundView]) -> str:
    if not views:
        return "No rounds played yet."
    return "\n\n".join(format_round(view) for view in views)


def format_recorded_round(state: MatchState, round_: Round) -> str:
    """Short confirmation after a round has been saved."""

    names = {player.id: player.name for player in state.players}
    winner = names.get(round_.winner_id, "?")
    parts = [
        f"{names.get(score.player_id, '?')} {_signed(score.score_change)}"
        for score in round_.scores
        if not score.is_winner
    ]
    gain = round_.score_for(round_.winner_id).score_change
    summary = f"Round {round_.number}: {winner} wins {_signed(gain)}"
    if parts:
        summary += " (" + ", ".join(parts) + ")"
    return summary


def format_roster(state: MatchState) -> str:
    seats = [f"{index}. {player.name}" for index, player in enumerate(state.players, start=1)]
    return "Match started! Seats:\n" + "\n".join(seats)


def split_message(text: str, limit: int) -> List[str]:
    """
    Break `text` into pieces no longer than `limit`, cutting between lines.

    Chat platforms cap the size of a single message.
    """

    chunks: List[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks
