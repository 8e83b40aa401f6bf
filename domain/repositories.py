from __future__ import annotations

from typing import Optional, Protocol

from domain.models import MatchState


class MatchRepository(Protocol):
    """
    Abstraction over where the live match of each table is kept.

    A "table" is whatever the interface layer plays in: a Discord channel,
    a Telegram chat. Implementations are responsible for:
    - Returning a fresh setup-state match for a table they have never seen.
    - Refusing stale writes when the caller passes the match it read as
      `expected`.
    """

    def get_match(self, table_id: str) -> MatchState:
        """Return the current match for the table."""

        ...

    def save_match(
        self,
        table_id: str,
        state: MatchState,
        expected: Optional[MatchState] = None,
    ) -> None:
        """
        Replace the table's match with `state`.

        If `expected` is given and the stored match is no longer that match
        (different `match_id`, or a different number of rounds), raise
        `ConcurrentUpdate` and keep the stored match.
        """

        ...
