from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from domain.exceptions import ConcurrentUpdate
from domain.models import MatchState
from domain.repositories import MatchRepository


logger = logging.getLogger(__name__)


class InMemoryMatchRepository(MatchRepository):
    """
    Process-local implementation of `MatchRepository`.

    Keeps one `MatchState` per table in a dict. Reads and writes go through
    a lock because the Telegram bot runs its handlers on worker threads.
    A checked save compares both the match id and the round count, so it
    loses to another round on the same match as well as to a reset or a
    new match started in between.
    """

    def __init__(self) -> None:
        self._matches: Dict[str, MatchState] = {}
        self._lock = threading.Lock()

    def get_match(self, table_id: str) -> MatchState:
        with self._lock:
            return self._matches.get(table_id) or MatchState()

    def save_match(
        self,
        table_id: str,
        state: MatchState,
        expected: Optional[MatchState] = None,
    ) -> None:
        with self._lock:
            current = self._matches.get(table_id) or MatchState()
            if expected is not None and (
                current.match_id != expected.match_id
                or current.round_count != expected.round_count
            ):
                logger.warning(
                    "Stale save for table %s: expected match %s with %d rounds, "
                    "found match %s with %d",
                    table_id,
                    expected.match_id,
                    expected.round_count,
                    current.match_id,
                    current.round_count,
                )
                raise ConcurrentUpdate(
                    "The match changed while this round was being entered. "
                    "Check the board and try again."
                )
            self._matches[table_id] = state
