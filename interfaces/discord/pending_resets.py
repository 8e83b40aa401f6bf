from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional


RESET_PROMPT_TTL_SECONDS = 120.0


@dataclass
class _Prompt:
    channel_id: int
    requester_id: int
    created_at: float


class PendingResets:
    """
    Reset prompts waiting for a reaction, keyed by the prompt message ID.

    A channel has at most one open prompt: asking again replaces the older
    one. Prompts nobody answers expire after `ttl` seconds.
    """

    def __init__(
        self,
        ttl: float = RESET_PROMPT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._prompts: Dict[int, _Prompt] = {}

    def __len__(self) -> int:
        return len(self._prompts)

    def _drop_expired(self) -> None:
        now = self._clock()
        expired = [
            message_id
            for message_id, prompt in self._prompts.items()
            if now - prompt.created_at >= self._ttl
        ]
        for message_id in expired:
            del self._prompts[message_id]

    def add(self, message_id: int, channel_id: int, requester_id: int) -> None:
        self._drop_expired()
        stale = [
            other_id
            for other_id, prompt in self._prompts.items()
            if prompt.channel_id == channel_id
        ]
        for other_id in stale:
            del self._prompts[other_id]
        self._prompts[message_id] = _Prompt(channel_id, requester_id, self._clock())

    def requester_for(self, message_id: int) -> Optional[int]:
        """Who may answer the prompt, or None if it is unknown or expired."""

        self._drop_expired()
        prompt = self._prompts.get(message_id)
        return prompt.requester_id if prompt else None

    def discard(self, message_id: int) -> None:
        self._prompts.pop(message_id, None)
