"""
Correlation id generation for send-style requests.
"""

import time
from typing import Callable, Optional

from provider_adapter.config import IdScheme


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class RequestIdGenerator:
    """
    Produces JSON-RPC ids from the wall clock in milliseconds.

    With ``IdScheme.TIMESTAMP`` the id is the raw millisecond timestamp, so
    two requests issued within the same millisecond share an id. With
    ``IdScheme.MONOTONIC`` an id that would not exceed the previous one is
    bumped to ``previous + 1``, keeping ids unique and increasing.
    """

    def __init__(
        self,
        scheme: IdScheme = IdScheme.MONOTONIC,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.scheme = scheme
        self._clock = clock or _now_ms
        self._last_id = 0

    def next_id(self) -> int:
        """Return the id for the next request."""
        candidate = self._clock()
        if self.scheme == IdScheme.MONOTONIC and candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate
