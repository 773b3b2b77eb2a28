"""Latest-request-wins coordination for async hosts."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Callable, TypeVar

from outfit_recs.metrics.prometheus_exporter import stale_results_total

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LatestRequestGate:
    """
    Runs blocking recommendation calls off the event loop, per key.

    Each submission for a key supersedes the previous ones. A result whose
    request was superseded while it was computing is discarded and ``None``
    is returned instead, so callers only ever apply the newest result
    regardless of completion order. A key is forgotten once its newest
    request resolves.
    """

    def __init__(self) -> None:
        self._tokens = itertools.count(1)
        self._latest: dict[str, int] = {}

    @property
    def pending_keys(self) -> frozenset[str]:
        """Keys with a request still in flight."""

        return frozenset(self._latest)

    def is_current(self, key: str, token: int) -> bool:
        return self._latest.get(key) == token

    async def submit(self, key: str, func: Callable[..., T], *args, **kwargs) -> T | None:
        """Run ``func`` in a worker thread; return its result only if still the newest request."""

        # Tokens are unique across keys, so a forgotten key never reissues one.
        token = next(self._tokens)
        self._latest[key] = token
        try:
            result = await asyncio.to_thread(func, *args, **kwargs)
        finally:
            current = self.is_current(key, token)
            if current:
                del self._latest[key]
        if not current:
            stale_results_total.inc()
            logger.debug("Discarding stale result #%d for %s", token, key)
            return None
        return result
