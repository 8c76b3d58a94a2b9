"""Fail-open verification of AI-proposed terms.

Each distinct term gets one count-only backend query, all running
concurrently.  A term is valid when the backend reports at least one hit.
When a check fails for any reason (backend down, timeout, bad reply) the
term is kept (``valid = True``) and a warning is logged: a degraded
backend must not silently empty the suggestion list.

Results are written into slots pre-sized per term and local to the call,
so concurrent requests never share state and nothing is written once the
caller has been cancelled.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from suggestor.models.suggestion import VerificationResult
from suggestor.utils.concurrency import throttled_gather
from suggestor.utils.logging import get_logger

logger = get_logger(__name__)

CountFn = Callable[[str], Awaitable[int]]

DEFAULT_MAX_CONCURRENCY = 10


class Verifier:
    """Confirms AI-proposed terms against the backend."""

    def __init__(self, max_concurrency: int = DEFAULT_MAX_CONCURRENCY) -> None:
        self._max_concurrency = max(1, max_concurrency)

    async def verify(self, terms: list[str], count_fn: CountFn) -> dict[str, bool]:
        """Return ``{term: valid}`` with exactly one entry per distinct term.

        Args:
            terms: Proposed terms; duplicates collapse to their first position.
            count_fn: Coroutine function returning the backend hit count.
        """
        distinct = list(dict.fromkeys(terms))
        if not distinct:
            return {}

        slots = [VerificationResult(term=term, valid=True) for term in distinct]

        async def _check(index: int, term: str) -> None:
            try:
                hits = await count_fn(term)
            except Exception as exc:  # noqa: BLE001 -- fail open on any check failure
                logger.warning(
                    "verification_skipped",
                    term=term,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                return
            slots[index] = VerificationResult(term=term, valid=hits > 0)

        semaphore = asyncio.Semaphore(self._max_concurrency)
        await throttled_gather(
            [_check(i, term) for i, term in enumerate(distinct)],
            semaphore=semaphore,
            return_exceptions=False,
        )

        results = {slot.term: slot.valid for slot in slots}
        logger.debug(
            "verification_complete",
            checked=len(results),
            valid=sum(results.values()),
        )
        return results
