# src/analysis/race.py — v1
"""First-of-two join between a remote call and its timeout.

The losing call is abandoned, not cancelled: it may still finish later. A
CompletionToken records which side won, so code that applies side effects
(cache writes, cleanup) can check the token instead of trusting timing.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Awaitable, TypeVar

from docmeta.core.errors import AnalysisTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PENDING = "pending"
_CLAIMED = "claimed"
_ABANDONED = "abandoned"


class CompletionToken:
    """One-shot flag: the first of claim() and abandon() wins, the other is a no-op."""

    def __init__(self) -> None:
        self._state = _PENDING

    @property
    def claimed(self) -> bool:
        return self._state == _CLAIMED

    @property
    def abandoned(self) -> bool:
        return self._state == _ABANDONED

    def claim(self) -> bool:
        """Mark the call as the winner. False if the token was already settled."""
        if self._state != _PENDING:
            return False
        self._state = _CLAIMED
        return True

    def abandon(self) -> bool:
        """Mark the call as lost to the timer. False if already settled."""
        if self._state != _PENDING:
            return False
        self._state = _ABANDONED
        return True


async def race_with_timeout(
    awaitable: Awaitable[T],
    timeout_s: float,
    operation: str,
    token: CompletionToken | None = None,
) -> T:
    """Await awaitable, giving up after timeout_s seconds.

    Args:
        awaitable: The remote call.
        timeout_s: Wall-clock limit in seconds.
        operation: Human-readable name used in errors and logs.
        token: Completion token to settle; a fresh one is used if None.

    Returns:
        The call's result when it finishes first.

    Raises:
        AnalysisTimeout: If the timer fires first.
        Exception: Whatever the call raised, when it finishes first.
    """
    token = token or CompletionToken()
    task = asyncio.ensure_future(awaitable)

    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_s)
    except asyncio.CancelledError:
        token.abandon()
        task.add_done_callback(partial(_discard_late_result, operation))
        raise

    if task in done and token.claim():
        return task.result()

    token.abandon()
    task.add_done_callback(partial(_discard_late_result, operation))
    logger.warning("%s timed out after %gs, abandoning the call", operation, timeout_s)
    raise AnalysisTimeout(operation, timeout_s)


def _discard_late_result(operation: str, task: asyncio.Future) -> None:
    """Done-callback for abandoned calls: consume the outcome, apply nothing."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Abandoned %s failed after timeout: %s", operation, exc)
    else:
        logger.debug("Discarding late result of abandoned %s", operation)
