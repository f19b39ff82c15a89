"""
Polling utilities for the chainmethod SDK.

Provides fixed-interval, bounded-attempt polling used for transaction
confirmation. Unlike a backoff retry, the delay between attempts is
constant and attempts never overlap.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from chainmethod.constants import MAX_RECEIPT_POLL_ATTEMPTS, RECEIPT_POLL_INTERVAL_SECONDS

T = TypeVar("T")


@dataclass(frozen=True)
class PollConfig:
    """
    Configuration for polling behavior.

    Example:
        ```python
        config = PollConfig(max_attempts=10, interval_seconds=1.0)
        ```
    """

    max_attempts: int = MAX_RECEIPT_POLL_ATTEMPTS
    """Maximum number of attempts before giving up."""

    interval_seconds: float = RECEIPT_POLL_INTERVAL_SECONDS
    """Fixed delay between the end of one attempt and the start of the next."""


class ResultPending(Exception):
    """
    Raised by a poll attempt whose result is not available yet.

    Any other exception ends polling immediately.
    """


class PollExhaustedError(Exception):
    """Raised when every attempt reported a pending result."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"No result after {attempts} attempts")
        self.attempts = attempts


async def poll_async(
    fn: Callable[[], Awaitable[T]],
    config: Optional[PollConfig] = None,
) -> T:
    """
    Execute an async attempt until it produces a result.

    Args:
        fn: Async function to execute (no arguments). Raises
            :class:`ResultPending` while the result is unavailable.
        config: Poll configuration (uses defaults if None)

    Returns:
        Result of the first attempt that did not raise ResultPending

    Raises:
        PollExhaustedError: If all attempts are pending
        Exception: Whatever a non-pending attempt raises

    Example:
        ```python
        async def fetch_receipt():
            receipt = await client.get_transaction_receipt(tx_id)
            if not receipt:
                raise ResultPending()
            return receipt

        receipt = await poll_async(fetch_receipt, PollConfig(max_attempts=5))
        ```
    """
    config = config or PollConfig()

    for attempt in range(config.max_attempts):
        try:
            return await fn()
        except ResultPending:
            # No delay after the last attempt
            if attempt < config.max_attempts - 1:
                await asyncio.sleep(config.interval_seconds)

    raise PollExhaustedError(config.max_attempts)
