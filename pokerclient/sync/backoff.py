"""Bounded exponential backoff for idempotent Gateway reads."""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from ..errors import GatewayTransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base: float, maximum: float) -> float:
    """Delay before retry number ``attempt`` (1-based)."""
    return min(maximum, base * (2 ** (attempt - 1)))


async def with_backoff(
    operation: Callable[[], Awaitable[T]],
    retries: int,
    base: float,
    maximum: float,
) -> T:
    """
    Run ``operation``, retrying transport failures.

    Args:
        operation: Zero-argument coroutine function, must be safe to repeat
        retries: Extra attempts after the first one
        base: Delay before the first retry in seconds
        maximum: Upper bound on any single delay

    Returns:
        The operation's result

    Only GatewayTransportError is retried. Rejections and protocol errors
    come from a Gateway that answered, so they propagate on the first try.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except GatewayTransportError as e:
            attempt += 1
            if attempt > retries:
                raise
            delay = backoff_delay(attempt, base, maximum)
            logger.info(f"[SYNC] Read failed ({e.message}), retry {attempt}/{retries} in {delay:.2f}s")
            await asyncio.sleep(delay)
