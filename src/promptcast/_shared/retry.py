"""Retry with exponential backoff around a single model request.

Every failure is treated the same way: no per-error-kind handling and no
jitter.  The delay starts at *initial_delay* and doubles after each failed
attempt; once *max_attempts* attempts have failed the last exception is
re-raised as-is.

Sync callables run in the default executor; the wait between attempts is
always an ``asyncio.sleep`` so other tasks on the loop keep running.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from promptcast.errors import UsageError


async def call_with_backoff(
    operation: Callable[[], Any],
    *,
    max_attempts: int,
    initial_delay: float,
    async_mode: bool,
    logger: logging.Logger,
) -> Any:
    """Execute *operation* until it succeeds or the attempt budget runs out.

    Args:
        operation: Zero-arg callable (sync or async) that performs the
            request and returns its result.
        max_attempts: Total number of attempts, including the first one.
        initial_delay: Seconds to wait after the first failure.
        async_mode: ``True`` when *operation* is a coroutine function.
        logger: Logger instance for warning/error messages.

    Returns:
        The result of the first successful attempt.
    """
    if max_attempts < 1:
        raise UsageError(f"max_attempts must be at least 1, got {max_attempts}")

    delay = initial_delay
    attempt = 0
    while True:
        attempt += 1
        try:
            if async_mode:
                return await operation()
            else:
                loop = asyncio.get_running_loop()
                return await loop.run_in_executor(None, operation)

        except Exception as e:
            if attempt >= max_attempts:
                logger.error("Request failed after %d attempts: %s", attempt, e)
                raise
            logger.warning(
                "Request failed (%s); attempt %d/%d, retrying in %.2fs",
                e,
                attempt,
                max_attempts,
                delay,
            )
            await asyncio.sleep(delay)
            delay *= 2
