"""Bounded polling for asynchronous external operations.

A single primitive, ``poll_until``, backs every wait in the suite: waiting
for a dispatched workflow run to appear and waiting for a run to reach a
terminal status. Each loop sleeps, fetches fresh state, and evaluates a
predicate, returning the first state that satisfies it.

Key Exports:
    poll_until: Sleep-fetch-check loop bounded by a deadline.

Example:
    >>> from flowcheck.utils.polling import poll_until
    >>> run = await poll_until(
    ...     lambda: runs.view_run(run_id),
    ...     lambda r: r.is_terminal,
    ...     timeout=300.0,
    ...     interval=10.0,
    ...     operation=f"run {run_id} completion",
    ... )

The poll never interprets the state it returns: a run that completed with a
failure conclusion is returned like any other terminal run. Only an expired
deadline raises.
"""

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from flowcheck.exceptions import PollTimeoutError

log = structlog.get_logger(__name__)

T = TypeVar("T")


async def poll_until(
    fetch: Callable[[], T | Awaitable[T]],
    predicate: Callable[[T], bool],
    *,
    timeout: float,
    interval: float,
    operation: str,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """Repeatedly fetch state until it satisfies a predicate or time runs out.

    Args:
        fetch: Zero-argument callable returning the current state, or an
            awaitable resolving to it.
        predicate: Returns True when the state is the one being waited for.
        timeout: Total seconds to keep polling.
        interval: Seconds to sleep before each fetch.
        operation: Name of what is being awaited, used in logs and in the
            timeout error.
        sleep: Coroutine function used to wait between attempts.
        clock: Monotonic clock in seconds.

    Returns:
        The first fetched state for which ``predicate`` holds.

    Raises:
        PollTimeoutError: If the deadline passes with no satisfying state.
        Exception: Anything raised by ``fetch`` propagates unchanged.
    """
    deadline = clock() + timeout
    attempt = 0

    while clock() < deadline:
        await sleep(interval)
        attempt += 1

        state = fetch()
        if inspect.isawaitable(state):
            state = await state

        if predicate(state):
            log.debug("poll_satisfied", operation=operation, attempt=attempt)
            return state

        log.debug("poll_attempt", operation=operation, attempt=attempt, interval=interval)

    log.warning("poll_timeout", operation=operation, attempts=attempt, timeout=timeout)
    raise PollTimeoutError(
        f"Timed out after {timeout}s waiting for {operation}",
        operation=operation,
        timeout_seconds=timeout,
    )
