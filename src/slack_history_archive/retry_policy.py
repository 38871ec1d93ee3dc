from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from loguru import logger
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from slack_history_archive.errors import TRANSIENT_ERRORS

Sleep = Callable[[float], Awaitable[None]]


class wait_retry_after_or_exponential(wait_exponential):
    """Exponential backoff, stretched to the server's retry hint when that is longer."""

    def __call__(self, retry_state: Any) -> float:
        delay = super().__call__(retry_state)
        outcome = retry_state.outcome
        exc = outcome.exception() if outcome is not None and outcome.failed else None
        retry_after = getattr(exc, "retry_after", None)
        if retry_after is not None:
            delay = max(delay, retry_after)
        return delay


def _make_on_retry(retry_ceiling: int) -> Callable[[Any], None]:
    def _on_retry(retry_state: Any) -> None:
        attempt = retry_state.attempt_number
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        reason = type(exc).__name__ if exc else "Unknown"
        logger.warning(f"{reason}. Retrying in {wait:.1f}s (retry {attempt}/{retry_ceiling})...")

    return _on_retry


def default_retry_kwargs(
    retry_ceiling: int,
    base_delay: float,
    max_delay: float,
) -> dict:
    return {
        "retry": retry_if_exception_type(TRANSIENT_ERRORS),
        "wait": wait_retry_after_or_exponential(multiplier=base_delay, max=max_delay),
        "stop": stop_after_attempt(retry_ceiling + 1),
        "before_sleep": _make_on_retry(retry_ceiling),
        "reraise": True,
    }


def build_retrying(
    retry_ceiling: int,
    base_delay: float,
    max_delay: float,
    sleep: Sleep = asyncio.sleep,
) -> AsyncRetrying:
    """A fresh retry controller; one is built per page so the attempt count resets."""
    return AsyncRetrying(sleep=sleep, **default_retry_kwargs(retry_ceiling, base_delay, max_delay))
