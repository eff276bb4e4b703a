"""
Retries for idempotent node and REST reads.

`Backoff` describes how many extra attempts a call gets and how long to sleep
between them (exponential, capped, full jitter). `aretry_call` drives an async
callable under a policy and raises `RetryError` once the attempts run out.

    policy = Backoff(retries=3, base=0.25)
    resp = await aretry_call(fetch, policy=policy, exceptions=(TransientError,))

Broadcasts are not idempotent and must be sent with `retries=0`.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Tuple, Type, TypeVar

__all__ = ["Backoff", "RetryError", "aretry_call"]

log = logging.getLogger(__name__)

T = TypeVar("T")


class RetryError(RuntimeError):
    """Every attempt failed; `last_exception` is the final failure."""

    def __init__(self, last_exception: BaseException, attempts: int) -> None:
        super().__init__(f"gave up after {attempts} attempt(s): {last_exception}")
        self.last_exception = last_exception
        self.attempts = attempts


@dataclass(frozen=True)
class Backoff:
    retries: int = 3
    base: float = 0.2
    max_delay: float = 3.0

    def delay(self, retry: int) -> float:
        """Sleep before retry number `retry` (1-based): U(0, min(base·2^(retry-1), max_delay))."""
        ceiling = min(self.base * (2 ** max(retry - 1, 0)), self.max_delay)
        return random.uniform(0.0, ceiling) if ceiling > 0 else 0.0


async def aretry_call(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: Backoff = Backoff(),
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    label: str = "",
) -> T:
    """
    Await `fn()` until it succeeds or `policy.retries` retries are used up.

    Only `exceptions` are retried; anything else (cancellation included)
    propagates on the spot.
    """
    retry = 0
    while True:
        try:
            return await fn()
        except exceptions as exc:
            if retry >= policy.retries:
                raise RetryError(exc, attempts=retry + 1) from exc
            retry += 1
            pause = policy.delay(retry)
            log.debug("retry %d/%d of %s in %.2fs: %s", retry, policy.retries, label or "call", pause, exc)
            await asyncio.sleep(pause)
