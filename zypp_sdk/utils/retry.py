"""
Retry helpers with exponential backoff and jitter.

Implements the AWS Architecture Blog strategies:
- full jitter : sleep U(0, cap)
- equal jitter: sleep cap/2 + U(0, cap/2)

Example
-------
from zypp_sdk.utils.retry import retry_call

sig = retry_call(relay, raw, attempts=3, base=0.2, exceptions=RpcConnectionError)

Notes
-----
- `attempts` is the total number of calls, first try included.
- Only exceptions matching `exceptions` are retried; anything else propagates
  immediately.
- When attempts run out, `RetryError` is raised with the last exception
  chained as its cause.
- `on_retry` receives (attempt_index, exception, sleep_seconds).
"""

from __future__ import annotations

import random
import time
from typing import Any, Callable, Literal, Optional, Sequence, Tuple, Type, TypeVar, Union

__all__ = [
    "RetryError",
    "backoff_delay",
    "retry_call",
]

T = TypeVar("T")

JitterMode = Literal["full", "equal"]


class RetryError(RuntimeError):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, last_exception: BaseException, attempts: int) -> None:
        super().__init__(f"exhausted after {attempts} attempts: {last_exception!r}")
        self.last_exception = last_exception
        self.attempts = attempts


def backoff_delay(
    attempt: int,
    *,
    base: float,
    max_delay: float,
    jitter: JitterMode = "full",
) -> float:
    """
    Compute a backoff delay (in seconds) for the given attempt (1-based).
    """
    if attempt < 1:
        attempt = 1
    cap = min(base * (2 ** (attempt - 1)), max_delay)

    if jitter == "full":
        delay = random.uniform(0.0, cap)
    elif jitter == "equal":
        delay = (cap * 0.5) + random.uniform(0.0, cap * 0.5)
    else:
        raise ValueError(f"unknown jitter mode: {jitter}")
    return max(0.0, float(delay))


def retry_call(
    fn: Callable[..., T],
    *args: Any,
    attempts: int = 3,
    base: float = 0.2,
    max_delay: float = 3.0,
    jitter: JitterMode = "full",
    exceptions: Union[Type[BaseException], Sequence[Type[BaseException]]] = Exception,
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs: Any,
) -> T:
    """
    Call `fn` up to `attempts` times in total.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")
    if isinstance(exceptions, type):
        exc_types: Tuple[Type[BaseException], ...] = (exceptions,)
    else:
        exc_types = tuple(exceptions)

    attempt = 0
    while True:
        attempt += 1
        try:
            return fn(*args, **kwargs)
        except exc_types as exc:
            if attempt >= attempts:
                raise RetryError(exc, attempts=attempt) from exc

            sleep_s = backoff_delay(attempt, base=base, max_delay=max_delay, jitter=jitter)
            if on_retry is not None:
                on_retry(attempt, exc, sleep_s)
            sleep(sleep_s)
