"""Bounded wait-for-condition primitive.

Every wait in the suite (element visible, output non-empty, output changed,
output contains Sinhala letters) goes through `poll_until`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Tuple, Type, TypeVar

from .errors import PollTimeoutError

T = TypeVar("T")


@dataclass(frozen=True)
class PollConfig:
    interval_s: float = 0.25
    timeout_s: float = 20.0


def poll_until(
    produce: Callable[[], T],
    predicate: Callable[[T], bool],
    config: PollConfig,
    *,
    description: str = "condition",
    retry_on: Tuple[Type[BaseException], ...] = (),
    monotonic: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call `produce` until `predicate` holds on its result, or time runs out.

    Returns the first value that satisfies the predicate. Raises
    `PollTimeoutError` (carrying the last observed value) once the deadline
    passes. Exceptions from `produce` propagate straight away unless their
    type is listed in `retry_on`, in which case that observation is skipped.

    Sleeps are clipped to the time left so the last observation lands on the
    deadline, which bounds the number of calls to
    ``ceil(timeout / interval) + 1``.
    """
    if config.interval_s <= 0:
        raise ValueError(f"interval must be positive, got {config.interval_s}")
    if config.timeout_s < 0:
        raise ValueError(f"timeout must not be negative, got {config.timeout_s}")

    deadline = monotonic() + config.timeout_s
    last_value = None
    last_error = None
    attempts = 0
    final = False
    while True:
        attempts += 1
        try:
            value = produce()
        except retry_on as e:
            last_error = e
        else:
            last_value = value
            if predicate(value):
                return value

        if final:
            break
        remaining = deadline - monotonic()
        if remaining <= 0:
            break
        if remaining <= config.interval_s:
            final = True
        sleep(min(config.interval_s, remaining))

    raise PollTimeoutError(
        f"Timed out after {config.timeout_s:g}s waiting for {description} "
        f"(last value: {last_value!r})",
        last_value=last_value,
        attempts=attempts,
    ) from last_error
