"""Exceptions raised while driving the translator page."""

from __future__ import annotations

from typing import Any


class HarnessError(Exception):
    pass


class PollTimeoutError(HarnessError):
    """The polled value never satisfied its predicate before the deadline."""

    def __init__(self, message: str, last_value: Any = None, attempts: int = 0):
        super().__init__(message)
        self.last_value = last_value
        self.attempts = attempts


class ObservationError(HarnessError):
    """An element could not be located or read. Fails the current scenario only."""


class FatalDriverError(HarnessError):
    """The page is unreachable or broken. Aborts the remaining run.

    When raised out of the runner, `report` holds the results collected
    before the failure.
    """

    def __init__(self, message: str, report: Any = None):
        super().__init__(message)
        self.report = report
