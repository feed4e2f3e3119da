"""End-to-end checks for the SwiftTranslator Singlish-to-Sinhala web tool."""

from .config import RunConfig, RunMode
from .errors import FatalDriverError, HarnessError, ObservationError, PollTimeoutError
from .poll import PollConfig, poll_until
from .report import Report, RunResult
from .runner import ScenarioRunner
from .scenarios import ContainsSubstring, Custom, NonEmpty, Scenario

__all__ = [
    "ContainsSubstring",
    "Custom",
    "FatalDriverError",
    "HarnessError",
    "NonEmpty",
    "ObservationError",
    "PollConfig",
    "PollTimeoutError",
    "Report",
    "RunConfig",
    "RunMode",
    "RunResult",
    "Scenario",
    "ScenarioRunner",
    "poll_until",
]
