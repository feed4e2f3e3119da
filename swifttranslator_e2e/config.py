from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping

from .poll import PollConfig

DEFAULT_URL = "https://www.swifttranslator.com/"
ENV_PREFIX = "SWIFTTRANSLATOR_"


class RunMode(str, Enum):
    AUTOMATIC = "automatic"
    # Wait for a human to refresh the browser between scenarios.
    MANUAL = "manual"


@dataclass(frozen=True)
class RunConfig:
    url: str = DEFAULT_URL
    poll_interval_s: float = 0.25
    poll_timeout_s: float = 20.0
    visibility_timeout_s: float = 5.0
    inter_scenario_delay_s: float = 1.2
    mode: RunMode = RunMode.AUTOMATIC

    # Browser session
    headless: bool = False
    viewport: tuple[int, int] = (1280, 720)
    ignore_https_errors: bool = True
    navigation_timeout_ms: int = 30000
    action_timeout_ms: int = 15000

    # Screenshots on failure and exported reports; None disables both.
    artifacts_dir: str | None = None

    @property
    def output_poll(self) -> PollConfig:
        return PollConfig(interval_s=self.poll_interval_s, timeout_s=self.poll_timeout_s)

    @property
    def visibility_poll(self) -> PollConfig:
        return PollConfig(interval_s=self.poll_interval_s, timeout_s=self.visibility_timeout_s)

    def with_overrides(self, **overrides) -> "RunConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def from_env(environ: Mapping[str, str] | None = None, base: RunConfig | None = None) -> RunConfig:
    """Build a config from SWIFTTRANSLATOR_* environment variables.

    Recognised: URL, POLL_INTERVAL, POLL_TIMEOUT, DELAY, MODE, HEADLESS, ARTIFACTS.
    """
    env = os.environ if environ is None else environ
    cfg = base or RunConfig()

    def get(name: str) -> str | None:
        value = env.get(ENV_PREFIX + name)
        return value if value not in (None, "") else None

    overrides = {}
    if get("URL"):
        overrides["url"] = get("URL")
    if get("POLL_INTERVAL"):
        overrides["poll_interval_s"] = float(get("POLL_INTERVAL"))
    if get("POLL_TIMEOUT"):
        overrides["poll_timeout_s"] = float(get("POLL_TIMEOUT"))
    if get("DELAY"):
        overrides["inter_scenario_delay_s"] = float(get("DELAY"))
    if get("MODE"):
        overrides["mode"] = RunMode(get("MODE").lower())
    if get("HEADLESS"):
        overrides["headless"] = _as_bool(get("HEADLESS"))
    if get("ARTIFACTS"):
        overrides["artifacts_dir"] = get("ARTIFACTS")
    return cfg.with_overrides(**overrides)
