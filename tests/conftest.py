from __future__ import annotations

from typing import Callable, Mapping, Sequence

import pytest

from swifttranslator_e2e.config import RunConfig
from swifttranslator_e2e.driver import BOX_SELECTOR, INPUT_NAME
from swifttranslator_e2e.errors import FatalDriverError, ObservationError
from swifttranslator_e2e.runner import ScenarioRunner


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeDriver:
    """In-memory translator page.

    `outputs` maps the current input text to what the output box shows on
    successive reads (the last entry repeats). Inputs without an entry read
    back through `translate`.
    """

    def __init__(
        self,
        outputs: Mapping[str, Sequence[str] | str] | None = None,
        translate: Callable[[str], str] | None = None,
        url: str = "about:blank",
    ) -> None:
        self.outputs = {k: [v] if isinstance(v, str) else list(v) for k, v in (outputs or {}).items()}
        self.translate = translate or (lambda text: "")
        self.url = url
        self.value = ""
        self.reads: dict[str, int] = {}
        self.calls: list[tuple] = []
        self.resumes = 0
        self.screenshots: list[str] = []
        self.input_visible = True
        self.unreadable: set[str] = set()
        self.unreachable: set[str] = set()

    def navigate(self, url: str) -> None:
        self.calls.append(("navigate", url))
        if url in self.unreachable:
            raise FatalDriverError(f"Could not load {url}")
        self.url = url
        self.value = ""

    def locate_by_role(self, role: str, name: str) -> str:
        assert (role, name) == ("textbox", INPUT_NAME)
        return "input"

    def locate_by_selector(self, selector: str) -> str:
        assert selector == BOX_SELECTOR
        return "output"

    def is_visible(self, element: str) -> bool:
        return self.input_visible if element == "input" else True

    def set_value(self, element: str, text: str) -> None:
        assert element == "input"
        self.calls.append(("set_value", text))
        self.value = text

    def append_keystrokes(self, element: str, text: str, per_char_delay_s: float) -> None:
        assert element == "input"
        self.calls.append(("type", text, per_char_delay_s))
        self.value += text

    def read_text(self, element: str) -> str:
        assert element == "output"
        if self.value == "":
            return ""
        if self.value in self.unreadable:
            raise ObservationError("Output element vanished")
        count = self.reads.get(self.value, 0)
        self.reads[self.value] = count + 1
        script = self.outputs.get(self.value)
        if script is None:
            return self.translate(self.value)
        return script[min(count, len(script) - 1)]

    def current_url(self) -> str:
        return self.url

    def await_resume(self) -> None:
        self.resumes += 1
        self.calls.append(("await_resume",))

    def screenshot(self, path: str) -> None:
        self.screenshots.append(path)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> RunConfig:
    return RunConfig(url="https://translator.test/", poll_interval_s=0.15, poll_timeout_s=20.0)


@pytest.fixture
def make_runner(config: RunConfig, clock: FakeClock):
    def _make(driver: FakeDriver, cfg: RunConfig | None = None) -> ScenarioRunner:
        return ScenarioRunner(cfg or config, driver, sleep=clock.sleep, monotonic=clock.monotonic)

    return _make
