"""Sequential scenario runner over a single translator page session."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Callable, Sequence

from .config import RunConfig, RunMode
from .driver import UIDriver, input_box, output_box
from .errors import FatalDriverError, ObservationError, PollTimeoutError
from .poll import PollConfig, poll_until
from .report import Report, RunResult
from .scenarios import Scenario, check_unique, has_sinhala


def is_stable(output: str, raw_input: str, check_script: bool = True) -> bool:
    """Output counts as final once it is non-empty, differs from the input,
    and (when `check_script`) contains a Sinhala letter."""
    if not output:
        return False
    if output == raw_input.strip():
        return False
    return has_sinhala(output) if check_script else True


class ScenarioRunner:
    """Runs scenarios one after another against one `UIDriver`.

    Scenario-level failures (wrong output, timeouts, unreadable output) are
    recorded and the run moves on. A `FatalDriverError` stops the run and is
    re-raised with the partial report attached as `err.report`.
    """

    def __init__(
        self,
        config: RunConfig,
        driver: UIDriver,
        *,
        sleep: Callable[[float], None] = time.sleep,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.driver = driver
        self._sleep = sleep
        self._monotonic = monotonic

    def run(self, scenarios: Sequence[Scenario], mode: RunMode | str | None = None) -> Report:
        mode = RunMode(mode or self.config.mode)
        scenarios = list(scenarios)
        check_unique(scenarios)

        report = Report()
        for idx, scenario in enumerate(scenarios):
            try:
                if idx > 0:
                    self._gate(mode)
                print(f"\n--- Running [{scenario.id}] {scenario.name} ---")
                result = self.run_one(scenario)
            except FatalDriverError as e:
                report.complete = False
                report.abort_reason = str(e)
                print(f"Run aborted at [{scenario.id}]: {e}")
                e.report = report
                raise
            report.add(result)

        print(f"\n>>> {report.summary_line()} <<<")
        return report

    def run_one(self, scenario: Scenario) -> RunResult:
        started = self._monotonic()
        try:
            output = self._submit_and_wait(scenario)
        except PollTimeoutError as e:
            return self._record(scenario, e.last_value or "", False, str(e), started)
        except ObservationError as e:
            return self._record(scenario, "", False, str(e), started)

        try:
            passed = bool(scenario.expect(output))
            detail = None if passed else f"output check failed: {_describe(scenario.expect)}"
        except Exception as e:
            passed = False
            detail = f"check raised {type(e).__name__}: {e}"
        return self._record(scenario, output, passed, detail, started)

    def _submit_and_wait(self, scenario: Scenario) -> str:
        self._ensure_page()

        field, box, stale = self._clear_page()
        if stale:
            print(f'Output still shows "{stale}" after clearing; reloading the page.')
            self.driver.navigate(self.config.url)
            field, box, stale = self._clear_page()

        # Leftover text is refused only until the page has had time to replace it,
        # so a new output equal to the old one still passes.
        refuse_until = self._monotonic() + self.config.visibility_timeout_s

        def fresh(text: str) -> bool:
            return not stale or text != stale or self._monotonic() >= refuse_until

        if not scenario.is_live:
            self.driver.set_value(field, scenario.input)
            return self._wait_for_output(
                box,
                lambda t: fresh(t) and is_stable(t, scenario.input, scenario.check_script),
                "stable output",
            )

        prefix = scenario.live_prefix or ""
        rest = scenario.input[len(prefix):]
        self.driver.append_keystrokes(field, prefix, scenario.keystroke_delay_s)
        partial = self._wait_for_output(
            box,
            lambda t: fresh(t) and has_sinhala(t),
            "Sinhala output while typing",
        )
        print(f'Partial Input: "{prefix}" -> Output detected.')
        if not rest:
            return partial

        self.driver.append_keystrokes(field, rest, scenario.keystroke_delay_s)
        return self._wait_for_output(
            box,
            lambda t: t != partial and is_stable(t, scenario.input, scenario.check_script),
            "output to update after typing",
        )

    def _clear_page(self) -> tuple[Any, Any, str]:
        field = input_box(self.driver)
        try:
            self._wait_visible(field, "input textbox")
        except (PollTimeoutError, ObservationError) as e:
            raise FatalDriverError(f"Input textbox not visible on {self.config.url}: {e}") from e
        self.driver.set_value(field, "")

        box = output_box(self.driver)
        self._require_visible(box)
        return field, box, self._wait_cleared(box)

    def _wait_cleared(self, box: Any) -> str:
        """Wait for the output to empty after the input is cleared.

        Returns "" once it does, otherwise the leftover text, which later
        waits refuse as the new output for up to the visibility timeout.
        """
        try:
            poll_until(
                lambda: self.driver.read_text(box),
                lambda t: t == "",
                self.config.visibility_poll,
                description="output to clear",
                monotonic=self._monotonic,
                sleep=self._sleep,
            )
        except PollTimeoutError as e:
            return e.last_value or ""
        return ""

    def _ensure_page(self) -> None:
        if self.driver.current_url() != self.config.url:
            self.driver.navigate(self.config.url)

    def _wait_visible(self, element: Any, what: str) -> None:
        poll_until(
            lambda: self.driver.is_visible(element),
            bool,
            self.config.visibility_poll,
            description=f"{what} to be visible",
            monotonic=self._monotonic,
            sleep=self._sleep,
        )

    def _require_visible(self, element: Any) -> None:
        try:
            self._wait_visible(element, "output box")
        except PollTimeoutError as e:
            raise ObservationError("Output box not visible") from e

    def _wait_for_output(self, element: Any, predicate: Callable[[str], bool], what: str) -> str:
        return poll_until(
            lambda: self.driver.read_text(element),
            predicate,
            self.config.output_poll,
            description=what,
            monotonic=self._monotonic,
            sleep=self._sleep,
        )

    def _gate(self, mode: RunMode) -> None:
        if mode is RunMode.MANUAL:
            print("\n>>> TEST FINISHED. REFRESH THE BROWSER TO RUN THE NEXT TEST... <<<\n")
            self.driver.await_resume()
            print(">>> Refresh detected! Starting next test...\n")
        else:
            self._sleep(self.config.inter_scenario_delay_s)

    def _record(
        self,
        scenario: Scenario,
        output: str,
        passed: bool,
        detail: str | None,
        started: float,
    ) -> RunResult:
        result = RunResult(
            scenario_id=scenario.id,
            name=scenario.name,
            input=scenario.input,
            output=output,
            passed=passed,
            detail=detail,
            duration_s=max(self._monotonic() - started, 0.0),
        )
        print(f'Input: "{scenario.input}"')
        print(f'Output: "{output}"')
        if passed:
            print(f"--- PASSED: {scenario.id} ---")
        else:
            print(f"--- FAILED: {scenario.id}: {detail} ---")
            result.screenshot = self._capture(scenario.id)
        return result

    def _capture(self, name: str) -> str | None:
        if not self.config.artifacts_dir:
            return None
        path = Path(self.config.artifacts_dir) / "screenshots" / f"failed_{name}.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self.driver.screenshot(str(path))
        except ObservationError as e:
            print(f"Could not save screenshot for {name}: {e}")
            return None
        print(f"Screenshot saved to {path}")
        return str(path)


def _describe(expect: Any) -> str:
    describe = getattr(expect, "describe", None)
    return describe() if callable(describe) else repr(expect)


def run(
    scenarios: Sequence[Scenario],
    driver: UIDriver,
    mode: RunMode | str = RunMode.AUTOMATIC,
    config: RunConfig | None = None,
    poll: PollConfig | None = None,
) -> Report:
    """Convenience wrapper: run `scenarios` with a fresh `ScenarioRunner`."""
    cfg = config or RunConfig()
    if poll is not None:
        cfg = cfg.with_overrides(poll_interval_s=poll.interval_s, poll_timeout_s=poll.timeout_s)
    return ScenarioRunner(cfg, driver).run(scenarios, mode)
