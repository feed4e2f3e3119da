from __future__ import annotations

import pytest

from conftest import FakeClock, FakeDriver
from swifttranslator_e2e.config import RunConfig, RunMode
from swifttranslator_e2e.errors import FatalDriverError, ObservationError
from swifttranslator_e2e.runner import ScenarioRunner, is_stable, run
from swifttranslator_e2e.scenarios import (
    NEGATIVE_SCENARIOS,
    POSITIVE_SCENARIOS,
    UI_SCENARIOS,
    ContainsSubstring,
    Custom,
    NonEmpty,
    Scenario,
)

SIMPLE = POSITIVE_SCENARIOS[0]  # "mama gedhara yanavaa." -> contains "මම"


def test_simple_sentence_passes_against_echoing_driver() -> None:
    driver = FakeDriver({"mama gedhara yanavaa.": "මම ගෙදර යනවා."})

    report = run([SIMPLE], driver, RunMode.AUTOMATIC)

    assert len(report.results) == 1
    result = report.results[0]
    assert result.scenario_id == "Pos_Fun_0001"
    assert result.passed is True
    assert result.output == "මම ගෙදර යනවා."
    assert report.complete and report.ok


def test_joined_words_succeed_on_first_non_empty_read(make_runner, clock: FakeClock) -> None:
    scenario = NEGATIVE_SCENARIOS[0]
    assert scenario.input == "mamagedharayanavaa"
    driver = FakeDriver({scenario.input: [""] * 25 + ["මමගෙදරයනවා"]})

    report = make_runner(driver).run([scenario])

    result = report.results[0]
    assert result.passed is True
    assert result.output == "මමගෙදරයනවා"
    assert driver.reads[scenario.input] == 26
    assert clock.now == pytest.approx(25 * 0.15)


def test_every_scenario_gets_exactly_one_result(make_runner) -> None:
    scenarios = [*POSITIVE_SCENARIOS[:3], *NEGATIVE_SCENARIOS[:2]]
    driver = FakeDriver(translate=lambda text: "මම " + text.upper())

    report = make_runner(driver).run(scenarios)

    assert [r.scenario_id for r in report.results] == [s.id for s in scenarios]


def test_failing_scenario_does_not_stop_the_run(make_runner) -> None:
    scenarios = [
        Scenario("S1", "first", "mama", ContainsSubstring("මම")),
        Scenario("S2", "wrong output", "api", ContainsSubstring("අපි")),
        Scenario("S3", "never translated", "oyaa", NonEmpty()),
        Scenario("S4", "last", "mata", ContainsSubstring("මට")),
    ]
    driver = FakeDriver({"mama": "මම", "api": "ආපී", "oyaa": "oyaa", "mata": "මට"})

    report = make_runner(driver).run(scenarios)

    assert len(report.results) == 4
    assert [r.passed for r in report.results] == [True, False, False, True]
    assert report.passed == 2 and report.failed == 2
    assert "contains 'අපි'" in report.results[1].detail
    # Output that only echoes the input never stabilises.
    assert report.results[2].detail.startswith("Timed out")
    assert report.results[2].output == "oyaa"
    assert report.complete is True
    assert report.ok is False


def test_unreadable_output_is_recorded_and_run_continues(make_runner) -> None:
    scenarios = [
        Scenario("S1", "vanishes", "mama", NonEmpty()),
        Scenario("S2", "fine", "api", NonEmpty()),
    ]
    driver = FakeDriver({"api": "අපි"})
    driver.unreadable.add("mama")

    report = make_runner(driver).run(scenarios)

    assert [r.passed for r in report.results] == [False, True]
    assert "vanished" in report.results[0].detail
    assert report.results[0].output == ""


def test_input_is_cleared_before_each_submission(make_runner) -> None:
    scenarios = list(POSITIVE_SCENARIOS[:2])
    driver = FakeDriver(translate=lambda text: "ම" + text)

    make_runner(driver).run(scenarios)

    set_calls = [c[1] for c in driver.calls if c[0] == "set_value"]
    assert set_calls == ["", scenarios[0].input, "", scenarios[1].input]


def test_navigates_only_when_off_page(make_runner, config: RunConfig) -> None:
    driver = FakeDriver(translate=lambda text: "ම" + text)

    make_runner(driver).run(list(POSITIVE_SCENARIOS[:3]))

    assert [c for c in driver.calls if c[0] == "navigate"] == [("navigate", config.url)]


def test_automatic_mode_waits_fixed_delay_between_scenarios(make_runner, clock: FakeClock) -> None:
    driver = FakeDriver(translate=lambda text: "ම" + text)

    make_runner(driver).run(list(POSITIVE_SCENARIOS[:3]), RunMode.AUTOMATIC)

    assert clock.sleeps.count(1.2) == 2
    assert driver.resumes == 0


def test_manual_mode_waits_for_refresh_between_scenarios(make_runner, clock: FakeClock, capsys) -> None:
    driver = FakeDriver(translate=lambda text: "ම" + text)

    report = make_runner(driver).run(list(POSITIVE_SCENARIOS[:3]), "manual")

    assert driver.resumes == 2
    assert 1.2 not in clock.sleeps
    assert len(report.results) == 3
    assert "REFRESH THE BROWSER" in capsys.readouterr().out


def test_unreachable_page_aborts_with_empty_partial_report(make_runner, config: RunConfig) -> None:
    driver = FakeDriver()
    driver.unreachable.add(config.url)

    with pytest.raises(FatalDriverError) as excinfo:
        make_runner(driver).run(list(POSITIVE_SCENARIOS[:2]))

    report = excinfo.value.report
    assert report.complete is False
    assert report.results == []
    assert "Could not load" in report.abort_reason


class _BreaksAfterRefresh(FakeDriver):
    def await_resume(self) -> None:
        super().await_resume()
        self.input_visible = False


def test_broken_page_mid_run_keeps_completed_results(make_runner) -> None:
    driver = _BreaksAfterRefresh(translate=lambda text: "ම" + text)

    with pytest.raises(FatalDriverError) as excinfo:
        make_runner(driver).run(list(POSITIVE_SCENARIOS[:3]), RunMode.MANUAL)

    report = excinfo.value.report
    assert [r.scenario_id for r in report.results] == ["Pos_Fun_0001"]
    assert report.complete is False
    assert "Input textbox not visible" in report.abort_reason


def test_rerun_is_deterministic() -> None:
    results = []
    for _ in range(2):
        clock = FakeClock()
        driver = FakeDriver({SIMPLE.input: ["", "", "මම ගෙදර යනවා."]})
        runner = ScenarioRunner(RunConfig(), driver, sleep=clock.sleep, monotonic=clock.monotonic)
        results.append(runner.run_one(SIMPLE))

    assert results[0] == results[1]


def test_live_typing_waits_for_output_to_update(make_runner) -> None:
    scenario = UI_SCENARIOS[0]
    driver = FakeDriver(
        {
            "mama kae": "මම කැ",
            "mama kaeema kannavaa": ["මම කැ", "මම කෑම", "මම කෑම කන්නවා"],
        }
    )

    report = make_runner(driver).run([scenario])

    result = report.results[0]
    assert result.passed is True
    # "මම කෑම" differs from the partial output and is accepted as soon as it shows.
    assert result.output == "මම කෑම"
    typed = [c for c in driver.calls if c[0] == "type"]
    assert typed == [("type", "mama kae", 0.15), ("type", "ema kannavaa", 0.15)]


def test_live_typing_fails_when_output_never_updates(make_runner) -> None:
    scenario = UI_SCENARIOS[0]
    driver = FakeDriver({"mama kae": "මම කැ", "mama kaeema kannavaa": "මම කැ"})

    report = make_runner(driver).run([scenario])

    assert report.results[0].passed is False
    assert "output to update after typing" in report.results[0].detail


class _StickyOutput(FakeDriver):
    """Output box keeps the previous translation when the input is cleared."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.shown = ""

    def read_text(self, element: str) -> str:
        if self.value == "":
            return self.shown
        self.shown = super().read_text(element)
        return self.shown


def test_previous_output_is_not_taken_for_the_new_one(make_runner) -> None:
    scenarios = [
        Scenario("S1", "first", "api", ContainsSubstring("අපි")),
        Scenario("S2", "second", "mama", ContainsSubstring("මම")),
    ]
    driver = _StickyOutput({"api": "අපි", "mama": ["අපි", "අපි", "මම"]})

    report = make_runner(driver).run(scenarios)

    assert [r.passed for r in report.results] == [True, True]
    assert report.results[1].output == "මම"


def test_raising_check_is_a_failure(make_runner) -> None:
    def boom(output: str) -> bool:
        raise RuntimeError("bad check")

    scenario = Scenario("S1", "boom", "mama", Custom(boom))
    report = make_runner(FakeDriver({"mama": "මම"})).run([scenario])

    assert report.results[0].passed is False
    assert "RuntimeError" in report.results[0].detail


def test_failure_screenshot_goes_to_artifacts(make_runner, config: RunConfig, tmp_path) -> None:
    cfg = config.with_overrides(artifacts_dir=str(tmp_path))
    driver = FakeDriver({"api": "ආපී"})

    report = make_runner(driver, cfg).run([Scenario("S1", "wrong", "api", ContainsSubstring("අපි"))])

    expected = str(tmp_path / "screenshots" / "failed_S1.png")
    assert driver.screenshots == [expected]
    assert report.results[0].screenshot == expected


def test_passing_scenario_takes_no_screenshot(make_runner, config: RunConfig, tmp_path) -> None:
    cfg = config.with_overrides(artifacts_dir=str(tmp_path))
    driver = FakeDriver({"mama": "මම"})

    report = make_runner(driver, cfg).run([Scenario("S1", "ok", "mama", ContainsSubstring("මම"))])

    assert driver.screenshots == []
    assert report.results[0].screenshot is None


def test_duplicate_ids_are_rejected(make_runner) -> None:
    with pytest.raises(ValueError, match="Duplicate"):
        make_runner(FakeDriver()).run([SIMPLE, SIMPLE])


@pytest.mark.parametrize(
    "output,raw,check_script,expected",
    [
        ("", "mama", True, False),
        ("mama", "mama", False, False),
        ("mama", " mama ", False, False),
        ("MAMA", "mama", False, True),
        ("MAMA", "mama", True, False),
        ("මම", "mama", True, True),
        ("Zoom මීටිං", "Zoom meeting", True, True),
    ],
)
def test_is_stable(output: str, raw: str, check_script: bool, expected: bool) -> None:
    assert is_stable(output, raw, check_script) is expected


def test_repeated_output_after_sticky_box_still_passes(make_runner) -> None:
    scenarios = [
        Scenario("S1", "first", "mama", ContainsSubstring("මම")),
        Scenario("S2", "same words again", "mama ", ContainsSubstring("මම")),
    ]
    driver = _StickyOutput({"mama": "මම", "mama ": "මම"})

    report = make_runner(driver).run(scenarios)

    assert [(r.passed, r.output) for r in report.results] == [(True, "මම"), (True, "මම")]
    # The box would not clear, so the page was reloaded once before the second case.
    assert [c for c in driver.calls if c[0] == "navigate"] == [("navigate", "https://translator.test/")] * 2


class _ClearsOnReload(_StickyOutput):
    def navigate(self, url: str) -> None:
        super().navigate(url)
        self.shown = ""


def test_reload_resets_a_box_that_does_not_clear(make_runner) -> None:
    scenarios = [
        Scenario("S1", "first", "api", ContainsSubstring("අපි")),
        Scenario("S2", "second", "api", ContainsSubstring("අපි")),
    ]
    driver = _ClearsOnReload({"api": "අපි"})

    report = make_runner(driver).run(scenarios)

    assert [r.passed for r in report.results] == [True, True]
    assert driver.reads["api"] == 2


class _InputCheckFails(FakeDriver):
    def is_visible(self, element: str) -> bool:
        if element == "input":
            raise ObservationError("Could not check visibility: Target closed")
        return True


def test_unreadable_input_textbox_aborts_the_run(make_runner) -> None:
    with pytest.raises(FatalDriverError, match="Input textbox not visible") as excinfo:
        make_runner(_InputCheckFails()).run(list(POSITIVE_SCENARIOS[:2]))

    report = excinfo.value.report
    assert report.results == []
    assert report.complete is False
