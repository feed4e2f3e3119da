"""Command line entry point: run the catalogue against a live browser."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from playwright.sync_api import sync_playwright

from .config import RunConfig, RunMode, from_env
from .driver import PlaywrightDriver, UIDriver
from .errors import FatalDriverError
from .report import Report
from .runner import ScenarioRunner
from .scenarios import SUITES, Scenario, check_unique, load_catalogue, select


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swifttranslator-e2e",
        description="Run the Singlish-to-Sinhala translator scenarios in a real browser.",
    )
    parser.add_argument("--url", default=None, help="Translator page URL")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in RunMode],
        default=None,
        help="automatic: fixed delay between cases; manual: wait for a browser refresh",
    )
    parser.add_argument("--headless", action="store_true", default=None, help="Hide the browser window")
    parser.add_argument(
        "--suite",
        action="append",
        choices=sorted(SUITES) + ["all"],
        default=[],
        help="Suite to run (repeatable, default: all)",
    )
    parser.add_argument("--scenario", action="append", default=[], help="Only run this scenario id (repeatable)")
    parser.add_argument("--catalogue", action="append", default=[], help="Extra JSON catalogue (repeatable)")
    parser.add_argument("--poll-interval", type=float, default=None, help="Seconds between output reads")
    parser.add_argument("--poll-timeout", type=float, default=None, help="Seconds to wait for stable output")
    parser.add_argument("--delay", type=float, default=None, help="Seconds between cases in automatic mode")
    parser.add_argument("--artifacts", default=None, help="Directory for screenshots and report.json/.csv")
    parser.add_argument("--list", action="store_true", help="Print the selected scenarios and exit")
    return parser


def config_from_args(args: argparse.Namespace, base: RunConfig | None = None) -> RunConfig:
    cfg = base or from_env()
    return cfg.with_overrides(
        url=args.url,
        mode=RunMode(args.mode) if args.mode else None,
        headless=args.headless,
        poll_interval_s=args.poll_interval,
        poll_timeout_s=args.poll_timeout,
        inter_scenario_delay_s=args.delay,
        artifacts_dir=args.artifacts,
    )


def collect_scenarios(args: argparse.Namespace) -> list[Scenario]:
    # An explicit catalogue replaces the built-in suites unless --suite is also given.
    suites = args.suite or ([] if args.catalogue else ["all"])
    names = list(SUITES) if "all" in suites else suites
    scenarios: list[Scenario] = []
    for name in names:
        scenarios.extend(SUITES[name])
    for path in args.catalogue:
        scenarios.extend(load_catalogue(path))
    check_unique(scenarios)
    return select(scenarios, args.scenario)


def run_suite(config: RunConfig, scenarios: Sequence[Scenario]) -> Report:
    """Launch Chromium, load the translator page and run `scenarios`.

    A fatal driver error still yields the partial report, marked incomplete.
    """
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=config.headless)
        try:
            context = browser.new_context(
                viewport={"width": config.viewport[0], "height": config.viewport[1]},
                ignore_https_errors=config.ignore_https_errors,
            )
            context.set_default_navigation_timeout(config.navigation_timeout_ms)
            context.set_default_timeout(config.action_timeout_ms)
            return run_session(config, PlaywrightDriver(context.new_page()), scenarios)
        finally:
            browser.close()


def run_session(config: RunConfig, driver: UIDriver, scenarios: Sequence[Scenario]) -> Report:
    """Load the translator page on `driver` and run `scenarios` there."""
    try:
        driver.navigate(config.url)
        print(">>> Initial Load Complete. Starting Tests... <<<")
        return ScenarioRunner(config, driver).run(scenarios)
    except FatalDriverError as e:
        print(f"An error occurred: {e}")
        if e.report is not None:
            return e.report
        return Report(complete=False, abort_reason=str(e))


def export(report: Report, config: RunConfig) -> None:
    if not config.artifacts_dir:
        return
    out = Path(config.artifacts_dir)
    print(f"Report saved to {report.write_json(out / 'report.json')}")
    print(f"Results sheet saved to {report.write_csv(out / 'report.csv')}")


def exit_code(report: Report) -> int:
    if not report.complete:
        return 2
    return 0 if report.failed == 0 else 1


def main(argv: Sequence[str] | None = None) -> int:
    # Sinhala output must print on consoles that default to another codec.
    for stream in (sys.stdout, sys.stderr):
        if (stream.encoding or "").lower() != "utf-8" and hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding="utf-8")

    args = build_parser().parse_args(argv)
    try:
        config = config_from_args(args)
        scenarios = collect_scenarios(args)
    except (KeyError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.list:
        for s in scenarios:
            kind = "live" if s.is_live else "text"
            print(f"{s.id}\t{kind}\t{s.name}\t{s.input!r}")
        return 0

    report = run_suite(config, scenarios)
    export(report, config)
    if report.ok:
        print("\n>>> ALL TESTS COMPLETED <<<")
    else:
        print(f"\nOne or more tests failed: {report.summary_line()}")
    return exit_code(report)
