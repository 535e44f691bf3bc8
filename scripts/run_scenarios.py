"""
Run the automated scenario suite against the voice detection handler.

Usage:
    python scripts/run_scenarios.py --stub
    python scripts/run_scenarios.py --delay 0.5

Exits with status 1 if any scenario fails.
"""
import argparse
import asyncio
import sys

from voiceguard.config import get_settings
from voiceguard.core.logging import configure_logging
from voiceguard.handler import VoiceDetectionHandler
from voiceguard.model.model import get_classifier
from voiceguard.model.stub import StubClassifier
from voiceguard.runner import ScenarioRunner
from voiceguard.scenarios import build_default_scenarios


def print_progress(scenario, outcome):
    mark = "PASS" if outcome.passed else "FAIL"
    print(f"[{mark}] {scenario.id} {scenario.category.value:<10} {scenario.name}")
    if not outcome.passed:
        expected = f'Status "{scenario.expected_status}"'
        if scenario.expected_message_fragment:
            expected += f' containing "{scenario.expected_message_fragment}"'
        actual = f'Status "{outcome.actual_status}"'
        if outcome.actual_message:
            actual += f' - Message: "{outcome.actual_message}"'
        print(f"       Expected: {expected}")
        print(f"       Actual:   {actual}")
    elif outcome.response and outcome.response.get("status") == "success":
        print(f"       Confirmed: {outcome.response['classification']} "
              f"(Confidence: {outcome.response['confidenceScore']})")


def main(argv=None):
    p = argparse.ArgumentParser(description="Run the voice detection scenario suite")
    p.add_argument("--stub", action="store_true", help="Use the deterministic stub classifier instead of Gemini")
    p.add_argument("--delay", type=float, default=None, help="Seconds to pause before each scenario")
    args = p.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    classifier = StubClassifier() if args.stub else get_classifier(settings)
    delay = settings.SCENARIO_DELAY_SECONDS if args.delay is None else args.delay

    runner = ScenarioRunner(
        VoiceDetectionHandler(settings, classifier),
        build_default_scenarios(settings),
        delay_seconds=delay,
        on_progress=print_progress,
    )
    print(f"Automated Test Suite  ({settings.API_ENDPOINT})")
    asyncio.run(runner.run_all())

    stats = runner.stats
    print(f"\nTotal: {stats.total}  Passed: {stats.passed}  Failed: {stats.failed}")
    return 0 if stats.passed == stats.total else 1


if __name__ == "__main__":
    sys.exit(main())
