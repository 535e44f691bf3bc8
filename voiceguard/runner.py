"""
Runs the scenario table through the voice detection handler and checks each
response against the expected outcome.

Scenarios execute one at a time in table order; an outcome is recorded before
the next scenario starts. A new run replaces every outcome of the previous one.
"""
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from voiceguard.core.logging import get_logger
from voiceguard.errors import RunInProgressError
from voiceguard.handler import VoiceDetectionHandler
from voiceguard.scenarios import Scenario

logger = get_logger(__name__)

EXCEPTION_STATUS = "EXCEPTION"


class RunState(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"


class ScenarioState(str, Enum):
    PENDING = "PENDING"
    EXECUTING = "EXECUTING"
    PASSED = "PASSED"
    FAILED = "FAILED"


@dataclass
class ScenarioOutcome:
    id: str
    passed: bool
    actual_status: str
    actual_message: Optional[str] = None
    response: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "passed": self.passed,
            "actualStatus": self.actual_status,
            "actualMessage": self.actual_message,
            "response": self.response,
        }


@dataclass(frozen=True)
class RunStats:
    total: int
    executed: int
    passed: int

    @property
    def failed(self) -> int:
        return self.executed - self.passed

    def to_dict(self) -> Dict[str, int]:
        return {"total": self.total, "executed": self.executed, "passed": self.passed, "failed": self.failed}


ProgressCallback = Callable[[Scenario, ScenarioOutcome], None]


def evaluate(scenario: Scenario, status: str, message: Optional[str]) -> bool:
    passed = status == scenario.expected_status
    if passed and scenario.expected_message_fragment:
        passed = message is not None and scenario.expected_message_fragment in message
    return passed


class ScenarioRunner:
    def __init__(
        self,
        handler: VoiceDetectionHandler,
        scenarios: Sequence[Scenario],
        delay_seconds: float = 0.0,
        on_progress: Optional[ProgressCallback] = None,
    ):
        ids = [s.id for s in scenarios]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate scenario ids: {', '.join(duplicates)}")

        self.handler = handler
        self.scenarios = tuple(scenarios)
        self.delay_seconds = delay_seconds
        self.on_progress = on_progress
        self.state = RunState.IDLE
        self.current_scenario_id: Optional[str] = None
        self.outcomes: Dict[str, ScenarioOutcome] = {}

    @property
    def is_running(self) -> bool:
        return self.state == RunState.RUNNING

    @property
    def stats(self) -> RunStats:
        return RunStats(
            total=len(self.scenarios),
            executed=len(self.outcomes),
            passed=sum(1 for o in self.outcomes.values() if o.passed),
        )

    def scenario_state(self, scenario_id: str) -> ScenarioState:
        if scenario_id == self.current_scenario_id:
            return ScenarioState.EXECUTING
        outcome = self.outcomes.get(scenario_id)
        if outcome is None:
            return ScenarioState.PENDING
        return ScenarioState.PASSED if outcome.passed else ScenarioState.FAILED

    async def run_scenario(self, scenario: Scenario) -> ScenarioOutcome:
        try:
            response = await self.handler.handle(scenario.headers, scenario.body)
            message = getattr(response, "message", None)
            return ScenarioOutcome(
                id=scenario.id,
                passed=evaluate(scenario, response.status, message),
                actual_status=response.status,
                actual_message=message,
                response=response.model_dump(mode="json"),
            )
        except Exception as e:
            logger.exception("Scenario %s raised unexpectedly", scenario.id)
            return ScenarioOutcome(
                id=scenario.id,
                passed=False,
                actual_status=EXCEPTION_STATUS,
                actual_message=str(e),
            )

    def _report_progress(self, scenario: Scenario, outcome: ScenarioOutcome) -> None:
        if self.on_progress is None:
            return
        try:
            self.on_progress(scenario, outcome)
        except Exception:
            logger.exception("Progress callback failed for scenario %s", scenario.id)

    async def run_all(self) -> List[ScenarioOutcome]:
        # Checked and set before the first await, so no lock is needed
        if self.is_running:
            raise RunInProgressError("A test run is already in progress")
        self.state = RunState.RUNNING
        self.outcomes = {}

        try:
            for scenario in self.scenarios:
                self.current_scenario_id = scenario.id
                if self.delay_seconds > 0:
                    await asyncio.sleep(self.delay_seconds)

                outcome = await self.run_scenario(scenario)
                self.outcomes[scenario.id] = outcome
                logger.info(
                    "%s %s: %s (status=%s)",
                    scenario.id, scenario.name, "PASS" if outcome.passed else "FAIL", outcome.actual_status,
                )
                self._report_progress(scenario, outcome)
        except BaseException:
            # Cancelled mid-run: a partial run never counts as completed
            self.state = RunState.IDLE
            raise
        finally:
            self.current_scenario_id = None
        self.state = RunState.COMPLETED

        stats = self.stats
        logger.info("Run finished: %d/%d passed", stats.passed, stats.total)
        return [self.outcomes[s.id] for s in self.scenarios]
