import json
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from voiceguard.config import APP_DESCRIPTION, APP_NAME, Settings, get_settings
from voiceguard.core.logging import configure_logging, get_logger
from voiceguard.errors import AUTH_ERROR_MESSAGE, AuthError, RunInProgressError
from voiceguard.handler import VoiceDetectionHandler
from voiceguard.model.model import VoiceClassifier, get_classifier
from voiceguard.runner import ScenarioRunner
from voiceguard.scenarios import build_default_scenarios

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, classifier: Optional[VoiceClassifier] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    if classifier is None:
        classifier = get_classifier(settings)

    handler = VoiceDetectionHandler(settings, classifier)
    runner = ScenarioRunner(
        handler,
        build_default_scenarios(settings),
        delay_seconds=settings.SCENARIO_DELAY_SECONDS,
    )

    app = FastAPI(title=APP_NAME, description=APP_DESCRIPTION)
    app.state.settings = settings
    app.state.handler = handler
    app.state.runner = runner

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("%s ready (endpoint %s, %d scenarios)", APP_NAME, settings.API_ENDPOINT, len(runner.scenarios))

    @app.get("/health")
    def health():
        return {"status": "ok", "endpoint": settings.API_ENDPOINT}

    @app.post("/api/voice-detection")
    async def detect_voice(request: Request):
        # 1. API key, before the body is even parsed
        try:
            handler.validator.check_api_key(request.headers)
        except AuthError as e:
            return JSONResponse(status_code=e.status_code, content={"status": "error", "message": e.message})

        # 2. Parse body; anything that is not JSON is a malformed request
        try:
            body = json.loads(await request.body() or b"null")
        except ValueError:
            return JSONResponse(status_code=400, content={"status": "error", "message": AUTH_ERROR_MESSAGE})

        # 3. Validate + classify
        response, error = await handler.handle_with_error(request.headers, body)
        status_code = error.status_code if error is not None else 200
        return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))

    @app.get("/api/test-suite")
    def test_suite_status():
        return _suite_report(runner)

    @app.post("/api/test-suite/run")
    async def run_test_suite():
        try:
            await runner.run_all()
        except RunInProgressError as e:
            return JSONResponse(status_code=409, content={"status": "error", "message": str(e)})
        return _suite_report(runner)

    return app


def _suite_report(runner: ScenarioRunner) -> dict:
    scenarios = []
    for scenario in runner.scenarios:
        entry = scenario.to_dict()
        entry["state"] = runner.scenario_state(scenario.id).value
        outcome = runner.outcomes.get(scenario.id)
        entry["outcome"] = outcome.to_dict() if outcome is not None else None
        scenarios.append(entry)
    return {
        "state": runner.state.value,
        "currentScenario": runner.current_scenario_id,
        "stats": runner.stats.to_dict(),
        "scenarios": scenarios,
    }


if __name__ == "__main__":
    uvicorn.run("voiceguard.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
