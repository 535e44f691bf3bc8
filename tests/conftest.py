import pytest

from voiceguard.config import Settings
from voiceguard.handler import VoiceDetectionHandler
from voiceguard.model.stub import StubClassifier
from voiceguard.schemas import Classification, ClassificationResult

VALID_KEY = "sk_test_123456789"


class FailingClassifier:
    """Raises the given exception on every call."""

    def __init__(self, exc: Exception):
        self.exc = exc
        self.calls = 0

    async def classify(self, audio_base64, language):
        self.calls += 1
        raise self.exc


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, CLASSIFIER="stub", SCENARIO_DELAY_SECONDS=0, GEMINI_API_KEY="")


@pytest.fixture
def stub() -> StubClassifier:
    return StubClassifier(
        ClassificationResult(
            classification=Classification.HUMAN,
            confidenceScore=0.92,
            explanation="Irregular micro-breaths and natural pitch drift.",
        )
    )


@pytest.fixture
def handler(settings, stub) -> VoiceDetectionHandler:
    return VoiceDetectionHandler(settings, stub)


@pytest.fixture
def valid_headers():
    return {"Content-Type": "application/json", "x-api-key": VALID_KEY}
