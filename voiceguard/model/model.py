from typing import Protocol

from voiceguard.config import Settings
from voiceguard.core.logging import get_logger
from voiceguard.schemas import ClassificationResult

logger = get_logger(__name__)


class VoiceClassifier(Protocol):
    """
    Anything that can label a base64 audio sample as human or AI generated.
    The payload is raw base64 (no data URI header).
    """

    async def classify(self, audio_base64: str, language: str) -> ClassificationResult:
        ...


def get_classifier(settings: Settings) -> VoiceClassifier:
    """
    Returns the Gemini classifier, or the deterministic stub when
    CLASSIFIER=stub (offline runs of the scenario suite).
    """
    if settings.CLASSIFIER == "stub":
        from voiceguard.model.stub import StubClassifier
        logger.info("Using deterministic stub classifier")
        return StubClassifier()

    from voiceguard.model.gemini import GeminiClassifier
    logger.info("Using Gemini classifier (model=%s)", settings.GEMINI_MODEL)
    return GeminiClassifier(settings)
