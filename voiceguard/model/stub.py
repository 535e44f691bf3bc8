from typing import List, Optional, Tuple

from voiceguard.schemas import Classification, ClassificationResult


class StubClassifier:
    """
    Deterministic fallback used when no live model should be called.
    Always returns the same result and records every call it receives.
    """

    def __init__(self, result: Optional[ClassificationResult] = None):
        self.result = result or ClassificationResult(
            classification=Classification.HUMAN,
            confidenceScore=0.92,
            explanation="Natural breath dynamics and irregular micro-pauses consistent with human speech.",
        )
        self.calls: List[Tuple[str, str]] = []

    async def classify(self, audio_base64: str, language: str) -> ClassificationResult:
        self.calls.append((audio_base64, language))
        return self.result.model_copy()