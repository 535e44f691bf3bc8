from voiceguard.core.logging import get_logger
from voiceguard.errors import InternalError
from voiceguard.model.model import VoiceClassifier
from voiceguard.schemas import DetectRequest, SuccessResponse
from voiceguard.utils.audio import strip_data_uri

logger = get_logger(__name__)


class ClassificationDispatcher:
    """
    Forwards a validated request to the classifier, once, and wraps the
    result. Classifier failures are logged in full and replaced by a generic
    InternalError.
    """

    def __init__(self, classifier: VoiceClassifier):
        self.classifier = classifier

    async def dispatch(self, req: DetectRequest) -> SuccessResponse:
        audio_base64 = strip_data_uri(req.audioBase64)
        try:
            result = await self.classifier.classify(audio_base64, req.language)
            return SuccessResponse(
                language=req.language,
                classification=result.classification,
                confidenceScore=result.confidenceScore,
                explanation=result.explanation,
            )
        except Exception:
            logger.exception("Voice analysis failed (language=%s)", req.language)
            raise InternalError()
