from typing import Any, Mapping, Optional, Tuple

from voiceguard.config import Settings
from voiceguard.core.logging import get_logger
from voiceguard.dispatcher import ClassificationDispatcher
from voiceguard.errors import VoiceDetectionError
from voiceguard.model.model import VoiceClassifier
from voiceguard.schemas import ApiResponse, ErrorResponse
from voiceguard.validation import RequestValidator

logger = get_logger(__name__)


class VoiceDetectionHandler:
    """
    Controller for POST /api/voice-detection.

    Validation runs first and rejects without calling the classifier. Every
    contract error comes back as an ErrorResponse; the handler only raises on
    bugs.
    """

    def __init__(self, settings: Settings, classifier: VoiceClassifier):
        self.endpoint = settings.API_ENDPOINT
        self.validator = RequestValidator(settings)
        self.dispatcher = ClassificationDispatcher(classifier)

    async def handle(self, headers: Mapping[str, str], body: Any) -> ApiResponse:
        response, _ = await self.handle_with_error(headers, body)
        return response

    async def handle_with_error(
        self, headers: Mapping[str, str], body: Any
    ) -> Tuple[ApiResponse, Optional[VoiceDetectionError]]:
        """Same as handle(), also returning the error that produced an ErrorResponse."""
        try:
            req = self.validator.validate(headers, body)
            response = await self.dispatcher.dispatch(req)
        except VoiceDetectionError as e:
            logger.info("POST %s -> error (%s): %s", self.endpoint, type(e).__name__, e.message)
            return ErrorResponse(message=e.message), e

        logger.info(
            "POST %s -> success (%s, %s, %.2f)",
            self.endpoint, response.language, response.classification.value, response.confidenceScore,
        )
        return response, None
