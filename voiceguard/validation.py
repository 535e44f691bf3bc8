import secrets
from typing import Any, Mapping, Optional

from voiceguard.config import Settings
from voiceguard.errors import (
    AuthError,
    INVALID_FORMAT_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    ValidationError,
)
from voiceguard.schemas import DetectRequest

API_KEY_HEADERS = ("x-api-key", "X-API-KEY")
REQUIRED_FIELDS = ("language", "audioFormat", "audioBase64")


def get_api_key(headers: Mapping[str, str]) -> Optional[str]:
    for name in API_KEY_HEADERS:
        value = headers.get(name)
        if value:
            return value
    return None


class RequestValidator:
    """
    Checks the API key and request body, in order, and raises on the first
    failure. Never touches the network or disk.
    """

    def __init__(self, settings: Settings):
        self.api_key = settings.API_KEY
        self.languages = tuple(settings.SUPPORTED_LANGUAGES)

    def check_api_key(self, headers: Mapping[str, str]) -> None:
        supplied = get_api_key(headers)
        if supplied is None or not secrets.compare_digest(
            supplied.encode("utf-8"), self.api_key.encode("utf-8")
        ):
            raise AuthError()

    def validate(self, headers: Mapping[str, str], body: Any) -> DetectRequest:
        # 1. API key
        self.check_api_key(headers)

        # 2. Required fields
        if not isinstance(body, Mapping):
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        for field in REQUIRED_FIELDS:
            value = body.get(field)
            if not isinstance(value, str) or not value:
                raise ValidationError(MISSING_FIELDS_MESSAGE)

        # 3. Language
        if body["language"] not in self.languages:
            raise ValidationError(
                f"Unsupported language. Supported: {', '.join(self.languages)}"
            )

        # 4. Audio format
        if body["audioFormat"].lower() != "mp3":
            raise ValidationError(INVALID_FORMAT_MESSAGE)

        return DetectRequest(
            language=body["language"],
            audioFormat=body["audioFormat"],
            audioBase64=body["audioBase64"],
        )
