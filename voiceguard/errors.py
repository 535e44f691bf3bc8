"""
Error taxonomy for the voice detection pipeline.

Every error carries the caller-facing message and the HTTP status the API maps
it to. Messages never include internal failure details.
"""

AUTH_ERROR_MESSAGE = "Invalid API key or malformed request"
MISSING_FIELDS_MESSAGE = "Missing required fields: language, audioFormat, or audioBase64"
INVALID_FORMAT_MESSAGE = 'Invalid audioFormat. Only "mp3" is supported.'
INTERNAL_ERROR_MESSAGE = "Internal processing error during voice analysis."


class VoiceDetectionError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(VoiceDetectionError):
    status_code = 401

    def __init__(self, message: str = AUTH_ERROR_MESSAGE):
        super().__init__(message)


class ValidationError(VoiceDetectionError):
    status_code = 400


class InternalError(VoiceDetectionError):
    status_code = 500

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE):
        super().__init__(message)


class RunInProgressError(RuntimeError):
    """Raised when a scenario run is requested while another is active."""
