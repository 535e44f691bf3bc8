from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class SupportedLanguage(str, Enum):
    Tamil = "Tamil"
    English = "English"
    Hindi = "Hindi"
    Malayalam = "Malayalam"
    Telugu = "Telugu"


class Classification(str, Enum):
    AI_GENERATED = "AI_GENERATED"
    HUMAN = "HUMAN"


class DetectRequest(BaseModel):
    """Request body that passed validation."""
    language: str
    audioFormat: str
    audioBase64: str


class ClassificationResult(BaseModel):
    """What a classifier returns for one audio sample."""
    classification: Classification
    confidenceScore: float = Field(..., ge=0.0, le=1.0)
    explanation: str = Field(..., min_length=1)


class SuccessResponse(BaseModel):
    status: Literal["success"] = "success"
    language: str
    classification: Classification
    confidenceScore: float
    explanation: str


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str


ApiResponse = Annotated[Union[SuccessResponse, ErrorResponse], Field(discriminator="status")]
