"""
Gemini-backed voice classifier.

Sends the audio inline to the generateContent REST endpoint together with a
forensic prompt and a JSON response schema, then parses the reply into a
ClassificationResult. Any problem (HTTP error, timeout, empty or malformed
reply) is raised to the caller unchanged.
"""
from typing import Any, Dict, Optional

import httpx

from voiceguard.config import Settings
from voiceguard.core.logging import get_logger
from voiceguard.schemas import ClassificationResult

logger = get_logger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a world-class audio forensic analyst. Your analysis must be extremely critical. "
    "If you detect ANY signs of neural synthesis (vocoder artifacts, unnatural phase coherence), "
    "classify as AI_GENERATED. Be precise with your confidence score based on the strength of "
    "the artifacts found."
)

PROMPT_TEMPLATE = """
Perform a deep forensic acoustic analysis on the provided audio sample to detect if it is AI-generated (Deepfake/TTS) or Human.

Target Language: {language}

Analysis Framework:
1. Spectral Artifacts: Listen for high-frequency metallic buzzing, phasing, or "vocoder" quality common in neural vocoders.
2. Breath Dynamics: Humans have natural, irregular micro-breaths between phrases. AI often has either no breaths, or pre-recorded, repetitive breath sounds that don't match the exertion of speech.
3. Prosody & Intonation: Check for "flatness" in pitch or unnaturally perfect rhythm (isochrony). Humans vary speed and pitch based on emotion and emphasis.
4. Noise Floor: Humans have a consistent background noise floor. AI often has "digital silence" (absolute 0 amplitude) between words or spectral gating artifacts.
5. Glottal Artifacts: Listen to the vocal fry and glottal stops. AI often struggles to replicate the chaotic nature of human vocal folds.

Evaluate the evidence and determine the likelihood.

Return a strictly formatted JSON response.
"""

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "classification": {"type": "STRING", "enum": ["AI_GENERATED", "HUMAN"]},
        "confidenceScore": {
            "type": "NUMBER",
            "description": "A precise float between 0.0 and 1.0 representing certainty. 1.0 is absolute certainty.",
        },
        "explanation": {
            "type": "STRING",
            "description": "Technical forensic explanation citing specific artifacts "
                           "(e.g., 'Lack of breathing sounds', 'Metallic phasing at 8kHz').",
        },
    },
    "required": ["classification", "confidenceScore", "explanation"],
}

# Output budget must stay above the thinking budget
THINKING_BUDGET = 2048
MAX_OUTPUT_TOKENS = 4096


class GeminiError(Exception):
    pass


def build_payload(audio_base64: str, language: str) -> Dict[str, Any]:
    return {
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"text": PROMPT_TEMPLATE.format(language=language)},
                    {"inlineData": {"mimeType": "audio/mp3", "data": audio_base64}},
                ],
            }
        ],
        "generationConfig": {
            "thinkingConfig": {"thinkingBudget": THINKING_BUDGET},
            "maxOutputTokens": MAX_OUTPUT_TOKENS,
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }


def extract_text(data: Dict[str, Any]) -> str:
    """Concatenate the non-thought text parts of the first candidate."""
    candidates = data.get("candidates") or []
    if not candidates:
        raise GeminiError("No candidates in Gemini response")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(p.get("text", "") for p in parts if not p.get("thought"))
    if not text.strip():
        raise GeminiError("No response text received from Gemini.")
    return text


class GeminiClassifier:
    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.api_key = settings.GEMINI_API_KEY
        self.model = settings.GEMINI_MODEL
        self.url = f"{settings.GEMINI_BASE_URL.rstrip('/')}/models/{self.model}:generateContent"
        self.timeout = settings.GEMINI_TIMEOUT_SECONDS
        self._client = client
        if not self.api_key:
            logger.error("Missing GEMINI_API_KEY; every classification request will fail.")

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        if self._client is not None:
            return await self._client.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.url, json=payload, headers=headers)

    async def classify(self, audio_base64: str, language: str) -> ClassificationResult:
        if not self.api_key:
            raise GeminiError("GEMINI_API_KEY is not configured")

        resp = await self._post(build_payload(audio_base64, language))
        resp.raise_for_status()
        text = extract_text(resp.json())
        logger.debug("Gemini raw reply: %s", text)
        return ClassificationResult.model_validate_json(text)
