"""
Fixed scenario table for the self-verifying test suite.

Each scenario is a request (headers + body) and the outcome the API must
produce for it. The table is built once from the settings and never mutated.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from voiceguard.config import Settings
from voiceguard.utils.audio import SILENCE_MP3_BASE64


class ScenarioCategory(str, Enum):
    AUTH = "AUTH"
    VALIDATION = "VALIDATION"
    FUNCTIONAL = "FUNCTIONAL"


def _frozen(d: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class Scenario:
    id: str
    category: ScenarioCategory
    name: str
    description: str
    headers: Mapping[str, str]
    body: Mapping[str, Any]
    expected_status: str
    # If set, the error message must contain this fragment
    expected_message_fragment: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category.value,
            "name": self.name,
            "description": self.description,
            "expectedStatus": self.expected_status,
            "expectedMessageFragment": self.expected_message_fragment,
        }


def _headers(api_key: str) -> Mapping[str, str]:
    return _frozen({"Content-Type": "application/json", "x-api-key": api_key})


def build_default_scenarios(settings: Settings) -> Tuple[Scenario, ...]:
    valid = settings.API_KEY
    scenarios = [
        Scenario(
            id="T01",
            category=ScenarioCategory.AUTH,
            name="Invalid API Key",
            description="Requests with incorrect API keys should be rejected.",
            headers=_headers("wrong_key"),
            body=_frozen({"language": "English", "audioFormat": "mp3", "audioBase64": "..."}),
            expected_status="error",
            expected_message_fragment="Invalid API key",
        ),
        Scenario(
            id="T02",
            category=ScenarioCategory.VALIDATION,
            name="Missing Audio Base64",
            description="Payloads missing required fields must fail.",
            headers=_headers(valid),
            body=_frozen({"language": "English", "audioFormat": "mp3"}),
            expected_status="error",
            expected_message_fragment="Missing required fields",
        ),
        Scenario(
            id="T03",
            category=ScenarioCategory.VALIDATION,
            name="Unsupported Language",
            description="Languages outside the fixed 5 must be rejected.",
            headers=_headers(valid),
            body=_frozen({"language": "Spanish", "audioFormat": "mp3", "audioBase64": SILENCE_MP3_BASE64}),
            expected_status="error",
            expected_message_fragment="Unsupported language",
        ),
        Scenario(
            id="T04",
            category=ScenarioCategory.VALIDATION,
            name="Invalid Audio Format",
            description="Only MP3 format is supported.",
            headers=_headers(valid),
            body=_frozen({"language": "English", "audioFormat": "wav", "audioBase64": SILENCE_MP3_BASE64}),
            expected_status="error",
            expected_message_fragment="Invalid audioFormat",
        ),
    ]

    # One functional scenario per supported language, English first
    languages = sorted(settings.SUPPORTED_LANGUAGES, key=lambda lang: lang != "English")
    for i, language in enumerate(languages, start=len(scenarios) + 1):
        scenarios.append(
            Scenario(
                id=f"T{i:02d}",
                category=ScenarioCategory.FUNCTIONAL,
                name=f"Valid Request ({language})",
                description=f"Correct payload for {language} should return success.",
                headers=_headers(valid),
                body=_frozen({"language": language, "audioFormat": "mp3", "audioBase64": SILENCE_MP3_BASE64}),
                expected_status="success",
            )
        )
    return tuple(scenarios)
