"""
Send one audio file through the voice detection handler and print the JSON
response, as the API would return it.

Usage:
    python scripts/detect_file.py sample.mp3 --language Tamil
"""
import argparse
import asyncio
import json
import os
import sys

from voiceguard.config import get_settings
from voiceguard.core.logging import configure_logging
from voiceguard.handler import VoiceDetectionHandler
from voiceguard.model.model import get_classifier
from voiceguard.utils.audio import encode_audio_bytes


def main(argv=None):
    p = argparse.ArgumentParser(description="Classify an audio file as human or AI generated")
    p.add_argument("path", help="Audio file to analyse")
    p.add_argument("--language", required=True, help="Language spoken in the sample")
    p.add_argument("--format", default=None, help="Audio format (defaults to the file extension)")
    args = p.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    with open(args.path, "rb") as f:
        audio_bytes = f.read()
    audio_format = args.format or os.path.splitext(args.path)[1].lstrip(".")

    handler = VoiceDetectionHandler(settings, get_classifier(settings))
    headers = {"Content-Type": "application/json", "x-api-key": settings.API_KEY}
    body = {
        "language": args.language,
        "audioFormat": audio_format,
        "audioBase64": encode_audio_bytes(audio_bytes),
    }
    response = asyncio.run(handler.handle(headers, body))
    print(json.dumps(response.model_dump(mode="json"), indent=2))
    return 0 if response.status == "success" else 1


if __name__ == "__main__":
    sys.exit(main())
