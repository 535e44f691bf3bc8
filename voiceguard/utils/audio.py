import base64

# One MPEG-1 Layer III frame header followed by silence. Used as the audio
# payload in the scenario suite; nothing in the pipeline decodes it.
SILENCE_MP3_BASE64 = "//uQZAAA" + "A" * 408


def strip_data_uri(b64: str) -> str:
    """
    Drop a data URI header such as "data:audio/mp3;base64," if present.
    Everything after the first comma is the raw base64 payload.
    """
    header_cut = b64.find(",")
    if header_cut != -1:
        return b64[header_cut + 1:]
    return b64


def encode_audio_bytes(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")
