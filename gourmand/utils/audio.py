"""PCM to WAV framing for text-to-speech output.

The TTS model returns raw signed 16-bit little-endian PCM. Browsers and most
players need a RIFF/WAVE container, so the samples are wrapped before being
embedded as a data URI.
"""

import base64
import io
import wave

DEFAULT_SAMPLE_RATE = 24000
DEFAULT_CHANNELS = 1
DEFAULT_SAMPLE_WIDTH = 2


def pcm_to_wav(
    pcm_data: bytes,
    channels: int = DEFAULT_CHANNELS,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    sample_width: int = DEFAULT_SAMPLE_WIDTH,
) -> bytes:
    """Wrap raw PCM samples in a WAV container.

    Args:
        pcm_data: Raw interleaved PCM frames.
        channels: Number of channels (default: mono).
        sample_rate: Frames per second (default: 24 kHz, the TTS model's rate).
        sample_width: Bytes per sample (default: 2, i.e. 16-bit).

    Returns:
        Complete WAV file bytes.

    Raises:
        ValueError: If pcm_data is not a whole number of frames.
    """
    frame_size = channels * sample_width
    if frame_size <= 0:
        raise ValueError("channels and sample_width must be positive")
    if len(pcm_data) % frame_size:
        raise ValueError(
            f"PCM data length {len(pcm_data)} is not a multiple of the frame size {frame_size}"
        )

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(sample_width)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(pcm_data)
    return buffer.getvalue()


def parse_pcm_mime_type(mime_type: str) -> int:
    """Extract the sample rate from a mime type like 'audio/L16;codec=pcm;rate=24000'."""
    for param in (mime_type or "").split(";"):
        key, _, value = param.strip().partition("=")
        if key.lower() == "rate" and value.isdigit():
            return int(value)
    return DEFAULT_SAMPLE_RATE


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode bytes as a data URI: data:<mimetype>;base64,<encoded_data>."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def from_data_uri(data_uri: str) -> tuple[str, bytes]:
    """Decode a base64 data URI into (mime_type, bytes).

    Raises:
        ValueError: If the string is not a base64 data URI.
    """
    if not data_uri.startswith("data:") or "," not in data_uri:
        raise ValueError("Not a data URI")
    header, encoded = data_uri[5:].split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Only base64 data URIs are supported")
    mime_type = header[: -len(";base64")] or "application/octet-stream"
    return mime_type, base64.b64decode(encoded)
