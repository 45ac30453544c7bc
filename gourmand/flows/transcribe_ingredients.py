"""Spoken ingredient input: transcribe an audio clip into the ingredient field.

Core Functions:
- fetch_audio_bytes(): Get audio bytes from URL, data URI, or plain base64 (async)
- validate_audio_format(): Check the bytes are a known audio container
- validate_audio_size(): Check MAX_AUDIO_SIZE_MB limit
- merge_ingredients(): Append a transcript to already-entered ingredients
- transcribe_ingredients(): Call Gemini and merge the transcript
"""

import base64
import binascii
from typing import Optional

import aiohttp
import filetype
from google.genai import types

from gourmand.flows.client import generate_content
from gourmand.models.models import TranscribeIngredientsInput, TranscribeIngredientsOutput
from gourmand.prompts.prompts import get_transcription_prompt
from gourmand.utils.config import config
from gourmand.utils.errors import safe_execute_async, safe_execute_sync
from gourmand.utils.logger import logger


async def fetch_audio_bytes(audio_source: str | bytes) -> Optional[bytes]:
    """Fetch audio bytes from URL or decode them from a data URI / base64 string.

    Args:
        audio_source: http(s) URL, data URI, plain base64 string, or raw bytes.

    Returns:
        Audio bytes if successful, None on any failure (logged as warning).
    """
    if isinstance(audio_source, bytes):
        return audio_source

    if audio_source.startswith(("http://", "https://")):

        async def _fetch_url():
            async with aiohttp.ClientSession() as session:
                async with session.get(audio_source, timeout=aiohttp.ClientTimeout(total=10)) as response:
                    response.raise_for_status()
                    return await response.read()

        return await safe_execute_async(
            _fetch_url(),
            f"Fetch audio from URL: {audio_source}",
            log_level="warning",
            default_return=None,
        )

    encoded = audio_source.split(",", 1)[1] if audio_source.startswith("data:") else audio_source

    def _decode():
        return base64.b64decode(encoded, validate=True)

    return safe_execute_sync(_decode, "Decode base64 audio", log_level="warning", default_return=None)


# Browser recorders (MediaRecorder) produce these containers; filetype reports them as video
AUDIO_CONTAINER_MIME_TYPES = {
    "video/webm": "audio/webm",
    "video/mp4": "audio/mp4",
}


def validate_audio_format(audio_bytes: bytes) -> Optional[str]:
    """Return the audio mime type to send to Gemini, or None for non-audio data."""
    kind = filetype.guess(audio_bytes)
    if kind is None:
        logger.warning("Invalid audio format: unknown")
        return None
    if kind.mime in AUDIO_CONTAINER_MIME_TYPES:
        return AUDIO_CONTAINER_MIME_TYPES[kind.mime]
    if not kind.mime.startswith("audio/"):
        logger.warning(f"Invalid audio format: {kind.mime}")
        return None
    return kind.mime


def validate_audio_size(audio_bytes: bytes) -> bool:
    size_mb = len(audio_bytes) / (1024 * 1024)
    if size_mb > config.MAX_AUDIO_SIZE_MB:
        logger.warning(f"Audio size {size_mb:.2f}MB exceeds limit of {config.MAX_AUDIO_SIZE_MB}MB")
        return False
    return True


def merge_ingredients(current: Optional[str], transcript: str) -> str:
    """Append transcript to the current ingredients the way the form field does."""
    current = (current or "").strip()
    transcript = transcript.strip()
    if not current:
        return transcript
    if not transcript:
        return current
    return f"{current}, {transcript}"


async def transcribe_ingredients(
    transcribe_input: TranscribeIngredientsInput,
) -> TranscribeIngredientsOutput:
    """Transcribe spoken ingredients and merge them with the typed ones.

    Raises:
        ValueError: If the audio cannot be read, is not audio, is too large,
            or nothing was heard.
    """
    audio_bytes = await fetch_audio_bytes(transcribe_input.audio)
    if not audio_bytes:
        raise ValueError("Could not read the audio data")

    mime_type = validate_audio_format(audio_bytes)
    if mime_type is None:
        raise ValueError("Unsupported audio format")
    if not validate_audio_size(audio_bytes):
        raise ValueError(f"Audio too large. Maximum size is {config.MAX_AUDIO_SIZE_MB}MB")

    response = await generate_content(
        model=config.TRANSCRIPTION_MODEL,
        contents=[
            get_transcription_prompt(config.RESPONSE_LANGUAGE),
            types.Part.from_bytes(data=audio_bytes, mime_type=mime_type),
        ],
    )
    transcript = (getattr(response, "text", None) or "").strip()
    if not transcript:
        raise ValueError("No ingredients were heard in the recording")

    logger.info(f"✓ Transcribed ingredients: {transcript}")
    return TranscribeIngredientsOutput(
        transcript=transcript,
        ingredients=merge_ingredients(transcribe_input.current_ingredients, transcript),
    )
