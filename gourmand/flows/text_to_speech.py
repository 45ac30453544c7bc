"""Text-to-speech flow for reading recipe instructions aloud.

- text_to_speech - Synthesizes speech and returns a WAV data URI (single attempt).
- get_audio_for_recipe - Same, with bounded retries.

The TTS model answers with raw 16-bit PCM (mime type like
'audio/L16;codec=pcm;rate=24000'), which is framed as WAV for playback.
"""

from google.genai import types

from gourmand.flows.client import first_inline_data, generate_content
from gourmand.models.models import TextToSpeechInput, TextToSpeechOutput
from gourmand.prompts.prompts import get_speech_prompt
from gourmand.utils.audio import parse_pcm_mime_type, pcm_to_wav, to_data_uri
from gourmand.utils.config import config
from gourmand.utils.errors import run_with_retries
from gourmand.utils.logger import logger


def build_speech_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        response_modalities=["AUDIO"],
        speech_config=types.SpeechConfig(
            voice_config=types.VoiceConfig(
                prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=config.TTS_VOICE),
            ),
        ),
    )


async def text_to_speech(tts_input: TextToSpeechInput) -> TextToSpeechOutput:
    """Synthesize the instructions and wrap the PCM output in WAV.

    Raises:
        ValueError: If no audio was returned.
    """
    response = await generate_content(
        model=config.TTS_MODEL,
        contents=get_speech_prompt(tts_input.instructions),
        generation_config=build_speech_config(),
    )

    media = first_inline_data(response)
    if media is None:
        raise ValueError("No audio was returned by the speech model")

    mime_type, audio_bytes = media
    if mime_type.startswith("audio/wav") or mime_type.startswith("audio/x-wav"):
        wav_bytes = audio_bytes
    else:
        wav_bytes = pcm_to_wav(audio_bytes, sample_rate=parse_pcm_mime_type(mime_type))

    logger.info(f"✓ Synthesized speech ({len(wav_bytes) / 1024:.1f}KB WAV, voice={config.TTS_VOICE})")
    return TextToSpeechOutput(audio_url=to_data_uri(wav_bytes, "audio/wav"))


async def get_audio_for_recipe(tts_input: TextToSpeechInput) -> TextToSpeechOutput:
    return await run_with_retries(
        lambda: text_to_speech(tts_input),
        "Speech synthesis",
        max_attempts=config.MAX_ATTEMPTS,
        delay_seconds=config.DELAY_BETWEEN_RETRIES,
    )
