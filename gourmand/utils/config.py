"""Configuration management for the Gourmand recipe service.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import List

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Text model used for recipe suggestions and ingredient substitutions
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        # Image model: must support the IMAGE response modality
        self.IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "gemini-2.0-flash-preview-image-generation")
        # Text-to-speech model and prebuilt voice
        self.TTS_MODEL: str = os.getenv("TTS_MODEL", "gemini-2.5-flash-preview-tts")
        self.TTS_VOICE: str = os.getenv("TTS_VOICE", "Algenib")
        # Model used to transcribe spoken ingredient lists
        self.TRANSCRIPTION_MODEL: str = os.getenv("TRANSCRIPTION_MODEL", "gemini-2.0-flash")
        # Language of every generated recipe and substitution
        self.RESPONSE_LANGUAGE: str = os.getenv("RESPONSE_LANGUAGE", "Khmer (Cambodia)")
        # Plating style appended to image prompts
        self.IMAGE_STYLE: str = os.getenv("IMAGE_STYLE", "traditional Khmer")
        # Number of distinct recipes per suggestion. Default: 5
        self.NUM_RECIPES: int = int(os.getenv("NUM_RECIPES", "5"))
        # LLM Model Parameters
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "8192"))
        # Retry Configuration for image and audio generation
        # MAX_ATTEMPTS: total attempts per call (2 = one retry)
        self.MAX_ATTEMPTS: int = int(os.getenv("MAX_ATTEMPTS", "2"))
        # DELAY_BETWEEN_RETRIES: initial delay in seconds, doubled after each attempt
        self.DELAY_BETWEEN_RETRIES: float = float(os.getenv("DELAY_BETWEEN_RETRIES", "1"))
        # Pause between sequential image generations to stay under upstream rate limits
        self.IMAGE_PREFETCH_DELAY: float = float(os.getenv("IMAGE_PREFETCH_DELAY", "2.0"))
        # Image Compression: re-encode generated images as JPEG before embedding as data URIs
        self.COMPRESS_IMG: bool = _as_bool(os.getenv("COMPRESS_IMG", "true"))
        self.IMAGE_MAX_WIDTH: int = int(os.getenv("IMAGE_MAX_WIDTH", "1024"))
        # Maximum spoken-ingredients audio size (in MB). Default: 10 MB
        self.MAX_AUDIO_SIZE_MB: int = int(os.getenv("MAX_AUDIO_SIZE_MB", "10"))
        # JSON file standing in for browser local storage
        self.FAVORITES_FILE: str = os.getenv("FAVORITES_FILE", "tmp/gourmand_storage.json")
        # Server Port
        self.PORT: int = int(os.getenv("PORT", "9002"))
        self.CORS_ORIGINS: List[str] = [
            origin.strip()
            for origin in os.getenv(
                "CORS_ORIGINS", "http://localhost:3000,http://localhost:9002,http://127.0.0.1:9002"
            ).split(",")
            if origin.strip()
        ]

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If required API keys are missing or invalid values provided.
        """
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if not (1 <= self.NUM_RECIPES <= 10):
            raise ValueError(f"NUM_RECIPES must be between 1 and 10, got: {self.NUM_RECIPES}")
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ValueError(f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}")
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ValueError(f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}")
        if self.MAX_ATTEMPTS < 1:
            raise ValueError(f"MAX_ATTEMPTS must be at least 1, got: {self.MAX_ATTEMPTS}")
        if self.DELAY_BETWEEN_RETRIES < 0:
            raise ValueError(
                f"DELAY_BETWEEN_RETRIES must not be negative, got: {self.DELAY_BETWEEN_RETRIES}"
            )
        if self.IMAGE_PREFETCH_DELAY < 0:
            raise ValueError(
                f"IMAGE_PREFETCH_DELAY must not be negative, got: {self.IMAGE_PREFETCH_DELAY}"
            )
        if self.MAX_AUDIO_SIZE_MB < 1:
            raise ValueError(f"MAX_AUDIO_SIZE_MB must be at least 1, got: {self.MAX_AUDIO_SIZE_MB}")


# Create module-level config instance and validate immediately
config = Config()
config.validate()
