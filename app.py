"""Gourmand Application - Recipe Suggestion Service.

Single entry point for the web service:
- Validates configuration at import (fail-fast on a missing API key)
- Builds the FastAPI app with server actions and favorites
- Serves it with uvicorn on PORT

Run with: python app.py
"""

import uvicorn

from gourmand.api.server import create_app
from gourmand.utils.config import config
from gourmand.utils.logger import logger

app = create_app()


if __name__ == "__main__":
    logger.info(f"Starting Gourmand on port {config.PORT}")
    logger.info(f"Text model: {config.GEMINI_MODEL} | image: {config.IMAGE_MODEL} | speech: {config.TTS_MODEL}")
    logger.info(f"API docs available at: http://localhost:{config.PORT}/docs")
    uvicorn.run(app, host="0.0.0.0", port=config.PORT, log_config=None)
