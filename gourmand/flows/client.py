"""Shared google-genai client access for the media flows.

The sync client is called through asyncio.to_thread so flows stay async
without blocking the event loop.
"""

import asyncio
from functools import lru_cache
from typing import Any, Optional

from google import genai
from google.genai import types

from gourmand.utils.config import config


@lru_cache(maxsize=1)
def get_genai_client() -> genai.Client:
    """Return the process-wide Gemini client."""
    return genai.Client(api_key=config.GEMINI_API_KEY)


async def generate_content(
    model: str,
    contents: Any,
    generation_config: Optional[types.GenerateContentConfig] = None,
):
    """Call models.generate_content in a worker thread."""
    client = get_genai_client()
    return await asyncio.to_thread(
        client.models.generate_content,
        model=model,
        contents=contents,
        config=generation_config,
    )


def iter_parts(response) -> list:
    """Flatten all content parts of all candidates, tolerating missing fields."""
    parts = []
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        if content is None:
            continue
        parts.extend(getattr(content, "parts", None) or [])
    return parts


def first_inline_data(response) -> Optional[tuple[str, bytes]]:
    """Return (mime_type, data) of the first inline media part, or None.

    Image and audio models return media as inline_data parts; text-only
    candidates (refusals, safety blocks) carry none.
    """
    for part in iter_parts(response):
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            return inline.mime_type or "", inline.data
    return None
