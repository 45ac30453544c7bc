"""Recipe image generation flow.

- generate_recipe_image - Generates a photorealistic dish image as a data URI (single attempt).
- generate_recipe_image_safe - Same, but degrades to an empty image_url on failure.
- get_recipe_details - Image for a selected recipe, with bounded retries.
- compress_image - Re-encode generated images as JPEG for embedding.
"""

from io import BytesIO

import filetype
from google.genai import types
from PIL import Image

from gourmand.flows.client import first_inline_data, generate_content
from gourmand.models.models import (
    GenerateRecipeImageInput,
    GenerateRecipeImageOutput,
    RecipeDetailsInput,
    RecipeDetailsOutput,
)
from gourmand.prompts.prompts import get_image_prompt
from gourmand.utils.audio import to_data_uri
from gourmand.utils.config import config
from gourmand.utils.errors import run_with_retries, safe_execute_async, safe_execute_sync
from gourmand.utils.logger import logger


def compress_image(image_bytes: bytes, max_width: int = 1024) -> tuple[bytes, str]:
    """Compress image for embedding using Pillow.

    Uses JPEG format with quality=85 + optimize + progressive for optimal size/quality trade-off.
    Resizes oversized images and converts color modes to RGB.

    Args:
        image_bytes: Raw image bytes to compress
        max_width: Maximum image width in pixels

    Returns:
        Tuple of (image bytes, mime type). The original bytes are returned
        unchanged if compression fails.
    """

    def _compress():
        img = Image.open(BytesIO(image_bytes))

        # Convert RGBA/LA/P to RGB for JPEG
        if img.mode in ("RGBA", "LA", "P"):
            img = img.convert("RGBA")
            rgb_img = Image.new("RGB", img.size, (255, 255, 255))
            rgb_img.paste(img, mask=img.split()[-1])
            img = rgb_img
        elif img.mode != "RGB":
            img = img.convert("RGB")

        if img.width > max_width:
            ratio = max_width / img.width
            img = img.resize((max_width, int(img.height * ratio)), Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format="JPEG", quality=85, optimize=True, progressive=True)
        compressed = output.getvalue()
        logger.debug(
            f"Image compressed: {len(image_bytes) / 1024:.1f}KB → {len(compressed) / 1024:.1f}KB"
        )
        return compressed, "image/jpeg"

    return safe_execute_sync(
        _compress,
        "Image compression",
        log_level="warning",
        default_return=(image_bytes, guess_image_mime_type(image_bytes)),
    )


def guess_image_mime_type(image_bytes: bytes, fallback: str = "image/png") -> str:
    kind = filetype.guess(image_bytes)
    if kind is None or not kind.mime.startswith("image/"):
        return fallback
    return kind.mime


async def generate_recipe_image(image_input: GenerateRecipeImageInput) -> GenerateRecipeImageOutput:
    """Generate a dish image for a recipe (single attempt, no retries).

    Args:
        image_input: Recipe name to illustrate.

    Returns:
        GenerateRecipeImageOutput with a data URI.

    Raises:
        ValueError: If the response carries no image.
        Exception: SDK errors (quota, network) propagate to the caller.
    """
    prompt = get_image_prompt(image_input.recipe_name, style=config.IMAGE_STYLE)
    logger.debug(f"Generating image for '{image_input.recipe_name}' with {config.IMAGE_MODEL}")

    response = await generate_content(
        model=config.IMAGE_MODEL,
        contents=prompt,
        generation_config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
    )

    media = first_inline_data(response)
    if media is None:
        raise ValueError(f"No image was returned for '{image_input.recipe_name}'")

    mime_type, image_bytes = media
    if not mime_type.startswith("image/"):
        mime_type = guess_image_mime_type(image_bytes)

    if config.COMPRESS_IMG:
        image_bytes, mime_type = compress_image(image_bytes, max_width=config.IMAGE_MAX_WIDTH)

    logger.info(
        f"✓ Generated image ({len(image_bytes) / 1024:.1f}KB, {mime_type})",
        extra={"recipe_name": image_input.recipe_name},
    )
    return GenerateRecipeImageOutput(image_url=to_data_uri(image_bytes, mime_type))


async def generate_recipe_image_safe(image_input: GenerateRecipeImageInput) -> GenerateRecipeImageOutput:
    """Generate a dish image, returning an empty image_url on any failure."""
    return await safe_execute_async(
        generate_recipe_image(image_input),
        f"Failed to generate image for '{image_input.recipe_name}'",
        log_level="error",
        default_return=GenerateRecipeImageOutput(image_url=""),
    )


async def get_recipe_details(details_input: RecipeDetailsInput) -> RecipeDetailsOutput:
    """Fetch the image for a selected recipe, retrying before giving up.

    Raises:
        Exception: The last generation error once MAX_ATTEMPTS are exhausted.
    """
    result = await run_with_retries(
        lambda: generate_recipe_image(GenerateRecipeImageInput(recipe_name=details_input.recipe_name)),
        f"Image generation for '{details_input.recipe_name}'",
        max_attempts=config.MAX_ATTEMPTS,
        delay_seconds=config.DELAY_BETWEEN_RETRIES,
    )
    return RecipeDetailsOutput(image_url=result.image_url)
