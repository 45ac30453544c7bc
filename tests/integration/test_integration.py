"""Integration tests against the real Gemini API.

Run with: GOURMAND_INTEGRATION=1 pytest tests/integration -v
"""

import io
import wave

import pytest

from gourmand.actions.actions import (
    get_audio_for_recipe_action,
    get_ingredient_substitution_action,
    get_recipe_details_action,
    get_recipe_suggestion,
)
from gourmand.services.recipe_browser import RecipeBrowser
from gourmand.utils.audio import from_data_uri

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_suggest_recipes_returns_distinct_recipes():
    result = await get_recipe_suggestion({"ingredients": "chicken, lemongrass, rice", "cuisine": "ខ្មែរ"})

    assert result.success, result.error
    names = [r.recipe_name for r in result.data.recipes]
    assert names
    assert len(names) == len(set(names))
    for recipe in result.data.recipes:
        assert recipe.ingredient_list()
        assert recipe.instruction_list()


@pytest.mark.asyncio
async def test_recipe_image_is_data_uri():
    result = await get_recipe_details_action({"recipe_name": "អាម៉ុកត្រី"})

    assert result.success, result.error
    mime_type, data = from_data_uri(result.data.image_url)
    assert mime_type.startswith("image/")
    assert len(data) > 1000


@pytest.mark.asyncio
async def test_audio_is_playable_wav():
    result = await get_audio_for_recipe_action({"instructions": "Boil the water\nAdd the noodles"})

    assert result.success, result.error
    mime_type, data = from_data_uri(result.data.audio_url)
    assert mime_type == "audio/wav"
    with wave.open(io.BytesIO(data), "rb") as wav_file:
        assert wav_file.getnframes() > 0


@pytest.mark.asyncio
async def test_substitution():
    result = await get_ingredient_substitution_action(
        {"recipe_name": "អាម៉ុកត្រី", "ingredient": "fish", "dietary_restrictions": "vegetarian"}
    )

    assert result.success, result.error
    assert 1 <= len(result.data.substitutes) <= 5


@pytest.mark.asyncio
async def test_browser_select_keeps_text_and_adds_image():
    browser = RecipeBrowser()
    submitted = await browser.submit("beef, pepper, lime", "ខ្មែរ")
    assert submitted.success, submitted.error

    first = browser.suggested_recipes[0]
    await browser.select(first.recipe_name)

    assert browser.selected_recipe.recipe_name == first.recipe_name
    assert browser.selected_recipe.instructions == first.instructions
