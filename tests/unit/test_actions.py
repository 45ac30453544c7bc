"""Unit tests for server actions and their {success, data, error} envelope."""

from unittest.mock import AsyncMock, patch

import pytest

from gourmand.actions.actions import (
    get_audio_for_recipe_action,
    get_ingredient_substitution_action,
    get_recipe_details_action,
    get_recipe_suggestion,
    transcribe_ingredients_action,
)
from gourmand.models.models import (
    IngredientSubstitutionOutput,
    Recipe,
    RecipeDetailsOutput,
    SuggestRecipesInput,
    SuggestRecipesOutput,
    TextToSpeechOutput,
    TranscribeIngredientsOutput,
)


class TestGetRecipeSuggestion:
    @pytest.mark.asyncio
    async def test_success(self, sample_recipe_data):
        output = SuggestRecipesOutput(recipes=[Recipe(**sample_recipe_data)])
        with patch("gourmand.actions.actions.suggest_recipes", new=AsyncMock(return_value=output)) as mock_flow:
            result = await get_recipe_suggestion({"ingredients": "fish, coconut", "cuisine": "ខ្មែរ"})

        assert result.success is True
        assert result.data == output
        assert result.error is None
        validated = mock_flow.call_args.args[0]
        assert isinstance(validated, SuggestRecipesInput)

    @pytest.mark.asyncio
    async def test_accepts_model_input(self, sample_recipe_data):
        output = SuggestRecipesOutput(recipes=[])
        form = SuggestRecipesInput(ingredients="fish", cuisine="ខ្មែរ")
        with patch("gourmand.actions.actions.suggest_recipes", new=AsyncMock(return_value=output)) as mock_flow:
            await get_recipe_suggestion(form)

        assert mock_flow.call_args.args[0] is form

    @pytest.mark.asyncio
    async def test_invalid_input_never_calls_flow(self):
        with patch("gourmand.actions.actions.suggest_recipes", new=AsyncMock()) as mock_flow:
            result = await get_recipe_suggestion({"ingredients": ",,,", "cuisine": "ខ្មែរ"})

        assert result.success is False
        assert result.data is None
        assert result.error.startswith("Failed to get recipe suggestion.")
        assert "Please enter at least one ingredient" in result.error
        mock_flow.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_flow_error_becomes_message(self):
        with patch(
            "gourmand.actions.actions.suggest_recipes",
            new=AsyncMock(side_effect=ValueError("No recipes could be suggested for these ingredients")),
        ):
            result = await get_recipe_suggestion({"ingredients": "stone", "cuisine": "ខ្មែរ"})

        assert result == result.fail(
            "Failed to get recipe suggestion. No recipes could be suggested for these ingredients"
        )

    @pytest.mark.asyncio
    async def test_quota_error_message(self):
        with patch(
            "gourmand.actions.actions.suggest_recipes",
            new=AsyncMock(side_effect=RuntimeError("429 RESOURCE_EXHAUSTED")),
        ):
            result = await get_recipe_suggestion({"ingredients": "fish", "cuisine": "ខ្មែរ"})

        assert result.error == (
            "Failed to get recipe suggestion. The AI service quota has been exhausted. Please try again later."
        )

    @pytest.mark.asyncio
    async def test_empty_error_message(self):
        with patch("gourmand.actions.actions.suggest_recipes", new=AsyncMock(side_effect=RuntimeError())):
            result = await get_recipe_suggestion({"ingredients": "fish", "cuisine": "ខ្មែរ"})

        assert result.error == "Failed to get recipe suggestion. An unknown error occurred."


class TestMediaActions:
    @pytest.mark.asyncio
    async def test_recipe_details_success(self):
        output = RecipeDetailsOutput(image_url="data:image/jpeg;base64,AAAA")
        with patch("gourmand.actions.actions.get_recipe_details", new=AsyncMock(return_value=output)):
            result = await get_recipe_details_action({"recipe_name": "អាម៉ុកត្រី"})

        assert result.success is True
        assert result.data.image_url == "data:image/jpeg;base64,AAAA"

    @pytest.mark.asyncio
    async def test_recipe_details_failure_prefix(self):
        with patch(
            "gourmand.actions.actions.get_recipe_details",
            new=AsyncMock(side_effect=ValueError("No image was returned for 'x'")),
        ):
            result = await get_recipe_details_action({"recipe_name": "x"})

        assert result.success is False
        assert result.error == "Failed to get recipe details. No image was returned for 'x'"

    @pytest.mark.asyncio
    async def test_failure_log_carries_action_and_recipe_name(self):
        with patch(
            "gourmand.actions.actions.get_recipe_details",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ), patch("gourmand.actions.actions.logger") as mock_logger:
            await get_recipe_details_action({"recipe_name": "អាម៉ុកត្រី"})

        extra = mock_logger.error.call_args.kwargs["extra"]
        assert extra == {"action": "get_recipe_details_action", "recipe_name": "អាម៉ុកត្រី"}

    @pytest.mark.asyncio
    async def test_audio_success(self):
        output = TextToSpeechOutput(audio_url="data:audio/wav;base64,UklGRg==")
        with patch("gourmand.actions.actions.get_audio_for_recipe", new=AsyncMock(return_value=output)):
            result = await get_audio_for_recipe_action({"instructions": "Boil water"})

        assert result.data.audio_url.startswith("data:audio/wav;base64,")

    @pytest.mark.asyncio
    async def test_audio_invalid_input(self):
        result = await get_audio_for_recipe_action({"instructions": ""})

        assert result.success is False
        assert result.error.startswith("Failed to get audio.")


class TestOtherActions:
    @pytest.mark.asyncio
    async def test_substitution(self):
        output = IngredientSubstitutionOutput(substitutes=[{"name": "tofu"}])
        with patch("gourmand.actions.actions.substitute_ingredient", new=AsyncMock(return_value=output)):
            result = await get_ingredient_substitution_action({"recipe_name": "Curry", "ingredient": "fish"})

        assert result.success is True
        assert result.data.substitutes[0].name == "tofu"

    @pytest.mark.asyncio
    async def test_substitution_failure_prefix(self):
        with patch(
            "gourmand.actions.actions.substitute_ingredient", new=AsyncMock(side_effect=RuntimeError("boom"))
        ):
            result = await get_ingredient_substitution_action({"recipe_name": "Curry", "ingredient": "fish"})

        assert result.error == "Failed to get ingredient substitution. boom"

    @pytest.mark.asyncio
    async def test_transcription(self):
        output = TranscribeIngredientsOutput(transcript="basil", ingredients="chicken, basil")
        with patch("gourmand.actions.actions.transcribe_ingredients", new=AsyncMock(return_value=output)):
            result = await transcribe_ingredients_action({"audio": "UklGRg==", "current_ingredients": "chicken"})

        assert result.data.ingredients == "chicken, basil"

    @pytest.mark.asyncio
    async def test_transcription_missing_audio(self):
        result = await transcribe_ingredients_action({})

        assert result.success is False
        assert result.error.startswith("Failed to transcribe ingredients.")
        assert "audio" in result.error
