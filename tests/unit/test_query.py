"""Unit tests for the terminal front end (query.py)."""

import json
from unittest.mock import AsyncMock, patch

import pytest

import query
from gourmand.models.models import (
    ActionResult,
    IngredientSubstitutionOutput,
    Recipe,
    RecipeDetailsOutput,
    SuggestRecipesOutput,
    TextToSpeechOutput,
)
from gourmand.storage.favorites import FAVORITES_KEY
from gourmand.utils.audio import pcm_to_wav, to_data_uri
from gourmand.utils.config import config


@pytest.fixture
def favorites_file(tmp_path, monkeypatch):
    path = tmp_path / "storage.json"
    monkeypatch.setattr(config, "FAVORITES_FILE", str(path))
    return path


@pytest.fixture
def suggestion(sample_recipe_data):
    output = SuggestRecipesOutput(recipes=[Recipe(**sample_recipe_data)])
    with patch(
        "gourmand.services.recipe_browser.get_recipe_suggestion",
        new=AsyncMock(return_value=ActionResult.ok(output)),
    ) as mock_action:
        yield mock_action


@pytest.fixture
def details():
    output = RecipeDetailsOutput(image_url="data:image/jpeg;base64,AAAA")
    with patch(
        "gourmand.services.recipe_browser.get_recipe_details_action",
        new=AsyncMock(return_value=ActionResult.ok(output)),
    ) as mock_action:
        yield mock_action


class TestArguments:
    def test_defaults(self):
        args = query.build_parser().parse_args(["chicken,", "basil"])

        assert args.ingredients == ["chicken,", "basil"]
        assert args.cuisine == "ខ្មែរ"
        assert args.select is None
        assert args.favorites is False

    def test_no_ingredients(self, favorites_file):
        assert query.main([]) == 1


class TestRun:
    def test_lists_suggestions(self, favorites_file, suggestion):
        assert query.main(["fish, coconut", "--cuisine", "ថៃ"]) == 0

        suggestion.assert_awaited_once_with({"ingredients": "fish, coconut", "cuisine": "ថៃ"})

    def test_suggestion_failure_exit_code(self, favorites_file):
        with patch(
            "gourmand.services.recipe_browser.get_recipe_suggestion",
            new=AsyncMock(return_value=ActionResult.fail("Failed to get recipe suggestion. boom")),
        ):
            assert query.main(["fish"]) == 1

    def test_select_out_of_range(self, favorites_file, suggestion):
        assert query.main(["fish", "--select", "5"]) == 1

    def test_select_favorite_and_audio(self, favorites_file, suggestion, details, tmp_path):
        wav = pcm_to_wav(b"\x00\x00" * 50)
        out = tmp_path / "out.wav"
        with patch(
            "gourmand.services.recipe_browser.get_audio_for_recipe_action",
            new=AsyncMock(return_value=ActionResult.ok(TextToSpeechOutput(audio_url=to_data_uri(wav, "audio/wav")))),
        ):
            code = query.main(["fish", "--select", "1", "--favorite", "--audio", str(out)])

        assert code == 0
        assert out.read_bytes() == wav
        stored = json.loads(json.loads(favorites_file.read_text(encoding="utf-8"))[FAVORITES_KEY])
        assert stored[0]["recipe_name"] == "អាម៉ុកត្រី"
        assert stored[0]["image_url"] == "data:image/jpeg;base64,AAAA"

    def test_substitute(self, favorites_file, suggestion, details):
        output = IngredientSubstitutionOutput(substitutes=[{"name": "tofu", "amount": "1:1"}])
        with patch(
            "query.get_ingredient_substitution_action",
            new=AsyncMock(return_value=ActionResult.ok(output)),
        ) as mock_action:
            assert query.main(["fish", "--select", "1", "--substitute", "fish"]) == 0

        request = mock_action.call_args.args[0]
        assert request["ingredient"] == "fish"
        assert request["recipe_name"] == "អាម៉ុកត្រី"

    def test_favorites_listing(self, favorites_file, suggestion, details):
        assert query.main(["--favorites"]) == 0
        query.main(["fish", "--select", "1", "--favorite"])
        assert query.main(["--favorites", "--debug"]) == 0
