"""Shared pytest configuration.

gourmand.utils.config validates at import, so a placeholder API key must be
in the environment before any test module is collected.
"""

import os
from unittest.mock import AsyncMock, patch

import pytest
from dotenv import load_dotenv

TEST_API_KEY = "test-gemini-key"


def pytest_configure(config):
    """Provide a placeholder GEMINI_API_KEY unless a real one is set (env or .env)."""
    load_dotenv()
    os.environ.setdefault("GEMINI_API_KEY", TEST_API_KEY)


@pytest.fixture
def sample_recipe_data():
    """A recipe as produced by the suggestion flow (no media yet)."""
    return {
        "recipe_name": "អាម៉ុកត្រី",
        "description": "Steamed fish curry in banana leaf cups.",
        "ingredients": "- 500g fish fillet\n- 400ml coconut milk\n- 3 tbsp kroeung paste\n\n- 1 egg",
        "instructions": "Cut the fish into pieces\nMix coconut milk with the paste and egg\nSteam for 20 minutes",
        "estimated_cooking_time": "45 minutes",
        "nutritional_information": "Approx. 420 kcal per serving",
    }


@pytest.fixture
def no_sleep():
    """Skip retry and prefetch delays."""
    with patch("gourmand.utils.errors.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep
