"""Pytest configuration and fixtures for integration tests.

These tests call the real Gemini API. They run only when
GOURMAND_INTEGRATION=1 and a real GEMINI_API_KEY is available (from the
environment or the project's .env file).
"""

import os

import pytest

# Set by tests/conftest.py when no real key is configured
PLACEHOLDER_KEY = "test-gemini-key"


def pytest_collection_modifyitems(config, items):
    enabled = os.getenv("GOURMAND_INTEGRATION") == "1"
    has_key = os.getenv("GEMINI_API_KEY", PLACEHOLDER_KEY) != PLACEHOLDER_KEY
    if enabled and has_key:
        return

    reason = (
        "Integration tests skipped. Set GOURMAND_INTEGRATION=1 and a real GEMINI_API_KEY in your .env file."
    )
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.skip(reason=reason))
