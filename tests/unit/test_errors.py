"""Unit tests for error handling and the retry loop."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from gourmand.utils.errors import (
    describe_error,
    is_quota_error,
    is_transient_error,
    run_with_retries,
    safe_execute_async,
    safe_execute_sync,
    status_code,
)


class TestSafeExecute:
    @pytest.mark.asyncio
    async def test_async_returns_result(self):
        async def ok():
            return 42

        assert await safe_execute_async(ok(), "ok") == 42

    @pytest.mark.asyncio
    async def test_async_returns_default_on_error(self):
        async def boom():
            raise RuntimeError("boom")

        assert await safe_execute_async(boom(), "boom", default_return="fallback") == "fallback"

    @pytest.mark.asyncio
    async def test_async_reraise(self):
        async def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await safe_execute_async(boom(), "boom", reraise=True)

    def test_sync_returns_default_on_error(self):
        func = MagicMock(side_effect=KeyError("missing"))
        assert safe_execute_sync(func, "lookup", default_return={}) == {}
        func.assert_called_once()

    def test_sync_logs_at_requested_level(self):
        with patch("gourmand.utils.errors.logger") as mock_logger:
            safe_execute_sync(MagicMock(side_effect=ValueError("x")), "op", log_level="error")
        mock_logger.error.assert_called_once()


class TestErrorClassification:
    @pytest.mark.parametrize(
        "exception",
        [
            RuntimeError("429 RESOURCE_EXHAUSTED"),
            RuntimeError("503 UNAVAILABLE: model overloaded"),
            RuntimeError("Connection reset by peer"),
            RuntimeError("Request timed out"),
            asyncio.TimeoutError(),
            ConnectionError(),
        ],
    )
    def test_transient(self, exception):
        assert is_transient_error(exception)

    @pytest.mark.parametrize(
        "exception",
        [RuntimeError("400 INVALID_ARGUMENT"), RuntimeError("API key not valid"), KeyError("x")],
    )
    def test_permanent(self, exception):
        assert not is_transient_error(exception)

    def test_quota(self):
        assert is_quota_error(RuntimeError("429 Too Many Requests"))
        assert is_quota_error(RuntimeError("RESOURCE_EXHAUSTED: quota exceeded"))
        assert not is_quota_error(RuntimeError("500 INTERNAL"))

    def test_digits_inside_message_are_not_status_codes(self):
        error = ValueError("Prompt exceeds the 1500 tokens limit (model 503b)")

        assert status_code(error) is None
        assert not is_transient_error(error)
        assert not is_quota_error(RuntimeError("Recipe 429 not found"))

    def test_status_code_attribute_wins(self):
        error = RuntimeError("Service overloaded")
        error.code = 503

        assert status_code(error) == 503
        assert is_transient_error(error)

    def test_permanent_status_code_attribute(self):
        error = RuntimeError("Request failed after 500 ms")
        error.code = 400

        assert not is_transient_error(error)

    def test_leading_status_code_parsed(self):
        assert status_code(RuntimeError("502 Bad Gateway")) == 502
        assert is_quota_error(RuntimeError("429 Too Many Requests"))


class TestRunWithRetries:
    @pytest.mark.asyncio
    async def test_first_attempt_succeeds(self, no_sleep):
        operation = AsyncMock(return_value="ok")

        assert await run_with_retries(operation, "op") == "ok"
        operation.assert_awaited_once()
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_transient_error_once(self, no_sleep):
        operation = AsyncMock(side_effect=[RuntimeError("503 UNAVAILABLE"), "ok"])

        assert await run_with_retries(operation, "op", max_attempts=2, delay_seconds=1.0) == "ok"
        assert operation.await_count == 2
        no_sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_raises_last_error_after_two_attempts(self, no_sleep):
        operation = AsyncMock(side_effect=[RuntimeError("503 first"), RuntimeError("503 second")])

        with pytest.raises(RuntimeError, match="second"):
            await run_with_retries(operation, "op", max_attempts=2)
        assert operation.await_count == 2

    @pytest.mark.asyncio
    async def test_permanent_error_not_retried(self, no_sleep):
        operation = AsyncMock(side_effect=RuntimeError("API key not valid"))

        with pytest.raises(RuntimeError):
            await run_with_retries(operation, "op", max_attempts=3)
        operation.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_media_value_error_is_retried(self, no_sleep):
        operation = AsyncMock(side_effect=[ValueError("No image was returned"), "ok"])

        assert await run_with_retries(operation, "op") == "ok"

    @pytest.mark.asyncio
    async def test_value_error_not_retried_when_disabled(self, no_sleep):
        operation = AsyncMock(side_effect=ValueError("bad"))

        with pytest.raises(ValueError):
            await run_with_retries(operation, "op", max_attempts=2, retry_on_value_error=False)
        operation.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delay_doubles(self, no_sleep):
        operation = AsyncMock(side_effect=[RuntimeError("timeout")] * 3 + ["ok"])

        assert await run_with_retries(operation, "op", max_attempts=4, delay_seconds=0.5) == "ok"
        assert [c.args[0] for c in no_sleep.await_args_list] == [0.5, 1.0, 2.0]

    @pytest.mark.asyncio
    async def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError, match="max_attempts"):
            await run_with_retries(AsyncMock(), "op", max_attempts=0)


class TestDescribeError:
    def test_quota_message(self):
        assert describe_error(RuntimeError("429 RESOURCE_EXHAUSTED")) == (
            "The AI service quota has been exhausted. Please try again later."
        )

    def test_plain_message(self):
        assert describe_error(ValueError("No image was returned")) == "No image was returned"

    @pytest.mark.parametrize("exception", [None, RuntimeError(""), RuntimeError("   ")])
    def test_unknown(self, exception):
        assert describe_error(exception) == "An unknown error occurred."
