"""Error handling helpers shared by flows and actions.

- safe_execute_async() / safe_execute_sync(): log-and-default wrappers for optional operations
- status_code() / is_transient_error(): classify SDK/network failures worth retrying
- run_with_retries(): bounded retry loop with doubling delay
- describe_error(): user-visible message for an exception
"""

import asyncio
import re
from typing import Awaitable, Callable, Optional, TypeVar

from gourmand.utils.logger import logger

T = TypeVar("T")

TRANSIENT_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

TRANSIENT_KEYWORDS = (
    "timeout",
    "timed out",
    "connection",
    "resource_exhausted",
    "unavailable",
    "retryable",
)

QUOTA_KEYWORDS = ("resource_exhausted", "quota")

# SDK errors render as "<code> <STATUS>. <details>"
_LEADING_STATUS = re.compile(r"^\s*(\d{3})\b")


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    """Log error with appropriate level.

    Args:
        operation_name: Description for logging
        exception: Exception that occurred
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
    """
    msg = f"{operation_name}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg)
    else:
        logger.warning(msg)


async def safe_execute_async(
    coro: Awaitable[T],
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
    reraise: bool = False,
):
    """Safely execute async operation with consistent error logging.

    Used for operations where failure is not critical and the caller can
    degrade gracefully (image generation for a recipe card, audio fetch).

    Args:
        coro: Awaitable coroutine to execute.
        operation_name: Description for logging (e.g., "Generate recipe image").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.
        reraise: If True, re-raise exception after logging. Default: False.

    Returns:
        Result of coroutine if successful, default_return on exception when reraise=False.

    Raises:
        Exception: Original exception if reraise=True.
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level)
        if reraise:
            raise
        return default_return


def safe_execute_sync(
    func: Callable[[], T],
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
    reraise: bool = False,
):
    """Safely execute sync operation with consistent error logging.

    Synchronous version of safe_execute_async. Same behavior and patterns.

    Args:
        func: Callable to execute (no args).
        operation_name: Description for logging.
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.
        reraise: If True, re-raise exception after logging. Default: False.

    Returns:
        Result of func if successful, default_return on exception when reraise=False.

    Raises:
        Exception: Original exception if reraise=True.
    """
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level)
        if reraise:
            raise
        return default_return


def status_code(exception: BaseException) -> Optional[int]:
    """Return the HTTP status of an SDK error, from its `code` or its message prefix."""
    code = getattr(exception, "code", None)
    if isinstance(code, int):
        return code
    match = _LEADING_STATUS.match(str(exception))
    return int(match.group(1)) if match else None


def is_transient_error(exception: BaseException) -> bool:
    """Return True for network, timeout, rate-limit and 5xx failures."""
    if isinstance(exception, (asyncio.TimeoutError, ConnectionError)):
        return True
    if status_code(exception) in TRANSIENT_STATUS_CODES:
        return True
    error_str = str(exception).lower()
    return any(keyword in error_str for keyword in TRANSIENT_KEYWORDS)


def is_quota_error(exception: BaseException) -> bool:
    if status_code(exception) == 429:
        return True
    error_str = str(exception).lower()
    return any(keyword in error_str for keyword in QUOTA_KEYWORDS)


async def run_with_retries(
    operation: Callable[[], Awaitable[T]],
    operation_name: str,
    max_attempts: int = 2,
    delay_seconds: float = 1.0,
    retry_on_value_error: bool = True,
) -> T:
    """Run an async operation with a bounded number of attempts.

    Distinguishes between transient errors (network, timeouts, 429/5xx) and
    permanent errors (invalid API key, malformed request) to avoid futile retries.
    A ValueError raised for a response with no media is retried as well, since
    the image and TTS models occasionally return text-only candidates.

    **Retry Strategy:**
    - Transient errors: retry after delay_seconds, doubled after each attempt
    - Missing media (ValueError): retry when retry_on_value_error is True
    - Permanent errors: raise immediately
    - Last attempt failure: raise the last exception

    Args:
        operation: Zero-argument factory returning a fresh coroutine per attempt.
        operation_name: Description for logging.
        max_attempts: Total number of attempts (default: 2, i.e. one retry).
        delay_seconds: Initial delay between attempts in seconds.
        retry_on_value_error: Treat ValueError as retryable.

    Returns:
        Result of the first successful attempt.

    Raises:
        Exception: The last exception once attempts are exhausted, or the first permanent one.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got: {max_attempts}")

    delay = delay_seconds
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            retryable = is_transient_error(e) or (retry_on_value_error and isinstance(e, ValueError))
            if not retryable or attempt == max_attempts:
                logger.warning(f"{operation_name} failed after {attempt}/{max_attempts} attempt(s): {e}")
                raise
            logger.debug(
                f"{operation_name} failed, retrying (attempt {attempt + 1}/{max_attempts}) after {delay}s: {e}"
            )
            await asyncio.sleep(delay)
            delay *= 2

    # Unreachable: the loop either returns or raises
    raise RuntimeError(f"{operation_name} exhausted all {max_attempts} attempts")


def describe_error(exception: Optional[BaseException]) -> str:
    """Build the user-visible part of an action error message."""
    if exception is None:
        return "An unknown error occurred."
    if is_quota_error(exception):
        return "The AI service quota has been exhausted. Please try again later."
    message = str(exception).strip()
    return message or "An unknown error occurred."
