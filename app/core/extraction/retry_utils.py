"""
Retry utilities for handling API throttling and transient failures.

Retries follow an explicit delay schedule: one retry per entry, so
(1.0, 2.0, 4.0) means at most three retries after the first attempt.
"""
import asyncio
import functools
import logging
import random
from typing import Callable, Optional, Sequence, Set, Tuple, TypeVar

from app.config.limits import OCR_RETRY_DELAYS

logger = logging.getLogger(__name__)

T = TypeVar("T")


# Exception class names worth retrying across the providers we call
RETRYABLE_ERRORS = {
    # AWS Bedrock / botocore
    "ThrottlingException",
    "ServiceUnavailableException",
    "InternalServerException",
    "ModelTimeoutException",
    "ReadTimeoutError",
    "ConnectTimeoutError",
    # openai SDK (OpenRouter)
    "RateLimitError",
    "APITimeoutError",
    "APIConnectionError",
    "InternalServerError",
    # requests
    "ConnectionError",
    "Timeout",
    "ReadTimeout",
    "ConnectTimeout",
}


def is_retryable_error(error: Exception, retryable_types: Optional[Set[str]] = None) -> bool:
    """
    Check if an error is retryable.

    Args:
        error: The exception to check
        retryable_types: Set of error type names to retry (defaults to RETRYABLE_ERRORS)

    Returns:
        True if error should be retried
    """
    if retryable_types is None:
        retryable_types = RETRYABLE_ERRORS

    # Adapters wrap provider errors in LLMError/OCRError; judge the original
    cause = error.__cause__
    if cause is not None and cause is not error and is_retryable_error(cause, retryable_types):
        return True

    if type(error).__name__ in retryable_types:
        return True

    error_str = str(error).lower()
    throttle_indicators = ["throttl", "rate limit", "too many requests", "429"]
    if any(indicator in error_str for indicator in throttle_indicators):
        return True

    # boto3 ClientError carries the code in its response
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        error_code = response.get("Error", {}).get("Code", "")
        if error_code in retryable_types:
            return True

    return False


def backoff_delays(
    max_retries: int,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
) -> Tuple[float, ...]:
    """Exponential delay schedule, e.g. (1.0, 2.0, 4.0) for three retries."""
    return tuple(
        min(base_delay * (exponential_base ** attempt), max_delay)
        for attempt in range(max_retries)
    )


async def retry_with_backoff(
    func: Callable[..., T],
    *args,
    delays: Sequence[float] = OCR_RETRY_DELAYS,
    jitter: bool = False,
    retryable_check: Optional[Callable[[Exception], bool]] = None,
    **kwargs
) -> T:
    """
    Execute function, retrying transient failures on a delay schedule.

    Sync functions are run in the default executor.

    Args:
        func: Async or sync function to execute
        *args: Positional arguments for func
        delays: Seconds to wait before each retry
        jitter: Add up to 50% random jitter to each delay
        retryable_check: Custom function to check if error is retryable
        **kwargs: Keyword arguments for func

    Returns:
        Result of func

    Raises:
        Last exception if all retries exhausted or the error is not retryable
    """
    if retryable_check is None:
        retryable_check = is_retryable_error

    max_retries = len(delays)
    last_error = None

    for attempt in range(max_retries + 1):
        try:
            if asyncio.iscoroutinefunction(func):
                return await func(*args, **kwargs)
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

        except Exception as e:
            last_error = e

            if attempt >= max_retries or not retryable_check(e):
                if attempt:
                    logger.error(f"Retry exhausted after {attempt + 1} attempts: {e}")
                raise

            delay = delays[attempt]
            if jitter:
                delay = delay * (1 + random.random() * 0.5)

            logger.warning(f"Retry attempt {attempt + 1}/{max_retries} after {delay:.1f}s: {e}")
            await asyncio.sleep(delay)

    raise last_error


class RetryConfig:
    """Retry schedule for one kind of external call."""

    def __init__(self, delays: Sequence[float], jitter: bool = False):
        self.delays = tuple(delays)
        self.jitter = jitter

    @property
    def max_retries(self) -> int:
        return len(self.delays)

    @classmethod
    def for_llm(cls) -> "RetryConfig":
        """Model calls: up to four retries with jittered exponential backoff."""
        return cls(delays=backoff_delays(4, base_delay=1.0, max_delay=30.0), jitter=True)

    @classmethod
    def for_ocr(cls) -> "RetryConfig":
        """OCR layout parsing: 1s, 2s, 4s."""
        return cls(delays=OCR_RETRY_DELAYS)
