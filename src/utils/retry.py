"""Retry utilities with exponential backoff."""
from typing import Callable, Optional, List
from functools import wraps
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
)
import httpx
import openai
from src.analytics.logger import logger


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 3,
        initial_wait: float = 1.0,
        max_wait: float = 10.0,
        exponential_base: float = 2.0,
        retry_on: Optional[List[type]] = None
    ):
        self.max_attempts = max_attempts
        self.initial_wait = initial_wait
        self.max_wait = max_wait
        self.exponential_base = exponential_base
        self.retry_on = retry_on or [
            httpx.TimeoutException,
            httpx.NetworkError,
            httpx.HTTPStatusError,
            ConnectionError,
            TimeoutError
        ]


def should_retry_http_error(exception: BaseException) -> bool:
    """Determine if HTTP error should be retried."""
    if isinstance(exception, httpx.HTTPStatusError):
        status_code = exception.response.status_code
        # Retry on 5xx errors and 429 (rate limit)
        return status_code >= 500 or status_code == 429
    return True


def async_retry(config: Optional[RetryConfig] = None):
    """
    Decorator for async functions with retry logic.

    The last exception is re-raised; callers decide how to degrade.

    Args:
        config: Retry configuration
    """
    if config is None:
        config = RetryConfig()

    retryable = tuple(config.retry_on)

    def decorator(func: Callable) -> Callable:
        retry_decorator = retry(
            stop=stop_after_attempt(config.max_attempts),
            wait=wait_exponential(
                multiplier=config.initial_wait,
                max=config.max_wait,
                exp_base=config.exponential_base
            ),
            retry=retry_if_exception(
                lambda e: isinstance(e, retryable) and should_retry_http_error(e)
            ),
            reraise=True,
            before_sleep=lambda retry_state: logger.warning(
                f"Retrying {func.__name__} after {retry_state.outcome.exception()}"
                f" (attempt {retry_state.attempt_number}/{config.max_attempts})"
            )
        )
        retrying_func = retry_decorator(func)

        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await retrying_func(*args, **kwargs)
            except retryable as e:
                logger.error(f"{func.__name__} failed after retries: {e}")
                raise

        return wrapper
    return decorator


# Pre-configured retry decorators for common use cases

# Object storage downloads - retry on network errors, 5xx and 429
http_retry = async_retry(
    config=RetryConfig(
        max_attempts=3,
        initial_wait=1.0,
        max_wait=10.0
    )
)

# LLM API calls - longer backoff
llm_retry = async_retry(
    config=RetryConfig(
        max_attempts=3,
        initial_wait=2.0,
        max_wait=30.0,
        retry_on=[
            openai.APIConnectionError,
            openai.APITimeoutError,
            openai.RateLimitError,
            openai.InternalServerError,
            ConnectionError,
            TimeoutError
        ]
    )
)
