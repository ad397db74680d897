"""
Infrastructure-specific decorators, providing cross-cutting concerns like
retry logic for network operations.
"""

import logging

from tenacity import (
    retry,
    retry_if_result,
    stop_after_attempt,
    wait_none,
)

from ..application.domain import ApiResponse

logger = logging.getLogger(__name__)


def _return_last_response(retry_state) -> ApiResponse:
    """Hand the final response back instead of raising RetryError."""
    return retry_state.outcome.result()


def retry_on_unsuccessful_status(retry_count: int, verbose: bool = False):
    """
    Builds a retry decorator for coroutines that return an ApiResponse.

    Any non-2xx response, including the synthetic 408 produced on timeouts,
    is retried up to `retry_count` additional times. Exceptions are not
    retried and propagate on the first occurrence. Once attempts run out
    the last response is returned as is.

    Args:
        retry_count: Number of attempts after the first one.
        verbose: Log retries at INFO instead of DEBUG.
    """

    level = logging.INFO if verbose else logging.DEBUG

    def _log_before_retry(retry_state):
        """Log the status code that triggered the retry."""
        response = retry_state.outcome.result()
        logger.log(
            level,
            f"Received status code {response.status_code}. "
            f"Retrying {retry_state.attempt_number} / {retry_count}",
        )

    return retry(
        stop=stop_after_attempt(retry_count + 1),
        wait=wait_none(),
        retry=retry_if_result(lambda response: not response.ok),
        retry_error_callback=_return_last_response,
        before_sleep=_log_before_retry,
    )
