"""
Backoff for GitHub's secondary rate limit.

GitHub answers abusive request patterns with a 403 whose message mentions a
"secondary rate limit". Those calls are retried for as long as the condition
recurs; every other error is raised straight away.
"""
import logging
import math
import random
import re
import time
from typing import Callable, Optional, TypeVar

import requests

from git_api.config import get_settings

T = TypeVar("T")

SECONDARY_RATE_LIMIT_PATTERN = re.compile(r"secondary rate limit", re.IGNORECASE)


def is_secondary_rate_limit(error: BaseException) -> bool:
    """Check whether an error is a 403 secondary rate limit response."""
    if not isinstance(error, requests.HTTPError):
        return False

    response = error.response
    if response is None or response.status_code != 403:
        return False

    return bool(
        SECONDARY_RATE_LIMIT_PATTERN.search(response.text or "")
        or SECONDARY_RATE_LIMIT_PATTERN.search(str(error))
    )


def compute_backoff_delay(
    response: Optional[requests.Response],
    default_retry_after: float = 30,
    jitter: Callable[[], float] = random.random
) -> float:
    """
    Seconds to wait before retrying.

    Uses the ``Retry-After`` header when it holds a finite, non-negative
    number, otherwise ``default_retry_after``, plus up to one second of jitter.
    """
    retry_after = default_retry_after

    header = response.headers.get("Retry-After") if response is not None else None
    if header is not None:
        try:
            retry_after = float(header)
        except (TypeError, ValueError):
            retry_after = default_retry_after

        if not math.isfinite(retry_after) or retry_after < 0:
            retry_after = default_retry_after

    return retry_after + jitter()


def retry_on_secondary_rate_limit(
    call: Callable[[], T],
    name: str,
    logger: logging.Logger,
    sleep: Callable[[float], None] = time.sleep,
    jitter: Callable[[], float] = random.random,
    default_retry_after: Optional[float] = None
) -> T:
    """
    Run ``call`` until it succeeds or fails for a reason other than the secondary rate limit.

    There is no retry ceiling. Callers needing a deadline must enforce it
    themselves.

    Args:
        call: Zero-argument function issuing the request
        name: Operation name used in log messages
        logger: Logger receiving the debug trace
        sleep: Function used to wait between attempts
        jitter: Source of the random fraction added to each delay
        default_retry_after: Seconds to wait when the response has no
            ``Retry-After`` header, defaults to ``retry.default_retry_after``

    Returns:
        Whatever ``call`` returns
    """
    if default_retry_after is None:
        default_retry_after = get_settings().retry.default_retry_after

    while True:
        try:
            return call()
        except Exception as e:
            if not is_secondary_rate_limit(e):
                response = getattr(e, "response", None)
                status = response.status_code if response is not None else None
                logger.debug(
                    f"{name}: Error calling api "
                    f"(status={status}, response_error={isinstance(e, requests.HTTPError)})"
                )
                raise

            delay = compute_backoff_delay(e.response, default_retry_after, jitter)
            logger.debug(
                f"{name}: Got secondary rate limit error. "
                f"Waiting {delay * 1000:.0f}ms before retry."
            )
            sleep(delay)
