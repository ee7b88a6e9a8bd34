"""Bounded retry of idempotent HTTP actions.

Attempts are spaced by a fixed delay without backoff. The executor is
synchronous and blocks the calling thread while waiting.
"""

import logging
import time
from collections.abc import Callable, Set

import requests

from api_qa_harness.models.result import Exhausted, RetryOutcome, Succeeded

log = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3
DEFAULT_DELAY = 0.2
ACCEPTABLE_CODES: Set[int] = frozenset({200, 204})


def retry_with_outcome(
    action: Callable[[], requests.Response],
    max_attempts: int = DEFAULT_ATTEMPTS,
    acceptable_codes: Set[int] = ACCEPTABLE_CODES,
    *,
    delay: float = DEFAULT_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> RetryOutcome:
    """Call ``action`` until it returns an acceptable status code.

    Exceptions raised by the action count as failed attempts. Interruptions
    (``KeyboardInterrupt``, ``SystemExit``) are not exceptions in that sense
    and abort the loop, whether raised by the action or while waiting.

    Args:
        action: Callable performing one HTTP request
        max_attempts: Attempt budget, at least 1
        acceptable_codes: Status codes that mean success
        delay: Seconds to wait between attempts
        sleep: Blocking wait function

    Returns:
        Succeeded on the first acceptable response, Exhausted otherwise

    Raises:
        ValueError: If max_attempts is below 1

    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    last_response: requests.Response | None = None
    last_error: Exception | None = None

    for attempt in range(1, max_attempts + 1):
        try:
            response = action()
        except Exception as e:
            log.warning("Attempt %d/%d failed: %s", attempt, max_attempts, e)
            last_error = e
            last_response = None
        else:
            if response.status_code in acceptable_codes:
                return Succeeded(response=response, attempts=attempt)
            log.warning(
                "Attempt %d/%d returned status %d",
                attempt,
                max_attempts,
                response.status_code,
            )
            last_response = response
            last_error = None

        if attempt < max_attempts:
            sleep(delay)

    return Exhausted(
        attempts=max_attempts, last_response=last_response, last_error=last_error
    )


def retry(
    action: Callable[[], requests.Response],
    max_attempts: int = DEFAULT_ATTEMPTS,
    acceptable_codes: Set[int] = ACCEPTABLE_CODES,
    *,
    delay: float = DEFAULT_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Same as :func:`retry_with_outcome`, reduced to success or exhaustion."""
    outcome = retry_with_outcome(
        action, max_attempts, acceptable_codes, delay=delay, sleep=sleep
    )
    return isinstance(outcome, Succeeded)
