"""Classification of API responses against expected status codes.

A response either matches the expected code, deviates in a way covered by a
known issue, or deviates unexpectedly. Known issues are reported as skips
rather than passes so that triaged defects stay visible in test reports.
"""

import logging
from collections.abc import Set
from datetime import datetime

import pytest
import requests

from api_qa_harness.attachments import AttachmentSink, LogAttachmentSink, attach_safely
from api_qa_harness.clients.server_time import TimeClient
from api_qa_harness.models.result import KnownBug, Match, ProbeResult, Unexpected
from api_qa_harness.rules import is_palindrome

__all__ = [
    "ERROR_STATUS_CODES",
    "SERVER_ERROR_CODES",
    "assert_or_skip_if_known_bug",
    "assume_server_time",
    "classify",
    "classify_response",
    "is_palindrome",
    "report",
]

log = logging.getLogger(__name__)

SERVER_ERROR_CODES: Set[int] = frozenset({500})
ERROR_STATUS_CODES: Set[int] = frozenset(range(400, 600))

KNOWN_ISSUE_ATTACHMENT = "Known issue"
UNEXPECTED_ATTACHMENT = "Unexpected response"
SERVER_TIME_ISSUE = "BUG-TIME-01"


def classify(
    observed_code: int,
    expected_code: int,
    body: str,
    issue_id: str | None,
    *,
    known_bug_codes: Set[int] = ERROR_STATUS_CODES,
) -> ProbeResult:
    """Classify an observed status code.

    Args:
        observed_code: Status code returned by the server
        expected_code: Status code the documented contract requires
        body: Response body, carried along for diagnostics
        issue_id: Tracker id of the triaged defect, if any
        known_bug_codes: Codes that count as the known defect for this call

    Returns:
        Match, KnownBug or Unexpected

    """
    if observed_code == expected_code:
        return Match(observed_code=observed_code)

    if issue_id and observed_code in known_bug_codes:
        return KnownBug(
            issue_id=issue_id,
            observed_code=observed_code,
            expected_code=expected_code,
            body=body,
        )

    return Unexpected(
        observed_code=observed_code,
        expected_code=expected_code,
        body=body,
    )


def classify_response(
    response: requests.Response,
    expected_code: int,
    issue_id: str | None,
    *,
    known_bug_codes: Set[int] = ERROR_STATUS_CODES,
) -> ProbeResult:
    """Classify a ``requests`` response."""
    return classify(
        response.status_code,
        expected_code,
        response.text,
        issue_id,
        known_bug_codes=known_bug_codes,
    )


def report(result: ProbeResult, sink: AttachmentSink) -> None:
    """Log the result and attach the response body for deviations."""
    match result:
        case Match():
            log.info("Expected status code: %d", result.observed_code)
        case KnownBug():
            log.warning("%s", result.reason)
            attach_safely(
                sink,
                KNOWN_ISSUE_ATTACHMENT,
                f"{result.reason}\n\nResponse body:\n{result.body}",
            )
        case Unexpected():
            log.error(
                "Unexpected status code %d instead of %d, body: %s",
                result.observed_code,
                result.expected_code,
                result.body,
            )
            attach_safely(
                sink,
                UNEXPECTED_ATTACHMENT,
                f"Expected {result.expected_code}, got {result.observed_code}"
                f"\n\nResponse body:\n{result.body}",
            )


def assert_or_skip_if_known_bug(
    response: requests.Response,
    expected_code: int,
    issue_id: str | None,
    *,
    known_bug_codes: Set[int] = ERROR_STATUS_CODES,
    sink: AttachmentSink | None = None,
) -> ProbeResult:
    """Pass, skip or fail the current pytest test based on the response.

    Returns:
        The Match result when the response has the expected code

    Raises:
        pytest.skip.Exception: On a known bug, reason references the issue id
        pytest.fail.Exception: On an unexpected response

    """
    result = classify_response(
        response, expected_code, issue_id, known_bug_codes=known_bug_codes
    )
    report(result, sink if sink is not None else LogAttachmentSink())

    match result:
        case KnownBug():
            pytest.skip(result.reason)
        case Unexpected():
            pytest.fail(result.reason)
    return result


def assume_server_time(
    client: TimeClient,
    expected: datetime,
    *,
    sink: AttachmentSink | None = None,
) -> datetime:
    """Make sure the server evaluates time-based rules at ``expected``.

    Time-based checks are meaningless when the server runs on a different
    clock, so the current test is skipped when the server cannot report its
    time and failed when it reports another one.

    Args:
        client: Client for the server time endpoint
        expected: Instant the test's clock is set to
        sink: Destination for the response attachment

    Returns:
        The time reported by the server

    Raises:
        pytest.skip.Exception: On 404 (endpoint missing) or 500 (known issue)
        pytest.fail.Exception: On any other status, an unreadable body or a
            different time

    """
    response = client.get_time()
    log.info("Server time response: %d %s", response.status_code, response.text)

    if response.status_code == 404:
        log.warning("Server has no time endpoint, skipping time-based check")
        pytest.skip(f"{client.base_path} is not supported by the server")

    assert_or_skip_if_known_bug(
        response,
        200,
        SERVER_TIME_ISSUE,
        known_bug_codes=SERVER_ERROR_CODES,
        sink=sink,
    )

    try:
        payload = response.json()
        actual = datetime.fromisoformat(payload.get("serverTime", payload.get("time")))
    except (ValueError, TypeError, AttributeError) as e:
        pytest.fail(f"unreadable server time {response.text!r}: {e}")

    if actual != expected:
        pytest.fail(
            f"server time {actual.isoformat()} does not match {expected.isoformat()}"
        )
    return actual
