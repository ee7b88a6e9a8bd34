"""Models for check and retry outcomes."""

from dataclasses import dataclass
from typing import Literal

import requests


@dataclass(frozen=True, kw_only=True)
class Match:
    """Observed status code equals the expected one."""

    kind: Literal["match"] = "match"
    observed_code: int


@dataclass(frozen=True, kw_only=True)
class KnownBug:
    """Observed status code deviates in a way already triaged as a defect."""

    kind: Literal["known_bug"] = "known_bug"
    issue_id: str
    observed_code: int
    expected_code: int
    body: str

    @property
    def reason(self) -> str:
        """Skip reason referencing the issue."""
        return (
            f"Known issue {self.issue_id}: server returned {self.observed_code} "
            f"instead of {self.expected_code}"
        )


@dataclass(frozen=True, kw_only=True)
class Unexpected:
    """Observed status code deviates and no known issue covers it."""

    kind: Literal["unexpected"] = "unexpected"
    observed_code: int
    expected_code: int
    body: str

    @property
    def reason(self) -> str:
        """Failure message with both codes."""
        return (
            f"unexpected response: got {self.observed_code}, "
            f"want {self.expected_code}"
        )


type ProbeResult = Match | KnownBug | Unexpected


@dataclass(frozen=True, kw_only=True)
class Succeeded:
    """Retried action reported an acceptable status code."""

    response: requests.Response
    attempts: int

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True, kw_only=True)
class Exhausted:
    """Attempt budget ran out without an acceptable status code.

    Only the final attempt is described: it either returned ``last_response``
    or raised ``last_error``, never both.
    """

    attempts: int
    last_response: requests.Response | None = None
    last_error: Exception | None = None

    def __bool__(self) -> bool:
        return False


type RetryOutcome = Succeeded | Exhausted


@dataclass(frozen=True, kw_only=True)
class CleanupReport:
    """Counts of records handled by a cleanup run."""

    deleted: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0
