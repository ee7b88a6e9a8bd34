"""Time sources injected into code that depends on "now"."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of the current local time."""

    def now(self) -> datetime:
        """Return the current time."""


class SystemClock:
    """Clock backed by the host's wall time."""

    def now(self) -> datetime:
        return datetime.now()


@dataclass(kw_only=True)
class FixedClock:
    """Clock that returns a controlled instant until moved explicitly."""

    at: datetime

    def now(self) -> datetime:
        return self.at

    def set(self, at: datetime) -> None:
        self.at = at

    def advance(self, delta: timedelta) -> None:
        self.at = self.at + delta
