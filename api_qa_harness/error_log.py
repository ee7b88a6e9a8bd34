"""Append-only error log file for records that cleanup could not handle."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from api_qa_harness.clock import Clock, SystemClock

log = logging.getLogger(__name__)

DEFAULT_ERROR_LOG = Path("product_cleanup_errors.log")


@dataclass(frozen=True, kw_only=True)
class ErrorLog:
    """Writes ``<ISO-8601 timestamp> ERROR: <message>`` lines to a file."""

    path: Path = DEFAULT_ERROR_LOG
    clock: Clock = field(default_factory=SystemClock)

    def error(self, message: str) -> None:
        """Log the message and append it to the file.

        The file is opened and closed for every message. A failed write is
        logged and does not propagate.
        """
        log.error(message)
        line = f"{self.clock.now().isoformat()} ERROR: {message}\n"
        try:
            with self.path.open("a", encoding="utf-8") as out:
                out.write(line)
        except OSError as e:
            log.error("Failed to write to error log %s: %s", self.path, e)
