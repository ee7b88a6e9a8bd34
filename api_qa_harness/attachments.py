"""Report attachments produced for known issues and unexpected responses."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

log = logging.getLogger(__name__)


class AttachmentSink(Protocol):
    """Destination for named text attachments."""

    def attach(self, name: str, content: str) -> None:
        """Store an attachment."""


class LogAttachmentSink:
    """Sink that writes attachments to the log."""

    def attach(self, name: str, content: str) -> None:
        log.info("Attachment %s:\n%s", name, content)


@dataclass(frozen=True, kw_only=True)
class DirectoryAttachmentSink:
    """Sink that writes one text file per attachment into a directory."""

    directory: Path

    def attach(self, name: str, content: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "attachment"
        pattern = re.compile(rf"{re.escape(slug)}-(\d+)\.txt")
        taken = [
            int(match.group(1))
            for path in self.directory.iterdir()
            if (match := pattern.fullmatch(path.name))
        ]
        index = max(taken, default=0) + 1
        (self.directory / f"{slug}-{index}.txt").write_text(content)


def attach_safely(sink: AttachmentSink, name: str, content: str) -> None:
    """Hand an attachment to the sink, logging instead of raising on failure."""
    try:
        sink.attach(name, content)
    except Exception as e:
        log.warning("Failed to store attachment %r: %s", name, e)
