"""Client for the /api/time endpoint."""

from dataclasses import dataclass
from typing import ClassVar

import requests

from api_qa_harness.clients.base import ApiClient


@dataclass(frozen=True, kw_only=True)
class TimeClient(ApiClient):
    """Reads the clock the server evaluates its time-based rules with."""

    resource: ClassVar[str] = "time_path"

    def get_time(self) -> requests.Response:
        return self.request("GET")
