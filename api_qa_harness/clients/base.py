"""Shared HTTP plumbing for the API clients."""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, ClassVar, Self

import requests

from api_qa_harness.config import ApiConfig

log = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the API answers a typed call with an unusable response."""

    def __init__(self, message: str, status_code: int, body: str) -> None:
        super().__init__(f"{message}: {status_code} {body}")
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True, kw_only=True)
class ApiClient:
    """Client bound to one resource path of the API.

    Subclasses set ``resource`` to pick the base path from the configuration.
    Raw calls return the ``requests.Response`` untouched so that checks can
    look at status codes the server was not supposed to send.
    """

    resource: ClassVar[str] = ""

    config: ApiConfig
    session: requests.Session = field(repr=False)
    base_path: str = ""

    @classmethod
    @contextmanager
    def from_config(cls, config: ApiConfig) -> Generator[Self, None, None]:
        """Create client with managed session lifecycle."""
        with open_session(config) as session:
            yield cls.for_session(config, session)

    @classmethod
    def for_session(cls, config: ApiConfig, session: requests.Session) -> Self:
        """Create client sharing an existing session."""
        base_path = getattr(config, cls.resource) if cls.resource else ""
        return cls(config=config, session=session, base_path=base_path)

    def url(self, path: str = "") -> str:
        return f"{self.config.base_url.rstrip('/')}{self.base_path}{path}"

    def request(
        self,
        method: str,
        path: str = "",
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> requests.Response:
        """Send one request and log both directions."""
        url = self.url(path)
        log.info("-> %s %s", method, url)
        if json is not None:
            log.info("Request body: %s", json)

        response = self.session.request(
            method, url, json=json, params=params, timeout=self.config.timeout
        )

        log.info("<- %d %s %s", response.status_code, method, url)
        if response.text.strip():
            log.debug("Response body: %s", response.text)
        return response


@contextmanager
def open_session(config: ApiConfig) -> Generator[requests.Session, None, None]:
    """Open a session carrying the configured default headers."""
    with requests.Session() as session:
        session.headers["Accept"] = "application/json"
        if config.token is not None:
            session.headers["Authorization"] = (
                f"Bearer {config.token.get_secret_value()}"
            )
        yield session
