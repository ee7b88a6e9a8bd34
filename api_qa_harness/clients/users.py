"""Client for the /api/users endpoints."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import ClassVar

import requests
from pydantic import TypeAdapter

from api_qa_harness.clients.base import ApiClient, ApiError
from api_qa_harness.models.user import NewUser, User

log = logging.getLogger(__name__)

USER_LIST = TypeAdapter(list[User])


@dataclass(frozen=True, kw_only=True)
class UserClient(ApiClient):
    """User CRUD calls. The listing is not paginated."""

    resource: ClassVar[str] = "users_path"

    def create_user(self, user: NewUser) -> requests.Response:
        return self.request("POST", json=user.model_dump())

    def create_user_batch(
        self, users: Iterable[NewUser]
    ) -> Sequence[requests.Response]:
        """Create users one by one; transport errors are logged and skipped."""
        responses: list[requests.Response] = []
        for user in users:
            try:
                response = self.create_user(user)
            except requests.RequestException as e:
                log.error("Failed to create user %s: %s", user.email, e)
                continue
            log.info("Created user %s, status %d", user.email, response.status_code)
            responses.append(response)
        return responses

    def list_users(self) -> Sequence[User]:
        response = self.request("GET")
        if response.status_code != 200:
            raise ApiError("Failed to list users", response.status_code, response.text)
        return USER_LIST.validate_python(response.json())

    def delete_user(self, user_id: int) -> requests.Response:
        return self.request("DELETE", f"/{user_id}")

    def delete_all_users(self) -> requests.Response:
        return self.request("DELETE")
