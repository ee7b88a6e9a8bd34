"""REST clients for the API under test."""

from api_qa_harness.clients.base import ApiClient, ApiError
from api_qa_harness.clients.products import ProductClient
from api_qa_harness.clients.server_time import TimeClient
from api_qa_harness.clients.users import UserClient

__all__ = ["ApiClient", "ApiError", "ProductClient", "TimeClient", "UserClient"]
