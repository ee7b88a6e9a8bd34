"""Models for users exchanged with the /api/users endpoints."""

from pydantic import Field

from api_qa_harness.models.base import Model


class NewUser(Model):
    """User payload sent on create."""

    name: str
    email: str
    password: str = Field(..., repr=False)


class User(Model):
    """User as returned by the server."""

    id: int
    name: str
    email: str
