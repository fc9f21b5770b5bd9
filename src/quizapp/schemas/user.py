"""Pydantic schemas for login and user payloads.

Learn: Responses use camelCase keys (createdAt, lastLoginAt) through an
alias generator; FastAPI serializes response_model fields by alias.
Login fields are optional strings so a missing, null or empty field all
reach the handler's own validation and get the same 400.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from quizapp.users.entities import StoredIdentity


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    id: int
    username: str
    created_at: datetime
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_identity(cls, identity: StoredIdentity) -> "UserRead":
        return cls(
            id=identity.id,
            username=identity.username,
            created_at=identity.created_at,
            last_login_at=identity.last_login_at,
        )


class AuthenticatedUserRead(BaseModel):
    user: UserRead
    token: str
