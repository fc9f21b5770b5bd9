"""User store — the storage collaborator behind login and identity lookup."""

from quizapp.users.entities import CredentialRecord, StoredIdentity
from quizapp.users.repository import (
    InMemoryUserRepository,
    SqlUserRepository,
    UserRepository,
)

__all__ = [
    "CredentialRecord",
    "InMemoryUserRepository",
    "SqlUserRepository",
    "StoredIdentity",
    "UserRepository",
]
