"""Plain identity records handed out by the user store.

Learn: These are frozen dataclasses, not ORM rows, so the auth layer never
holds a live SQLAlchemy object (no lazy loads, no accidental writes) and the
password hash only exists on CredentialRecord.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class StoredIdentity:
    id: int
    username: str
    created_at: datetime
    last_login_at: Optional[datetime] = None


@dataclass(frozen=True)
class CredentialRecord:
    """A stored identity plus its bcrypt hash. Only used during login."""

    identity: StoredIdentity
    password_hash: str

    def __repr__(self) -> str:
        return f"CredentialRecord(identity={self.identity!r}, password_hash='***')"
