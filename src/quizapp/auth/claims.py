"""Token claims — the identity and validity window carried inside a JWT."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from quizapp.errors import AppError, ErrorKind
from quizapp.users.entities import StoredIdentity


@dataclass(frozen=True)
class Claims:
    username: str
    user_id: int
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def issue(cls, identity: StoredIdentity, now: datetime, ttl: timedelta) -> "Claims":
        return cls(
            username=identity.username,
            user_id=identity.id,
            issued_at=now,
            expires_at=now + ttl,
        )

    def to_payload(self) -> dict:
        """JWT payload. PyJWT turns the datetimes into epoch seconds."""
        return {
            "username": self.username,
            "userId": self.user_id,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "Claims":
        """Build claims from an already verified payload.

        A missing userId decodes as 0 so that identity resolution can tell
        "no subject" apart from a structurally broken token.
        """
        username = payload.get("username", "")
        user_id = payload.get("userId", 0)
        if not isinstance(username, str):
            raise AppError(ErrorKind.MALFORMED, "username claim is not a string")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise AppError(ErrorKind.MALFORMED, "userId claim is not an integer")
        try:
            issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
            raise AppError(ErrorKind.MALFORMED, "token time claims unreadable") from e
        return cls(
            username=username,
            user_id=user_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )
