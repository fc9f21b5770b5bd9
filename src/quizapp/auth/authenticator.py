"""Credential authenticator — username/password → signed token.

Learn: Login is the only place a token is minted. The order matters:
the password is checked and the token signed before last_login_at is
touched, so a wrong password or a missing secret never mutates the user
row. Last-login tracking is not best-effort: if the update fails, the
login fails and the freshly signed token is thrown away.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from quizapp.auth.claims import Claims
from quizapp.auth.jwt import AuthConfig, sign_claims
from quizapp.auth.password import burn_password_check, verify_password
from quizapp.errors import AppError, ErrorKind, StatusClass
from quizapp.users.entities import StoredIdentity
from quizapp.users.repository import UserRepository

logger = structlog.get_logger()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuthenticatedResult:
    identity: StoredIdentity
    token: str


class CredentialAuthenticator:
    """Verifies credentials against the user store and issues tokens."""

    def __init__(
        self,
        repo: UserRepository,
        config: AuthConfig,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repo = repo
        self.config = config
        self.clock = clock or utcnow

    async def authenticate(self, username: str, password: str) -> AuthenticatedResult:
        """Authenticate a user and return their identity plus a fresh token.

        Raises AppError:
        - VALIDATION for empty username/password
        - NOT_FOUND / INVALID_CREDENTIALS for unknown user / wrong password
        - SIGNING_KEY_UNAVAILABLE / TOKEN_CREATION_FAILED when signing fails
        - STORAGE when the last-login update or re-read fails
        """
        try:
            return await self._authenticate(username, password)
        except AppError as e:
            _log_login_failure(e)
            raise

    async def _authenticate(self, username: str, password: str) -> AuthenticatedResult:
        if not username or not password:
            raise AppError(ErrorKind.VALIDATION, "username and password are required")

        try:
            record = await self.repo.find_by_username_with_hash(username)
        except AppError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                burn_password_check(password)
            raise

        if not verify_password(password, record.password_hash):
            raise AppError(ErrorKind.INVALID_CREDENTIALS, "password does not match")

        now = self.clock()
        claims = Claims.issue(record.identity, now, self.config.token_ttl)
        token = sign_claims(claims, self.config.secret, self.config.algorithm)

        # The credentials already checked out; a vanished row from here on
        # is a store fault, not a rejected login.
        try:
            await self.repo.touch_last_login(record.identity.id, now)
            updated = await self.repo.find_by_username(username)
        except AppError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                raise AppError(
                    ErrorKind.STORAGE, "user disappeared during login"
                ) from e
            raise

        identity = StoredIdentity(
            id=record.identity.id,
            username=record.identity.username,
            created_at=record.identity.created_at,
            last_login_at=updated.last_login_at,
        )
        logger.info("auth.login_succeeded", user_id=identity.id)
        return AuthenticatedResult(identity=identity, token=token)


def _log_login_failure(err: AppError) -> None:
    if err.status_class is StatusClass.INTERNAL and err.kind is not ErrorKind.NOT_FOUND:
        logger.error(
            "auth.login_failed",
            kind=err.kind.value,
            error=err.message,
            cause=repr(err.cause) if err.cause else None,
        )
    else:
        logger.info("auth.login_rejected", kind=err.kind.value)
