"""Token gate — admit or reject a request based on its bearer token.

Learn: Every protected request walks the same path:

    no token ─extract─▶ token present ─parse─▶ malformed | parsed
                                                  │
                                    verify signature + time window
                                                  ▼
                                   rejected(reason) | admitted(claims)

is_authenticated() stops at "admitted" and only answers yes/no with a
status class. resolve_identity() goes one step further and loads the user
the token names. A token that verifies but names nobody (userId 0, or a
deleted user) is a server-side trust problem, so those failures surface
as internal errors rather than client errors.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

import structlog

from quizapp.auth.claims import Claims
from quizapp.auth.jwt import AuthConfig, verify_token
from quizapp.errors import AppError, ErrorKind, StatusClass
from quizapp.users.entities import StoredIdentity
from quizapp.users.repository import UserRepository

logger = structlog.get_logger()

AUTHORIZATION_HEADER = "Authorization"
_BEARER_PREFIX = "bearer"


@dataclass(frozen=True)
class GateDecision:
    admitted: bool
    claims: Optional[Claims] = None
    error: Optional[AppError] = None

    @property
    def status_class(self) -> Optional[StatusClass]:
        return self.error.status_class if self.error else None


class TokenGate:
    """Validates bearer tokens and resolves the identity they name."""

    def __init__(self, repo: UserRepository, config: AuthConfig):
        self.repo = repo
        self.config = config

    def extract_token(self, headers: Mapping[str, str]) -> str:
        """Read the raw token from the Authorization header.

        Accepts the bare token or "Bearer <token>".
        """
        value = (_get_header(headers, AUTHORIZATION_HEADER) or "").strip()
        scheme, _, rest = value.partition(" ")
        if scheme.lower() == _BEARER_PREFIX:
            value = rest.strip()
        if not value:
            raise AppError(ErrorKind.TOKEN_MISSING, "unable to find token")
        return value

    def validate_token(self, token: str) -> Claims:
        return verify_token(token, self.config.secret, self.config.algorithm)

    def is_authenticated(self, headers: Mapping[str, str]) -> GateDecision:
        try:
            claims = self.validate_token(self.extract_token(headers))
        except AppError as e:
            log_rejection(e)
            return GateDecision(admitted=False, error=e)
        return GateDecision(admitted=True, claims=claims)

    async def resolve_identity(self, headers: Mapping[str, str]) -> StoredIdentity:
        """Validate the request's token and load the user it names."""
        try:
            claims = self.validate_token(self.extract_token(headers))
            if claims.user_id == 0:
                raise AppError(ErrorKind.CLAIMS_UNAVAILABLE, "unable to access jwt claims")
            return await self._find_user(claims.user_id)
        except AppError as e:
            log_rejection(e)
            raise

    async def _find_user(self, user_id: int) -> StoredIdentity:
        try:
            return await self.repo.find_by_id(user_id)
        except AppError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                # A signed token for a user that no longer exists.
                raise AppError(
                    ErrorKind.NOT_FOUND, f"token names missing user {user_id}"
                ) from e
            raise


def _get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, val in headers.items():
        if key.lower() == lowered:
            return val
    return None


def log_rejection(err: AppError) -> None:
    """Log a gate failure: full detail for server faults, kind only otherwise."""
    if err.status_class is StatusClass.INTERNAL:
        logger.error(
            "auth.gate_failed",
            kind=err.kind.value,
            error=err.message,
            cause=repr(err.cause) if err.cause else None,
        )
    else:
        logger.info("auth.gate_rejected", kind=err.kind.value, reason=err.message)
