"""JWT signing and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. There is
no session table, so a token stays valid until its exp passes (or the
secret changes, which invalidates every outstanding token at once).

Verification runs in a fixed order so each failure lands in one kind:
1. header decodes and names the expected HMAC algorithm → else MALFORMED
2. a secret is configured → else SECRET_UNAVAILABLE
3. signature + exp/iat window → else EXPIRED_OR_NOT_YET_VALID
4. claims have the right shape → else MALFORMED

Step 1 runs before any key is touched, which is what blocks algorithm
substitution ("alg": "none", or RS256 with the HMAC secret as a public key).
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

import jwt

from quizapp.auth.claims import Claims
from quizapp.config import Settings
from quizapp.errors import AppError, ErrorKind

DEFAULT_TOKEN_TTL = timedelta(hours=2)


@dataclass(frozen=True)
class AuthConfig:
    """Immutable auth settings injected into the gate and the authenticator."""

    secret: Optional[str] = field(default=None, repr=False)
    algorithm: str = "HS256"
    token_ttl: timedelta = DEFAULT_TOKEN_TTL

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        return cls(
            secret=settings.secret_key,
            algorithm=settings.jwt_algorithm,
            token_ttl=timedelta(minutes=settings.token_expire_minutes),
        )


def sign_claims(claims: Claims, secret: Optional[str], algorithm: str = "HS256") -> str:
    """Sign claims into a compact JWT string."""
    if secret is None:
        raise AppError(ErrorKind.SIGNING_KEY_UNAVAILABLE, "signing secret not configured")
    try:
        return jwt.encode(claims.to_payload(), secret, algorithm=algorithm)
    except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
        raise AppError(ErrorKind.TOKEN_CREATION_FAILED, "unable to create jwt string") from e


def check_header(token: str, algorithm: str = "HS256") -> None:
    """Reject tokens that do not decode or were not signed with `algorithm`."""
    try:
        header = jwt.get_unverified_header(token)
    except jwt.InvalidTokenError as e:
        raise AppError(ErrorKind.MALFORMED, "jwt token has been malformed") from e
    if header.get("alg") != algorithm:
        raise AppError(
            ErrorKind.MALFORMED,
            f"unexpected token algorithm {header.get('alg')!r}",
        )


def verify_token(token: str, secret: Optional[str], algorithm: str = "HS256") -> Claims:
    """Verify and decode a JWT token.

    Returns Claims on success.
    Raises AppError (MALFORMED, SECRET_UNAVAILABLE, EXPIRED_OR_NOT_YET_VALID).
    """
    check_header(token, algorithm)

    if secret is None:
        raise AppError(ErrorKind.SECRET_UNAVAILABLE, "unable to access secret key")

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.InvalidSignatureError as e:
        raise AppError(
            ErrorKind.EXPIRED_OR_NOT_YET_VALID, "jwt signature verification failed"
        ) from e
    except (jwt.ExpiredSignatureError, jwt.ImmatureSignatureError) as e:
        raise AppError(
            ErrorKind.EXPIRED_OR_NOT_YET_VALID, "jwt token has expired or is not valid yet"
        ) from e
    except jwt.InvalidTokenError as e:
        raise AppError(ErrorKind.MALFORMED, f"jwt token has been malformed: {e}") from e

    return Claims.from_payload(payload)
