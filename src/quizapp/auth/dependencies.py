"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers. The AuthConfig is
built once in create_app() and kept on app.state, so every request sees
the same immutable secret. Two gate dependencies:

1. require_token → admits the request (Claims), no database access
2. get_current_user → admits and loads the StoredIdentity the token names

Gate failures become HTTPExceptions whose detail depends only on the
status class, never on the specific reason.
"""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from quizapp.auth.authenticator import CredentialAuthenticator
from quizapp.auth.claims import Claims
from quizapp.auth.gate import TokenGate
from quizapp.auth.jwt import AuthConfig
from quizapp.db.engine import get_db
from quizapp.errors import AppError, StatusClass
from quizapp.users.entities import StoredIdentity
from quizapp.users.repository import SqlUserRepository, UserRepository

GATE_MESSAGES = {
    StatusClass.CLIENT_FORMAT: "Missing or malformed authorization token",
    StatusClass.UNAUTHORIZED: "Invalid or expired token",
    StatusClass.INTERNAL: "Internal server error",
}


def get_auth_config(request: Request) -> AuthConfig:
    return request.app.state.auth_config


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return SqlUserRepository(db)


def get_token_gate(
    config: AuthConfig = Depends(get_auth_config),
    repo: UserRepository = Depends(get_user_repository),
) -> TokenGate:
    return TokenGate(repo, config)


def get_authenticator(
    config: AuthConfig = Depends(get_auth_config),
    repo: UserRepository = Depends(get_user_repository),
) -> CredentialAuthenticator:
    return CredentialAuthenticator(repo, config)


def gate_http_error(err: AppError) -> HTTPException:
    headers = None
    if err.status_class is StatusClass.UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(
        status_code=err.http_status,
        detail=GATE_MESSAGES[err.status_class],
        headers=headers,
    )


async def require_token(
    request: Request,
    gate: TokenGate = Depends(get_token_gate),
) -> Claims:
    """Admit the request if it carries a valid token (400/401/500 otherwise)."""
    decision = gate.is_authenticated(request.headers)
    if not decision.admitted:
        raise gate_http_error(decision.error)
    return decision.claims


async def get_current_user(
    request: Request,
    gate: TokenGate = Depends(get_token_gate),
) -> StoredIdentity:
    """Resolve the user behind the request's token."""
    try:
        return await gate.resolve_identity(request.headers)
    except AppError as e:
        raise gate_http_error(e)
