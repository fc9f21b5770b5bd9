"""Users API — protected user lookups.

Learn: Both routes sit behind the token gate. /users/me needs the full
identity (resolve_identity); /users/{username} only needs the request to
be admitted, then looks the named user up itself.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from quizapp.auth.dependencies import get_current_user, get_user_repository, require_token
from quizapp.errors import AppError, ErrorKind
from quizapp.schemas.user import UserRead
from quizapp.users.entities import StoredIdentity
from quizapp.users.repository import UserRepository

router = APIRouter(prefix="/users")

logger = structlog.get_logger()


@router.get("/me", response_model=UserRead)
async def get_me(identity: StoredIdentity = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return UserRead.from_identity(identity)


@router.get("/{username}", response_model=UserRead, dependencies=[Depends(require_token)])
async def get_user(
    username: str,
    repo: UserRepository = Depends(get_user_repository),
):
    try:
        identity = await repo.find_by_username(username)
    except AppError as e:
        if e.kind is ErrorKind.NOT_FOUND:
            raise HTTPException(status_code=404, detail="Error finding user")
        logger.error("users.lookup_failed", kind=e.kind.value, error=e.message)
        raise HTTPException(status_code=500, detail="Error finding user")
    return UserRead.from_identity(identity)
