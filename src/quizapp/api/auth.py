"""Auth API — login.

Learn: POST /user/authenticate → username/password → user + JWT.
Every failure answers with the same "Unable to authenticate user" detail.
Only the status code differs (400 bad input, 401 rejected credentials,
500 server fault), and an unknown username is indistinguishable from a
wrong password. A body that fails schema validation (not JSON, a number
where a string belongs) is bad input too, so it gets the same 400 instead
of FastAPI's 422 field listing.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from quizapp.auth.authenticator import CredentialAuthenticator
from quizapp.auth.dependencies import get_authenticator
from quizapp.errors import AppError, ErrorKind
from quizapp.schemas.user import AuthenticatedUserRead, LoginRequest, UserRead

router = APIRouter(prefix="/user")

LOGIN_PATH = "/user/authenticate"
LOGIN_ERROR = "Unable to authenticate user"

_REJECTED = (ErrorKind.NOT_FOUND, ErrorKind.INVALID_CREDENTIALS)


@router.post("/authenticate", response_model=AuthenticatedUserRead)
async def authenticate(
    body: LoginRequest,
    authenticator: CredentialAuthenticator = Depends(get_authenticator),
):
    """Login with username and password → user info + JWT."""
    if not body.username or not body.password:
        raise HTTPException(status_code=400, detail=LOGIN_ERROR)

    try:
        result = await authenticator.authenticate(body.username, body.password)
    except AppError as e:
        if e.is_kind(*_REJECTED):
            raise HTTPException(
                status_code=401,
                detail=LOGIN_ERROR,
                headers={"WWW-Authenticate": "Bearer"},
            )
        raise HTTPException(status_code=e.http_status, detail=LOGIN_ERROR)

    return AuthenticatedUserRead(
        user=UserRead.from_identity(result.identity),
        token=result.token,
    )


async def login_validation_handler(request: Request, exc: RequestValidationError):
    """Answer unparseable login bodies with the login 400; other routes keep 422."""
    if request.url.path == LOGIN_PATH:
        return JSONResponse(status_code=400, content={"detail": LOGIN_ERROR})
    return await request_validation_exception_handler(request, exc)
