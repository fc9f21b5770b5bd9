"""Application error model.

Learn: Every failure the auth layer can produce is one of a closed set of
ErrorKind values. Callers branch on `err.kind`, never on the message text.
The message is for server-side logs only; the HTTP layer answers with a
generic message chosen from the kind's status class.

Wrapped causes use normal exception chaining (`raise AppError(...) from exc`),
so `err.cause` is just `err.__cause__`.
"""

import enum
from typing import Optional


class StatusClass(str, enum.Enum):
    """Externally visible outcome of a failure."""

    CLIENT_FORMAT = "client_format"
    UNAUTHORIZED = "unauthorized"
    INTERNAL = "internal"


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    INVALID_CREDENTIALS = "invalid_credentials"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    TOKEN_MISSING = "token_missing"
    MALFORMED = "malformed"
    EXPIRED_OR_NOT_YET_VALID = "expired_or_not_yet_valid"
    SECRET_UNAVAILABLE = "secret_unavailable"
    SIGNING_KEY_UNAVAILABLE = "signing_key_unavailable"
    TOKEN_CREATION_FAILED = "token_creation_failed"
    CLAIMS_UNAVAILABLE = "claims_unavailable"
    STORAGE = "storage"

    @property
    def status_class(self) -> StatusClass:
        return _STATUS_CLASSES.get(self, StatusClass.INTERNAL)


_STATUS_CLASSES = {
    ErrorKind.VALIDATION: StatusClass.CLIENT_FORMAT,
    ErrorKind.TOKEN_MISSING: StatusClass.CLIENT_FORMAT,
    ErrorKind.MALFORMED: StatusClass.CLIENT_FORMAT,
    ErrorKind.INVALID_CREDENTIALS: StatusClass.UNAUTHORIZED,
    ErrorKind.EXPIRED_OR_NOT_YET_VALID: StatusClass.UNAUTHORIZED,
}

HTTP_STATUS = {
    StatusClass.CLIENT_FORMAT: 400,
    StatusClass.UNAUTHORIZED: 401,
    StatusClass.INTERNAL: 500,
}


class AppError(Exception):
    """A tagged failure with an optional wrapped cause."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or kind.value.replace("_", " ")
        super().__init__(self.message)

    @property
    def cause(self) -> Optional[BaseException]:
        return self.__cause__

    @property
    def status_class(self) -> StatusClass:
        return self.kind.status_class

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.status_class]

    def is_kind(self, *kinds: ErrorKind) -> bool:
        return self.kind in kinds

    def __repr__(self) -> str:
        return f"AppError(kind={self.kind.value!r}, message={self.message!r})"
