"""User store implementations.

Learn: The auth components only see the UserRepository protocol. The
production implementation talks to PostgreSQL through an AsyncSession;
the in-memory one backs tests and local experiments. Both report failures
as AppError with NOT_FOUND, CONFLICT or STORAGE kinds, never as raw
driver exceptions.
"""

import itertools
from datetime import datetime, timezone
from typing import Optional, Protocol

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quizapp.db.models import User
from quizapp.errors import AppError, ErrorKind
from quizapp.users.entities import CredentialRecord, StoredIdentity

logger = structlog.get_logger()


class UserRepository(Protocol):
    """Read/write capabilities the auth layer needs from storage."""

    async def find_by_username(self, username: str) -> StoredIdentity: ...

    async def find_by_username_with_hash(self, username: str) -> CredentialRecord: ...

    async def find_by_id(self, user_id: int) -> StoredIdentity: ...

    async def touch_last_login(self, user_id: int, at: datetime) -> None: ...

    async def create(self, username: str, password_hash: str) -> StoredIdentity: ...


_IDENTITY_COLUMNS = (User.id, User.username, User.created_at, User.last_login_at)


class SqlUserRepository:
    """PostgreSQL-backed user store (one AsyncSession per request)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_username(self, username: str) -> StoredIdentity:
        row = await self._first(
            select(*_IDENTITY_COLUMNS).where(User.username == username)
        )
        if row is None:
            raise AppError(ErrorKind.NOT_FOUND, "user not found by username")
        return _identity_from_row(row)

    async def find_by_username_with_hash(self, username: str) -> CredentialRecord:
        row = await self._first(
            select(*_IDENTITY_COLUMNS, User.password_hash).where(
                User.username == username
            )
        )
        if row is None:
            raise AppError(ErrorKind.NOT_FOUND, "user not found by username")
        return CredentialRecord(
            identity=_identity_from_row(row), password_hash=row.password_hash
        )

    async def find_by_id(self, user_id: int) -> StoredIdentity:
        row = await self._first(select(*_IDENTITY_COLUMNS).where(User.id == user_id))
        if row is None:
            raise AppError(ErrorKind.NOT_FOUND, f"user {user_id} not found")
        return _identity_from_row(row)

    async def touch_last_login(self, user_id: int, at: datetime) -> None:
        try:
            result = await self.db.execute(
                update(User).where(User.id == user_id).values(last_login_at=at)
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise AppError(ErrorKind.NOT_FOUND, f"user {user_id} not found")
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise AppError(ErrorKind.STORAGE, "unable to update last login") from e

    async def create(self, username: str, password_hash: str) -> StoredIdentity:
        user = User(username=username, password_hash=password_hash)
        try:
            self.db.add(user)
            await self.db.flush()
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as e:
            await self.db.rollback()
            raise AppError(ErrorKind.CONFLICT, "username already taken") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise AppError(ErrorKind.STORAGE, "unable to create user") from e

        logger.info("users.created", user_id=user.id)
        return StoredIdentity(
            id=user.id,
            username=user.username,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )

    async def _first(self, query):
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise AppError(ErrorKind.STORAGE, "user lookup failed") from e
        return result.first()


def _identity_from_row(row) -> StoredIdentity:
    return StoredIdentity(
        id=row.id,
        username=row.username,
        created_at=row.created_at,
        last_login_at=row.last_login_at,
    )


class InMemoryUserRepository:
    """Dict-backed user store with the same contract as SqlUserRepository."""

    def __init__(self):
        self._users: dict[int, CredentialRecord] = {}
        self._ids = itertools.count(1)

    async def find_by_username(self, username: str) -> StoredIdentity:
        return (await self.find_by_username_with_hash(username)).identity

    async def find_by_username_with_hash(self, username: str) -> CredentialRecord:
        record = self._by_username(username)
        if record is None:
            raise AppError(ErrorKind.NOT_FOUND, "user not found by username")
        return record

    async def find_by_id(self, user_id: int) -> StoredIdentity:
        record = self._users.get(user_id)
        if record is None:
            raise AppError(ErrorKind.NOT_FOUND, f"user {user_id} not found")
        return record.identity

    async def touch_last_login(self, user_id: int, at: datetime) -> None:
        record = self._users.get(user_id)
        if record is None:
            raise AppError(ErrorKind.NOT_FOUND, f"user {user_id} not found")
        identity = record.identity
        self._users[user_id] = CredentialRecord(
            identity=StoredIdentity(
                id=identity.id,
                username=identity.username,
                created_at=identity.created_at,
                last_login_at=at,
            ),
            password_hash=record.password_hash,
        )

    async def create(self, username: str, password_hash: str) -> StoredIdentity:
        if self._by_username(username) is not None:
            raise AppError(ErrorKind.CONFLICT, "username already taken")
        identity = StoredIdentity(
            id=next(self._ids),
            username=username,
            created_at=datetime.now(timezone.utc),
        )
        self._users[identity.id] = CredentialRecord(
            identity=identity, password_hash=password_hash
        )
        return identity

    def _by_username(self, username: str) -> Optional[CredentialRecord]:
        for record in self._users.values():
            if record.identity.username == username:
                return record
        return None
