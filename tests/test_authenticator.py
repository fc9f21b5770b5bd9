"""Credential authenticator tests.

Learn: These run against the in-memory store with a fixed clock, so the
issued token's window and the stored last_login_at can be checked exactly.
"""

from datetime import datetime, timedelta, timezone

import pytest

from quizapp.auth.authenticator import CredentialAuthenticator
from quizapp.auth.jwt import AuthConfig, verify_token
from quizapp.errors import AppError, ErrorKind
from quizapp.users.repository import InMemoryUserRepository

from conftest import SECRET

NOW = datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture()
def authenticator(repo, auth_config):
    return CredentialAuthenticator(repo, auth_config, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_authenticate_returns_valid_token(authenticator, alice):
    result = await authenticator.authenticate("alice", "correctpw")

    claims = verify_token(result.token, SECRET)
    assert claims.username == "alice"
    assert claims.user_id == alice.id
    assert claims.issued_at == NOW
    assert claims.expires_at == NOW + timedelta(hours=2)


@pytest.mark.asyncio
async def test_authenticate_updates_last_login(authenticator, repo, alice):
    assert alice.last_login_at is None

    result = await authenticator.authenticate("alice", "correctpw")

    assert result.identity.id == alice.id
    assert result.identity.created_at == alice.created_at
    assert result.identity.last_login_at == NOW
    assert (await repo.find_by_id(alice.id)).last_login_at == NOW


@pytest.mark.asyncio
async def test_result_has_no_password_hash(authenticator, alice):
    result = await authenticator.authenticate("alice", "correctpw")
    assert not hasattr(result.identity, "password_hash")


@pytest.mark.asyncio
async def test_wrong_password(authenticator, repo, alice):
    with pytest.raises(AppError) as exc:
        await authenticator.authenticate("alice", "wrongpw")
    assert exc.value.kind is ErrorKind.INVALID_CREDENTIALS
    assert (await repo.find_by_id(alice.id)).last_login_at is None


@pytest.mark.asyncio
async def test_unknown_user(authenticator):
    with pytest.raises(AppError) as exc:
        await authenticator.authenticate("nobody", "whatever")
    assert exc.value.kind is ErrorKind.NOT_FOUND


@pytest.mark.asyncio
@pytest.mark.parametrize("username,password", [("", "correctpw"), ("alice", "")])
async def test_empty_fields(authenticator, alice, username, password):
    with pytest.raises(AppError) as exc:
        await authenticator.authenticate(username, password)
    assert exc.value.kind is ErrorKind.VALIDATION


@pytest.mark.asyncio
async def test_unusable_stored_hash(authenticator, repo):
    await repo.create("legacy", "not-a-bcrypt-hash")
    with pytest.raises(AppError) as exc:
        await authenticator.authenticate("legacy", "anything")
    assert exc.value.kind is ErrorKind.INVALID_CREDENTIALS


@pytest.mark.asyncio
async def test_missing_secret_does_not_touch_last_login(repo, alice):
    authenticator = CredentialAuthenticator(repo, AuthConfig(secret=None))
    with pytest.raises(AppError) as exc:
        await authenticator.authenticate("alice", "correctpw")
    assert exc.value.kind is ErrorKind.SIGNING_KEY_UNAVAILABLE
    assert (await repo.find_by_id(alice.id)).last_login_at is None


@pytest.mark.asyncio
async def test_signing_failure(repo, alice):
    authenticator = CredentialAuthenticator(
        repo, AuthConfig(secret=SECRET, algorithm="HS999")
    )
    with pytest.raises(AppError) as exc:
        await authenticator.authenticate("alice", "correctpw")
    assert exc.value.kind is ErrorKind.TOKEN_CREATION_FAILED


@pytest.mark.asyncio
async def test_last_login_failure_fails_login(auth_config):
    from quizapp.auth.password import hash_password

    class ReadOnlyRepo(InMemoryUserRepository):
        async def touch_last_login(self, user_id, at):
            raise AppError(ErrorKind.STORAGE, "read-only replica")

    repo = ReadOnlyRepo()
    await repo.create("alice", hash_password("correctpw"))
    authenticator = CredentialAuthenticator(repo, auth_config)

    with pytest.raises(AppError) as exc:
        await authenticator.authenticate("alice", "correctpw")
    assert exc.value.kind is ErrorKind.STORAGE


@pytest.mark.asyncio
async def test_custom_token_lifetime(repo, alice):
    config = AuthConfig(secret=SECRET, token_ttl=timedelta(minutes=5))
    authenticator = CredentialAuthenticator(repo, config, clock=lambda: NOW)
    result = await authenticator.authenticate("alice", "correctpw")
    claims = verify_token(result.token, SECRET)
    assert claims.expires_at - claims.issued_at == timedelta(minutes=5)


@pytest.mark.asyncio
async def test_user_vanishing_after_password_check_is_storage_fault(authenticator, repo, alice):
    async def vanished(user_id, at):
        raise AppError(ErrorKind.NOT_FOUND, f"user {user_id} not found")

    repo.touch_last_login = vanished

    with pytest.raises(AppError) as exc:
        await authenticator.authenticate("alice", "correctpw")
    assert exc.value.kind is ErrorKind.STORAGE
    assert exc.value.cause.kind is ErrorKind.NOT_FOUND
