"""Test fixtures — in-memory user store, injected auth config, ASGI client.

Learn: Testing pattern for FastAPI + httpx:

1. Each test gets a fresh InMemoryUserRepository (no database needed).
2. create_app() takes the AuthConfig explicitly, so a test can build an
   app with a known secret, or with no secret at all.
3. get_user_repository is overridden to hand out the in-memory store;
   the real token gate and authenticator run unmodified on top of it.

The SQL store has its own fixture in test_user_repository.py.
"""

from datetime import datetime, timezone

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from quizapp.auth.dependencies import get_user_repository
from quizapp.auth.jwt import AuthConfig
from quizapp.auth.password import hash_password
from quizapp.main import create_app
from quizapp.users.repository import InMemoryUserRepository

SECRET = "test-secret-with-enough-bytes-for-hs256-0123456789"
OTHER_SECRET = "another-secret-nobody-configured-on-this-server-99"


def make_token(secret: str = SECRET, algorithm: str = "HS256", **claims) -> str:
    """Sign arbitrary claims. iat defaults to now, exp to an hour from now."""
    now = int(datetime.now(timezone.utc).timestamp())
    payload = {"iat": now, "exp": now + 3600}
    payload.update(claims)
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, secret, algorithm=algorithm)


@pytest.fixture()
def auth_config():
    return AuthConfig(secret=SECRET)


@pytest.fixture()
def repo():
    return InMemoryUserRepository()


@pytest_asyncio.fixture()
async def alice(repo):
    """Stored user alice / correctpw."""
    return await repo.create("alice", hash_password("correctpw"))


def _client_for(app, repo) -> AsyncClient:
    app.dependency_overrides[get_user_repository] = lambda: repo
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest_asyncio.fixture()
async def client(repo, auth_config):
    """HTTP client for an app signing with SECRET."""
    app = create_app(auth_config)
    async with _client_for(app, repo) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unconfigured_client(repo):
    """HTTP client for an app with no signing secret configured."""
    app = create_app(AuthConfig(secret=None))
    async with _client_for(app, repo) as ac:
        yield ac
    app.dependency_overrides.clear()
