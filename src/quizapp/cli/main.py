"""quizapp CLI — seed users, log in, and run the server.

Usage:
    quizapp create-user alice                 # Prompts for the password
    quizapp login alice                       # POST /user/authenticate, prints token
    quizapp whoami --token <jwt>              # GET /users/me
    quizapp serve                             # Run the API with uvicorn
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

from quizapp import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("QUIZAPP_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _fail(message: str):
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="quizapp")
def main():
    """quizapp — quiz app backend tools."""


# ---------------------------------------------------------------------------
# quizapp create-user
# ---------------------------------------------------------------------------


@main.command("create-user")
@click.argument("username")
@click.password_option(envvar="QUIZAPP_USER_PASSWORD", help="Password (or set QUIZAPP_USER_PASSWORD)")
def create_user(username: str, password: str):
    """Create a user directly in the database with a bcrypt-hashed password."""
    from quizapp.errors import AppError, ErrorKind

    try:
        identity = asyncio.run(_create_user_impl(username, password))
    except AppError as e:
        if e.kind is ErrorKind.CONFLICT:
            _fail(f"user {username!r} already exists")
        _fail(e.message)
    click.secho(f"Created user {identity.username} (id={identity.id})", fg="green")


async def _create_user_impl(username: str, password: str):
    from quizapp.auth.password import hash_password
    from quizapp.db.engine import async_session_factory, engine
    from quizapp.users.repository import SqlUserRepository

    try:
        async with async_session_factory() as session:
            return await SqlUserRepository(session).create(
                username, hash_password(password)
            )
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# quizapp login / whoami
# ---------------------------------------------------------------------------


@main.command()
@click.argument("username")
@click.password_option(confirmation_prompt=False, help="Password (prompted if omitted)")
def login(username: str, password: str):
    """Authenticate against the running API and print the response."""
    asyncio.run(_login_impl(username, password))


async def _login_impl(username: str, password: str):
    async with _client() as c:
        r = await c.post(
            "/user/authenticate",
            json={"username": username, "password": password},
        )
    if r.status_code != 200:
        _fail(f"login failed ({r.status_code}): {r.json().get('detail')}")
    click.echo(_pretty_json(r.json()))


@main.command()
@click.option("--token", envvar="QUIZAPP_TOKEN", required=True, help="JWT (or set QUIZAPP_TOKEN)")
def whoami(token: str):
    """Show the user the token belongs to."""
    asyncio.run(_whoami_impl(token))


async def _whoami_impl(token: str):
    async with _client() as c:
        r = await c.get("/users/me", headers={"Authorization": token})
    if r.status_code != 200:
        _fail(f"request rejected ({r.status_code}): {r.json().get('detail')}")
    click.echo(_pretty_json(r.json()))


# ---------------------------------------------------------------------------
# quizapp serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind host (default: QUIZAPP_HOST)")
@click.option("--port", default=None, type=int, help="Bind port (default: QUIZAPP_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from quizapp.config import settings

    uvicorn.run(
        "quizapp.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
