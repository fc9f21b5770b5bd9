"""CLI tests.

Learn: Click's CliRunner invokes commands in-process. Database and HTTP
calls are replaced with stubs so these only check argument handling and
output.
"""

from datetime import datetime, timezone

from click.testing import CliRunner

from quizapp import __version__
from quizapp.cli import main as cli_module
from quizapp.errors import AppError, ErrorKind
from quizapp.users.entities import StoredIdentity


def test_version():
    result = CliRunner().invoke(cli_module.main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_create_user(monkeypatch):
    seen = {}

    async def fake_create(username, password):
        seen["args"] = (username, password)
        return StoredIdentity(id=5, username=username, created_at=datetime.now(timezone.utc))

    monkeypatch.setattr(cli_module, "_create_user_impl", fake_create)
    result = CliRunner().invoke(
        cli_module.main, ["create-user", "alice"], input="correctpw\ncorrectpw\n"
    )
    assert result.exit_code == 0
    assert "Created user alice (id=5)" in result.output
    assert seen["args"] == ("alice", "correctpw")


def test_create_user_password_from_env(monkeypatch):
    async def fake_create(username, password):
        assert password == "from-env"
        return StoredIdentity(id=1, username=username, created_at=datetime.now(timezone.utc))

    monkeypatch.setattr(cli_module, "_create_user_impl", fake_create)
    result = CliRunner().invoke(
        cli_module.main, ["create-user", "bob"], env={"QUIZAPP_USER_PASSWORD": "from-env"}
    )
    assert result.exit_code == 0


def test_create_duplicate_user(monkeypatch):
    async def fake_create(username, password):
        raise AppError(ErrorKind.CONFLICT, "username already taken")

    monkeypatch.setattr(cli_module, "_create_user_impl", fake_create)
    result = CliRunner().invoke(
        cli_module.main, ["create-user", "alice", "--password", "pw"]
    )
    assert result.exit_code == 1
    assert "already exists" in result.output
