"""Settings validation tests."""

import pytest
from pydantic import ValidationError

from quizapp.config import Settings


def test_defaults_leave_secret_unconfigured(monkeypatch):
    monkeypatch.delenv("QUIZAPP_SECRET_KEY", raising=False)
    s = Settings(_env_file=None)
    assert s.secret_key is None
    assert s.jwt_algorithm == "HS256"
    assert s.token_expire_minutes == 120


def test_empty_secret_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, secret_key="  ")


def test_production_requires_secret(monkeypatch):
    monkeypatch.delenv("QUIZAPP_SECRET_KEY", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, environment="production")


def test_production_with_secret():
    s = Settings(_env_file=None, environment="production", secret_key="s3cret")
    assert s.secret_key == "s3cret"


@pytest.mark.parametrize("alg", ["RS256", "ES256", "none"])
def test_non_hmac_algorithm_is_rejected(alg):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, jwt_algorithm=alg)


def test_secret_from_environment(monkeypatch):
    monkeypatch.setenv("QUIZAPP_SECRET_KEY", "from-env")
    assert Settings(_env_file=None).secret_key == "from-env"


def test_engine_pool_follows_settings():
    from quizapp.db.engine import build_engine

    engine = build_engine(
        Settings(_env_file=None, db_pool_size=1, db_max_overflow=0, debug=True)
    )
    assert engine.pool.size() == 1
    assert engine.sync_engine.echo is True
