"""Health check endpoints.

Learn: /ping is a bare liveness check. /health also checks that
Postgres is reachable and reports whether a signing secret is configured.
"""

from fastapi import APIRouter, Request, Response
from sqlalchemy import text

from quizapp import __version__
from quizapp.db.engine import engine

router = APIRouter()


@router.get("/ping")
async def ping():
    return Response(status_code=200)


@router.get("/health")
async def health_check(request: Request):
    """Check server health and dependency connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["postgres"] = "ok"
    except Exception as e:
        checks["postgres"] = f"error: {e.__class__.__name__}"

    config = request.app.state.auth_config
    checks["signing_key"] = "ok" if config.secret is not None else "missing"

    status = "healthy" if all(
        v == "ok" for k, v in checks.items() if k != "version"
    ) else "degraded"

    return {"status": status, **checks}
