"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. The AuthConfig (signing secret, algorithm, token lifetime) is
resolved here, once, and stored on app.state; tests pass their own.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from quizapp import __version__
from quizapp.api import api_router
from quizapp.api.auth import login_validation_handler
from quizapp.auth.jwt import AuthConfig
from quizapp.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(
        "quizapp.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )
    if app.state.auth_config.secret is None:
        logger.warning("quizapp.signing_key_missing")

    yield

    logger.info("quizapp.shutdown")

    from quizapp.db.engine import engine
    await engine.dispose()


def create_app(auth_config: Optional[AuthConfig] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Quiz App",
        description="Quiz app backend — login, JWT issuance and request gating",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.auth_config = auth_config or AuthConfig.from_settings(settings)

    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → CORS → handler
    from quizapp.middleware.request_id import RequestIdMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.request_origin_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Authorization", "Access-Control-Allow-Origin"],
        max_age=5,
    )
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)
    app.add_exception_handler(RequestValidationError, login_validation_handler)

    return app


# Default app instance (used by uvicorn: quizapp.main:app)
app = create_app()
