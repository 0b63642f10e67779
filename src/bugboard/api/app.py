"""
bugboard.api.app

FastAPI app factory for the BugBoard API.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine, auth HTTP client,
  request authenticator).
- Map configuration errors to HTTP responses.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from bugboard import __version__
from bugboard.api.routers.dev_auth import router as dev_auth_router
from bugboard.api.routers.github_projects import router as github_projects_router
from bugboard.api.routers.health import router as health_router
from bugboard.api.routers.profile import router as profile_router
from bugboard.api.routers.reports import router as reports_router
from bugboard.api.routers.tasks import router as tasks_router
from bugboard.auth.authenticator import (
    BearerTokenStrategy,
    CookieSessionStrategy,
    RequestAuthenticator,
)
from bugboard.auth.jwt import JwtConfig, JwtVerifier
from bugboard.auth.secrets import SecretKeyConfigError
from bugboard.auth.session import AuthAdminNotConfigured, AuthServiceClient
from bugboard.db.init_db import init_db
from bugboard.db.session import create_engine, create_sessionmaker
from bugboard.observability.logging import configure_logging, get_logger
from bugboard.observability.middleware import RequestContextMiddleware
from bugboard.settings import Settings

log = get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Authorization", "Content-Type", "apikey", "x-client-info"]


def build_authenticator(settings: Settings, auth_client: AuthServiceClient) -> RequestAuthenticator:
    # Order matters: a bearer token, when sent, decides on its own.
    verifier = JwtVerifier(JwtConfig.from_settings(settings))
    return RequestAuthenticator(
        [
            BearerTokenStrategy(verifier),
            CookieSessionStrategy(auth_client, cookie_name=settings.session_cookie_name),
        ]
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SecretKeyConfigError)
    async def _secret_key_config(_: Request, exc: SecretKeyConfigError) -> JSONResponse:
        log.error("secret_key_misconfigured", error=str(exc))
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Encryption is not configured"},
        )

    @app.exception_handler(AuthAdminNotConfigured)
    async def _auth_admin(_: Request, exc: AuthAdminNotConfigured) -> JSONResponse:
        log.error("auth_admin_not_configured", error=str(exc))
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Auth service is not configured"},
        )


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod schema is managed with Alembic.
            await init_db(engine)

        http = httpx.AsyncClient(timeout=10.0)
        app.state.auth_client = AuthServiceClient(settings=settings, http=http)
        app.state.authenticator = build_authenticator(settings, app.state.auth_client)
        try:
            yield
        finally:
            await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="BugBoard API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    app.add_middleware(RequestContextMiddleware)
    _register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(tasks_router)
    app.include_router(reports_router)
    app.include_router(profile_router)
    app.include_router(github_projects_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; business logic stays in routers/services.
