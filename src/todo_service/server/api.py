"""FastAPI application for the todo service."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from .. import __version__
from ..config import ServiceConfig
from ..store import TodoStore
from .auth import CredentialStore, TokenService, TokenSigningError, create_auth_guard
from .models import LoginRequest, LoginResponse, ServiceInfo
from .todo_api import create_todo_router


def build_token_service(config: ServiceConfig) -> TokenService:
    return TokenService(
        config.secret_key,
        algorithm=config.algorithm,
        expires_delta=timedelta(minutes=config.token_expire_minutes),
        issuer=config.issuer,
    )


def create_app(
    config: Optional[ServiceConfig] = None,
    store: Optional[TodoStore] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Service configuration (defaults to ``ServiceConfig.from_env()``).
        store: Record store to serve; a fresh empty store is created if omitted.

    Returns:
        Configured FastAPI app.
    """
    config = config or ServiceConfig.from_env()

    app = FastAPI(
        title="Todo Service",
        description="Authenticated in-memory task list",
        version=__version__,
    )

    # Components live for the app's lifetime and are shared by every request
    app.state.config = config
    app.state.tokens = build_token_service(config)
    app.state.credentials = CredentialStore(config.users)
    app.state.store = store if store is not None else TodoStore()

    def _get_store() -> TodoStore:
        return app.state.store

    def _get_tokens() -> TokenService:
        return app.state.tokens

    @app.exception_handler(RequestValidationError)
    async def bad_payload(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Bad payload on {} {}: {}", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"detail": "Invalid request payload"})

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        client = f"{request.client.host}:{request.client.port}" if request.client else "-"
        logger.info(
            "{} {} {} {} {:.2f}ms",
            request.method,
            request.url.path,
            client,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.get("/")
    async def root() -> ServiceInfo:
        """Root endpoint."""
        return ServiceInfo(name="Todo Service", version=__version__, status="running")

    @app.post("/login")
    async def login(request: LoginRequest) -> LoginResponse:
        """Login endpoint.

        Args:
            request: Login credentials.

        Returns:
            A signed bearer token for the user.
        """
        if not app.state.credentials.authenticate(request.username, request.password):
            logger.warning("Failed login for {!r}", request.username)
            raise HTTPException(status_code=401, detail="Invalid credentials")

        try:
            token = app.state.tokens.issue(request.username)
        except TokenSigningError as e:
            logger.error("Could not sign token for {!r}: {}", request.username, e)
            raise HTTPException(status_code=500, detail="Could not generate token")

        logger.info("User {!r} logged in", request.username)
        return LoginResponse(token=token)

    app.include_router(create_todo_router(_get_store, create_auth_guard(_get_tokens)))

    return app
