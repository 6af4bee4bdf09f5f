"""
Auth Gateway - signup and login in front of a GraphQL data service
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

import uvicorn

from .auth import PasswordHasher, TokenIssuer
from .config import Settings, get_settings
from .data_service import DataServiceClient
from .exceptions import AuthServiceError, InvalidPayload
from .routes import auth, health

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    data_service: Optional[DataServiceClient] = None,
) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Refuse to start without secrets; release the data service pool on shutdown"""
        settings.check_secrets()
        logger.info("Auth gateway ready, data service at %s", settings.DATA_SERVICE_URL)
        yield
        app.state.data_service.close()

    app = FastAPI(
        title="Auth Gateway",
        description="Signup and login backed by a GraphQL data service",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.password_hasher = PasswordHasher.from_settings(settings)
    app.state.token_issuer = TokenIssuer.from_settings(settings)
    app.state.data_service = data_service or DataServiceClient.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AuthServiceError)
    async def auth_service_error_handler(request: Request, exc: AuthServiceError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "%s %s -> %s %s context=%s",
            request.method, request.url.path, exc.status_code, type(exc).__name__, exc.context
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = [".".join(str(loc) for loc in error["loc"]) for error in exc.errors()]
        logger.warning("Invalid payload on %s %s: %s", request.method, request.url.path, fields)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=InvalidPayload().to_dict(),
        )

    app.include_router(auth.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Serve the app with uvicorn; the app is built on startup, not at import."""
    settings = get_settings()
    uvicorn.run(
        "auth_gateway.auth_gateway.auth_service.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
