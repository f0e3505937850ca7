"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request

from src.services.exceptions import ServiceError
from src.utils.constants import APP_NAME, APP_VERSION

from .responses import service_error_response
from .routes import router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Build the API application.

    Database setup is left to the caller (see src.main), so tests can point
    the session factory at their own database first.

    Returns:
        Configured FastAPI instance
    """
    app = FastAPI(title=APP_NAME, version=APP_VERSION)

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError):
        level = logging.ERROR if exc.http_status_code >= 500 else logging.WARNING
        logger.log(level, f"{request.method} {request.url.path} -> {exc.http_status_code}: {exc}")
        return service_error_response(exc)

    @app.get("/")
    async def root():
        return {"success": True, "message": f"{APP_NAME} API", "version": APP_VERSION}

    app.include_router(router)
    return app
