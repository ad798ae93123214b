"""FastAPI application for Ceph pool provisioning."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cephprov import __version__
from cephprov.core.config import Settings, get_settings
from cephprov.core.exceptions import CephProvException
from cephprov.core.logging import setup_logging
from cephprov.dependencies import get_task_manager
from cephprov.models.storage import APIResponse
from cephprov.routers import storage, tasks

logger = logging.getLogger(__name__)


def error_response(status_code: int, code: str, message: str, details: Dict) -> JSONResponse:
    body = APIResponse(status="error", code=code, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _jsonable_errors(exc: RequestValidationError) -> List[Dict]:
    # ctx may carry the raw exception that failed a validator
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Map the service's exceptions onto the error envelope."""

    @app.exception_handler(CephProvException)
    async def service_error(request: Request, exc: CephProvException) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
        return error_response(exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _jsonable_errors(exc)
        logger.warning(f"{request.method} {request.url.path} rejected: {errors}")
        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            {"errors": errors},
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred",
            {"error": str(exc)} if settings.debug else {},
        )


def create_app(settings: Settings) -> FastAPI:
    """Build the API application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"Starting Ceph Pool Provisioning API ({settings.environment})")
        logger.info(f"Store: {settings.database.driver} ({settings.database.path})")
        logger.info(
            f"Control API: {settings.ceph_api.scheme}://<mon>:{settings.ceph_api.port}/{settings.ceph_api.prefix}"
        )
        yield
        logger.info("Shutting down; running provisioning tasks are not cancelled")
        get_task_manager().shutdown(wait=False)

    app = FastAPI(
        title="Ceph Pool Provisioning API",
        description="REST API for provisioning replicated storage pools on Ceph clusters",
        version=__version__,
        lifespan=lifespan,
    )
    register_exception_handlers(app, settings)

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    app.include_router(storage.router, prefix=f"{settings.api_v1_prefix}/cluster")
    app.include_router(tasks.router, prefix=f"{settings.api_v1_prefix}/tasks")
    return app


setup_logging()
settings = get_settings()
app = create_app(settings)


def run() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "cephprov.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_level=settings.server.log_level,
    )


if __name__ == "__main__":
    run()
