"""
Land Registry Service - Main Application.

Registers land parcels and initiates ownership transfers, each backed by
an uploaded supporting document kept in Supabase Storage.
"""

from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .config import settings
from .dependencies import clear_repositories, set_repositories
from .exceptions import InvalidInputError, RecordOperationError, UpdateError
from .gateway import IRemoteGateway, SupabaseGateway
from .logging_config import get_logger, setup_logging
from .metrics import metrics_endpoint, track_request
from .notifications import LoggingNotifier, Notifier
from .repositories.record_repository import (
    LandRepository,
    RecordRepository,
    TransferRepository,
)
from .routers import health_router, records_router
from .store import RecordStore
from .supabase_client import get_supabase_client

logger = get_logger(__name__)


def build_repositories(
    gateway: IRemoteGateway, notifier: Optional[Notifier] = None
) -> Dict[str, RecordRepository]:
    """
    Build one store and repository per entity kind, keyed by URL segment.
    """
    notifier = notifier or LoggingNotifier()
    return {
        "lands": LandRepository(
            gateway, RecordStore("land"), notifier, table=settings.LAND_TABLE
        ),
        "transfers": TransferRepository(
            gateway, RecordStore("transfer"), notifier, table=settings.TRANSFER_TABLE
        ),
    }


def create_app(
    gateway: Optional[IRemoteGateway] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        gateway: Gateway to use; a Supabase gateway is created on startup
            when omitted
        notifier: Notification sink shared by all repositories
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
        logger.info("Starting Land Registry Service", bucket=settings.STORAGE_BUCKET)

        active_gateway = gateway
        if active_gateway is None:
            client = await get_supabase_client()
            active_gateway = SupabaseGateway(client, bucket=settings.STORAGE_BUCKET)

        repositories = build_repositories(active_gateway, notifier)
        set_repositories(repositories)
        app.state.repositories = repositories
        logger.info("Land Registry Service started")

        yield

        clear_repositories()
        logger.info("Land Registry Service stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Land registration and ownership transfer records",
        version="1.0.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def request_metrics_middleware(request: Request, call_next):
        response = await call_next(request)
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        track_request(request.method, endpoint, response.status_code)
        return response

    @app.exception_handler(RecordOperationError)
    async def record_operation_exception_handler(
        request: Request, exc: RecordOperationError
    ):
        """Translate terminal repository failures into JSON responses."""
        status_code = status.HTTP_502_BAD_GATEWAY
        if isinstance(exc, UpdateError) and exc.not_found:
            status_code = status.HTTP_404_NOT_FOUND

        return JSONResponse(
            status_code=status_code,
            content={
                "success": False,
                "error": exc.__class__.__name__,
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(InvalidInputError)
    async def validation_exception_handler(request: Request, exc: InvalidInputError):
        """Invalid domain fields or an unknown status."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "success": False,
                "error": "validation_error",
                "message": exc.message,
                "details": exc.details,
            },
        )

    app.include_router(health_router.router)
    app.include_router(records_router.router)
    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["metrics"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
