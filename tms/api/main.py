"""
FastAPI application for the transport management engine.

One engine instance, built at startup, serves every request.
"""

import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tms import __version__
from tms.api.routers import data, reports, shipments
from tms.api.routers.entities import build_entity_router
from tms.common.config_loader import Config, get_config
from tms.common.errors import DecodeError, NotFound, ValidationError
from tms.common.logging_utils import get_logger, setup_logging
from tms.engine import build_engine
from tms.storage.backends import KeyValueBackend

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    environment: str
    timestamp: datetime


class InfoResponse(BaseModel):
    """API info response."""
    name: str
    version: str
    environment: str


def create_app(config: Config | None = None, backend: KeyValueBackend | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Configuration; loaded from ``config/`` at startup when omitted
        backend: Storage backend override (tests use a MemoryBackend)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        settings = config or get_config()
        setup_logging(
            service_name="tms-api",
            log_level=settings.log_level,
            use_json=settings.environment != "dev",
            environment=settings.environment,
        )
        logger.info("Starting TMS API", environment=settings.environment)

        app.state.config = settings
        app.state.engine = build_engine(settings, backend=backend)

        yield

        app.state.engine = None
        logger.info("TMS API shutdown complete")

    environment = config.environment if config else os.environ.get("ENVIRONMENT", "dev")
    api_settings = config.api if config else None
    title = api_settings.title if api_settings else "LogiPro TMS API"

    app = FastAPI(
        title=title,
        description="Shipments, fleet, drivers and customers for a single transport operator",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if environment != "prod" else None,
        redoc_url="/redoc" if environment != "prod" else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_settings.cors_origins if api_settings else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc), "kind": exc.kind, "id": exc.entity_id})

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc), **exc.to_dict()})

    @app.exception_handler(DecodeError)
    async def decode_handler(request: Request, exc: DecodeError):
        return JSONResponse(status_code=400, content={"detail": str(exc), **exc.to_dict()})

    for kind, tag in (("customers", "Customers"), ("drivers", "Drivers"), ("vehicles", "Vehicles")):
        app.include_router(build_entity_router(kind), prefix=f"/api/v1/{kind}", tags=[tag])
    app.include_router(shipments.router, prefix="/api/v1/shipments", tags=["Shipments"])
    app.include_router(build_entity_router("shipments"), prefix="/api/v1/shipments", tags=["Shipments"])
    app.include_router(data.router, prefix="/api/v1/data", tags=["Data"])
    app.include_router(reports.router, prefix="/api/v1/reports", tags=["Reports"])

    @app.get("/health", response_model=HealthResponse)
    def health_check(request: Request):
        """Health check endpoint for load balancers."""
        settings = getattr(request.app.state, "config", None)
        return HealthResponse(
            status="healthy",
            environment=settings.environment if settings else environment,
            timestamp=datetime.now(timezone.utc),
        )

    @app.get("/", response_model=InfoResponse)
    def root(request: Request):
        """API root endpoint."""
        settings = getattr(request.app.state, "config", None)
        return InfoResponse(
            name=settings.api.title if settings else title,
            version=__version__,
            environment=settings.environment if settings else environment,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tms.api.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8080)),
        reload=os.environ.get("ENVIRONMENT", "dev") == "dev",
    )
