"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from licensedb.api.v1.endpoints import health
from licensedb.api.v1.router import api_router
from licensedb.core.config import settings
from licensedb.core.database import close_database, init_database
from licensedb.core.error_handlers import register_exception_handlers
from licensedb.utils.logging import get_logger, set_log_level

LOGGER = get_logger(__name__, level=settings.log_level)


class RootResponse(BaseModel):
    """Service metadata returned by ``GET /``."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    obligations: str = Field(..., description="Path of the obligation collection")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    set_log_level(settings.log_level)
    LOGGER.info(
        "Starting obligation service",
        extra={"version": settings.app_version, "environment": settings.environment},
    )

    # the API still starts without a database; /health reports it as degraded
    try:
        await asyncio.wait_for(
            init_database(auto_migrate=settings.db_auto_create),
            timeout=settings.db_init_timeout,
        )
    except asyncio.TimeoutError:
        LOGGER.error(f"Database initialization timed out after {settings.db_init_timeout}s")
    except Exception as e:
        LOGGER.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    LOGGER.info("Shutting down obligation service")
    try:
        await close_database()
    except Exception as e:
        LOGGER.error("Error closing database", exc_info=True, extra={"error": str(e)})


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Registry of license obligations with a field-level audit trail",
    lifespan=lifespan,
)

register_exception_handlers(app)


@app.middleware("http")
async def add_correlation_id(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid4())
    request.state.correlation_id = correlation_id
    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


# Added last so it wraps error responses too
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)

app.include_router(api_router, prefix=settings.api_v1_prefix)
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/", response_model=RootResponse, tags=["Root"], operation_id="get_service_metadata")
async def root() -> RootResponse:
    return RootResponse(
        message="Server is running",
        version=settings.app_version,
        obligations=f"{settings.api_v1_prefix}/obligations",
        docs=app.docs_url,
        health="/health",
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "licensedb.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
