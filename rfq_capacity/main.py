"""
RFQ Capacity Planner - Main Application

FastAPI application exposing the capacity load analysis:
- Weekly load projection per plant/process
- Utilization matrix and week drill-down
- Load table of active RFQs
- Capacity configuration updates
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from rfq_capacity.config.settings import settings
from rfq_capacity.database.base import close_db, init_db
from rfq_capacity.services.capacity_planning import CapacityDataUnavailable
from rfq_capacity.utils.logging import setup_logging, request_logger, get_logger

from rfq_capacity.api.routes import load

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging()
    logger.info("Starting RFQ Capacity Planner", version=settings.app_version)
    await init_db()

    yield

    logger.info("Shutting down RFQ Capacity Planner")
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="""
## RFQ Capacity Planner API

Projects the workload of open quotations onto plant/process capacity.

### Capacity Load

- **Weekly load**: hours per plant/process over a rolling horizon of ISO weeks
- **Matrix**: utilization per week with a trailing average
- **Load table**: one row per corporate step and worksharing line of active RFQs
    """,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()

    request_logger.log_request(method=request.method, path=request.url.path)

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000

    request_logger.log_response(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )

    return response


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed messages."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "errors": exc.errors(),
        },
    )


@app.exception_handler(CapacityDataUnavailable)
async def capacity_data_exception_handler(request: Request, exc: CapacityDataUnavailable):
    """Upstream fetch failed; the pass is aborted as a whole."""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(
        "Unhandled exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "An unexpected error occurred",
        },
    )


app.include_router(load.router, prefix=f"{settings.api_prefix}/load", tags=["Capacity Load"])


@app.get("/health", tags=["System"])
async def health_check():
    """System health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
    }


def main() -> None:
    import uvicorn

    uvicorn.run(
        "rfq_capacity.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.workers if not settings.debug else 1,
    )


if __name__ == "__main__":
    main()
