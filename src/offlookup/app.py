"""FastAPI application for offlookup."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from offlookup import __version__
from offlookup.config import get_settings
from offlookup.errors import ServiceError
from offlookup.models import HealthResponse
from offlookup.routers import products
from offlookup.services import store as store_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to MongoDB on startup and close the client on shutdown."""
    client, app.state.store = await store_service.connect(get_settings())
    try:
        yield
    finally:
        logger.info("Shutting down, closing MongoDB client")
        app.state.store = None
        client.close()


app = FastAPI(
    title="offlookup",
    description="Open Food Facts product lookup service",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(products.router, tags=["products"])


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request on arrival and on completion."""
    started = time.perf_counter()
    client = request.client.host if request.client else "-"
    user_agent = request.headers.get("user-agent", "Unknown")
    url = f"{request.url.path}?{request.url.query}" if request.url.query else request.url.path
    logger.info("%s %s - %s - %s", request.method, url, client, user_agent)
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s - %d - %.0fms", request.method, url, status_code, duration_ms)
    return response


def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:  # noqa: ARG001
    return _error_response(exc.status_code, exc.error, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa: ARG001
    error = "Not found" if exc.status_code == 404 else "HTTP error"
    return _error_response(exc.status_code, error, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: ARG001
    problems = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())
    return _error_response(400, "Invalid request", problems)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error serving %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(500, "Internal server error", "An unexpected error occurred")


@app.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Liveness check, including whether the database answers."""
    store = getattr(request.app.state, "store", None)
    connected = store is not None and await store.ping()
    return HealthResponse(
        database="Connected" if connected else "Disconnected",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@app.get("/")
async def index() -> dict:
    """Describe the available endpoints."""
    return {
        "message": "Open Food Facts API Server",
        "version": __version__,
        "endpoints": {
            "GET /": "This documentation",
            "GET /health": "Health check",
            "GET /product/:barcode": "Get product by barcode",
            "GET /search?q=query&limit=10": "Search products by name",
            "GET /stats": "Database statistics",
        },
        "examples": {
            "product": "/product/3017620422003",
            "search": "/search?q=coca%20cola&limit=5",
        },
    }
