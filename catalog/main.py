"""
Catalog API: FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) builds the store, the services, middleware,
       exception handlers and routers. The module-level `app` is the uvicorn
       target (uvicorn catalog.main:app).

Application layout:
    Middleware chain:   Request ID -> Access Log -> CORS
    Routes:             /categories, /products, /health
    Exception handlers: CatalogError subclasses -> their status code
                        RequestValidationError  -> 400
                        HTTPException (404/405) -> envelope
                        Exception               -> 500

Lifecycle:
    Startup:
    1. Configure logging
    2. SQL store only: create missing tables, seed empty tables
    3. Log the endpoint list

    Shutdown:
    1. Dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog import __version__
from catalog.config import Settings
from catalog.database import dispose_engine
from catalog.exceptions import CatalogError, DatabaseError
from catalog.middleware.logging import RequestLoggingMiddleware
from catalog.middleware.request_id import RequestIDMiddleware, request_id_var
from catalog.migrations import run_migrations, seed_categories, seed_products
from catalog.repositories import build_store
from catalog.routes import categories, health, products
from catalog.schemas.envelope import error_body
from catalog.services.category_service import CategoryService
from catalog.services.product_service import ProductService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger once per process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # per-request noise; our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if settings.log_level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def _log_endpoints(app: FastAPI) -> None:
    for route in app.routes:
        if isinstance(route, APIRoute) and route.include_in_schema:
            for method in sorted(route.methods):
                logger.info("  %-6s %s", method, route.path)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    store = app.state.store

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("Catalog API %s starting up (store=%s)", __version__, store.backend)

    if store.engine is not None:
        await run_migrations(store.engine)
        if settings.seed_data:
            await seed_categories(store.session_factory)
            await seed_products(store.session_factory)

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    _log_endpoints(app)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Catalog API shutting down...")
    if store.engine is not None:
        await dispose_engine(store.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to envelope responses.

    Every error body is {"success": false, "message": ...}. Context dicts,
    driver errors and stack traces are logged server-side only.
    """

    @app.exception_handler(CatalogError)
    async def handle_catalog_error(request: Request, exc: CatalogError):
        rid = request_id_var.get("")
        if isinstance(exc, DatabaseError):
            logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.info("[%s] Request validation failed: %s", rid, exc.errors())
        return JSONResponse(status_code=400, content=error_body("Invalid request body"))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            message = "Not found"
        elif exc.status_code == 405:
            message = "Method not allowed"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body("An unexpected error occurred"),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration. Read from the environment when None.

    The store and services are built here rather than in the lifespan so an
    app driven without lifespan events (httpx ASGITransport) is still usable.
    """
    settings = settings or Settings()
    store = build_store(settings)

    app = FastAPI(
        title="Catalog API",
        description="Product catalog: categories and products over HTTP/JSON.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.category_service = CategoryService(store.categories)
    app.state.product_service = ProductService(store.products)

    # ── Middleware (runs in reverse order of addition) ────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(categories.router)
    app.include_router(products.router)
    app.include_router(health.router)

    return app


app = create_app()
