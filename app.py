import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from db import Database
from middleware.request_logging import RequestLoggingMiddleware
from middleware.security_headers import SecurityHeadersMiddleware
from utils.error_handler import register_exception_handlers
from web.api_router import api_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    database: Database = app.state.database

    # Startup
    await database.connect()
    logging.info("[Startup] Database connected, tables ensured")

    yield

    # Shutdown
    logging.warning('Shutting down..')
    await database.dispose()
    logging.warning('Bye!')


def create_app(database: Database | None = None) -> FastAPI:
    """
    Build the storefront API application.

    Args:
        database: Storage resource to serve from; defaults to one built from config.DB_URL.
            It is connected on startup and disposed on shutdown.
    """
    app = FastAPI(title="Storefront API", lifespan=lifespan)
    app.state.database = database or Database(config.DB_URL)

    app.add_middleware(RequestLoggingMiddleware)

    if config.SECURITY_HEADERS_ENABLED:
        app.add_middleware(SecurityHeadersMiddleware)
        logging.info("[Startup] Security headers middleware enabled")
    else:
        logging.debug("[Startup] Security headers middleware disabled")

    # Added last so it wraps everything, including error responses
    if config.CORS_ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        )
        logging.info(f"[Startup] CORS middleware enabled for origins: {config.CORS_ALLOWED_ORIGINS}")
    else:
        logging.debug("[Startup] CORS middleware disabled (no allowed origins configured)")

    register_exception_handlers(app)
    app.include_router(api_router)
    return app
