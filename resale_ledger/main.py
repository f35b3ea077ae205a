import logging
import secrets
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from resale_ledger.config import Settings, get_settings
from resale_ledger.core.constants import CONFIG_ERROR_MESSAGE
from resale_ledger.core.errors import ConfigurationError, QueryError
from resale_ledger.core.logging import setup_logging
from resale_ledger.database.engine import get_engine, init_schema
from resale_ledger.routers import (
    analytics_router,
    auth_router,
    health_router,
    products_router,
    stores_router,
)

setup_logging()
settings: Settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    try:
        init_schema(get_engine())
    except ConfigurationError as exc:
        # API calls report the problem individually until DATABASE_URL is fixed.
        logger.error("Database unavailable at startup: %s", exc)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET or secrets.token_urlsafe(32),
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE_SECONDS,
    same_site="lax",
    https_only=settings.ENVIRONMENT.lower() != "local",
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"error": CONFIG_ERROR_MESSAGE, "configError": True},
    )


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError):
    logger.error("Query error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"error": f"Failed to {exc.action}", "configError": False},
    )


app.include_router(health_router)
app.include_router(auth_router)
app.include_router(stores_router)
app.include_router(products_router)
app.include_router(analytics_router)


__all__ = ["app"]
