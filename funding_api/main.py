from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Callable

from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import SQLAlchemyError

from funding_api.core.config import get_settings
from funding_api.core.errors import CardNotFoundError
from funding_api.core.logging_config import configure_logging, get_logger
from funding_api.core.rate_limit import SlidingWindowRateLimiter
from funding_api.routers import cards, exchange_rate, summary

settings = get_settings()
logger = get_logger(__name__)
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="API for browsing cards, milestones, and funding",
    docs_url="/api/docs",
    redoc_url=None,
    openapi_url="/api/openapi.json",
)
app.state.rate_limiter = SlidingWindowRateLimiter(settings.rate_limit_requests, settings.rate_limit_window_seconds)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


@app.middleware("http")
async def rate_limit(request: Request, call_next: Callable):
    client_ip = request.client.host if request.client else "anonymous"
    if not request.app.state.rate_limiter.allow(client_ip):
        logger.warning(
            "Rate limit exceeded",
            extra={
                "details": {
                    "event": "rate_limited",
                    "status_code": 429,
                    "extra": {"client_ip": client_ip, "path": request.url.path},
                }
            },
        )
        return JSONResponse(status_code=429, content={"message": RATE_LIMIT_MESSAGE})
    return await call_next(request)


@app.middleware("http")
async def api_version_header(request: Request, call_next: Callable):
    # Starlette runs app-level Exception handlers outside all user middleware
    try:
        response = await call_next(request)
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "Application error",
            extra={
                "details": {
                    "event": "exception",
                    "status_code": 500,
                    "extra": {
                        "method": request.method,
                        "path": request.url.path,
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    },
                }
            },
        )
        response = JSONResponse(status_code=500, content={"error": "Internal server error"})
    response.headers["X-API-Version"] = settings.api_version
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable):
    start_time = time.perf_counter()

    logger.info(
        "HTTP request started",
        extra={
            "details": {
                "event": "request_start",
                "extra": {
                    "method": request.method,
                    "path": request.url.path,
                    "user_agent": request.headers.get("user-agent"),
                    "client_ip": request.client.host if request.client else None,
                },
            }
        },
    )

    response = await call_next(request)
    duration_ms = int((time.perf_counter() - start_time) * 1000)
    details = {
        "details": {
            "event": "request_completed",
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "extra": {
                "method": request.method,
                "path": request.url.path,
            },
        }
    }
    if response.status_code >= 500:
        logger.error("HTTP request completed", extra=details)
    elif response.status_code >= 400:
        logger.warning("HTTP request completed", extra=details)
    else:
        logger.info("HTTP request completed", extra=details)

    return response


# Outermost, so throttled and failed responses still carry CORS headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_alembic_config() -> Config:
    root_path = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(root_path / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(root_path / "alembic"))
    # configparser interpolation would choke on %-escaped passwords
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))
    redacted_url = make_url(settings.database_url).render_as_string(hide_password=True)
    logger.debug(
        "Alembic configuration prepared",
        extra={"details": {"event": "alembic_config", "extra": {"database_url": redacted_url}}},
    )
    return alembic_cfg


async def apply_migrations() -> None:
    alembic_cfg = get_alembic_config()
    await asyncio.to_thread(command.upgrade, alembic_cfg, "head")
    logger.info("Migrations applied", extra={"details": {"event": "database_migrate"}})


@app.exception_handler(CardNotFoundError)
async def card_not_found_handler(request: Request, exc: CardNotFoundError):  # noqa: ANN201
    logger.info(
        "Card not found",
        extra={"details": {"event": "card_not_found", "extra": {"card_id": exc.card_id}}},
    )
    return JSONResponse(
        status_code=404,
        content={"error": "Not Found"},
        headers={"Cache-Control": settings.cache_control},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):  # noqa: ANN201
    logger.error(
        "DB query error",
        extra={
            "details": {
                "event": "database_error",
                "extra": {
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            }
        },
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.on_event("startup")
async def startup_event() -> None:
    logger.info(
        "Startup sequence initiated",
        extra={"details": {"event": "startup", "extra": {"environment": settings.environment, "stage": "init"}}},
    )
    if settings.migrate_on_start:
        await apply_migrations()
    # Uvicorn may have replaced our handlers while loading its own config
    configure_logging()
    logger.info(
        "Startup completed",
        extra={"details": {"event": "startup", "extra": {"environment": settings.environment}}},
    )


@app.get("/", response_class=PlainTextResponse, tags=["System"])
async def root():
    return f"ZDA Funding Wallet API {settings.api_version} is running"


@app.get("/health", tags=["System"])
async def healthcheck():
    logger.info("Health check", extra={"details": {"event": "health"}})
    return {"status": "ok"}


app.include_router(exchange_rate.router, prefix=settings.api_prefix)
app.include_router(cards.router, prefix=settings.api_prefix)
app.include_router(summary.router, prefix=settings.api_prefix)
