# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Build the engine, session factory and token issuer from an explicit
  ``Settings`` object and park them on ``app.state``.
* Refuse to serve until the database answers (retry with backoff).
* Register CORS, request logging and the error envelope handlers.
* Mount the users and blogs routers.
* Expose /api/health for container liveness checks.

Run with:
    uvicorn main:create_app --factory          (from backend/)
"""

import asyncio
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from sqlalchemy.engine import Engine

from auth.router import router as users_router
from blog.router import router as blog_router
from core.config import Settings, get_settings
from core.exceptions import register_exception_handlers
from core.logger import logger
from core.security import TokenIssuer
from database import create_db_engine, create_session_factory, ping, wait_for_database


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Bodies are never echoed – register/login payloads carry passwords and
# passphrases.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


@asynccontextmanager
async def _lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Zamanix service starting up")
    # wait_for_database sleeps between attempts; keep it off the event loop
    await asyncio.to_thread(
        wait_for_database,
        app.state.engine,
        retries=settings.db_connect_retries,
        delay=settings.db_connect_delay,
        backoff=settings.db_connect_backoff,
    )
    app.state.started_at = time.monotonic()
    yield
    logger.info("Zamanix service shutting down")
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Build a fully wired application.  Both arguments default to the
    process configuration; tests pass their own.
    """
    settings = settings or get_settings()
    engine = engine or create_db_engine(settings.database_url)

    app = FastAPI(title="Zamanix API", version="1.0.0", lifespan=_lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_issuer = TokenIssuer.from_settings(settings)
    app.state.started_at = time.monotonic()

    # -- CORS ---------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )
    app.add_middleware(_RequestLogMiddleware)

    register_exception_handlers(app)

    # -- Routers ------------------------------------------------------------
    app.include_router(users_router)
    app.include_router(blog_router)

    # -- Health check -------------------------------------------------------
    @app.get("/api/health")
    def health(request: Request):
        db_ok = ping(request.app.state.engine)
        healthy = "healthy" if db_ok else "unhealthy"
        return JSONResponse(
            status_code=200 if db_ok else 503,
            content={
                "status": healthy,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "uptime": round(time.monotonic() - request.app.state.started_at, 3),
                "database": {"connected": db_ok},
            },
        )

    return app
