"""FastAPI server for the Taskboard REST API."""

from __future__ import annotations

import asyncio
import contextlib
import os
from contextlib import asynccontextmanager

# Configure Rich logging early so all modules get proper handlers
from taskboard.logging import configure_logging, format_component, get_logger
from taskboard.settings import settings

configure_logging(settings.log_level)

import logfire
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import auth, health, tasks, users
from taskboard.cache import cache
from taskboard.exceptions import AppError, log_critical
from taskboard.types import Notification

logfire.configure(
    send_to_logfire="if-token-present",
    service_name=settings.service_name,
    token=os.environ.get("LOGFIRE_TOKEN"),
    environment=settings.environment,
)

logger = get_logger(__name__)

# Application error code -> HTTP status
ERROR_STATUS_CODES = {
    "AUTH_ERROR": 401,
    "PERMISSION_ERROR": 403,
    "NOT_FOUND_ERROR": 404,
    "VALIDATION_ERROR": 422,
    "NETWORK_ERROR": 503,
    "DATABASE_ERROR": 500,
    "UNKNOWN_ERROR": 500,
}


async def cleanup_cache_periodically(interval: float) -> None:
    """Evict expired cache entries every `interval` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        removed = cache.cleanup()
        if removed:
            logger.debug(f"{format_component('CACHE')} Evicted {removed} expired entries")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the cache cleanup loop for the lifetime of the app."""
    cleanup_task = asyncio.create_task(cleanup_cache_periodically(settings.cache_cleanup_interval_seconds))
    logger.info(f"{format_component('API')} {settings.service_name} started ({settings.environment})")
    try:
        yield
    finally:
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task


app = FastAPI(
    title="Taskboard API",
    description="""
# Taskboard API

Multi-user task tracking over Supabase.

## Features

- **Tasks**: create, edit, delete and filter tasks
- **Workflow**: pending → in-progress → review → completed → pending
- **Privacy**: general tasks are visible to everyone, private tasks only to
  their responsible user, creator and the users they are shared with
- **Comments**: per-task comment threads

## Authentication

Sign in through `/api/auth/signin` and send the access token:

```
Authorization: Bearer <access_token>
```

## Environment Setup

- `SUPABASE_URL` - Supabase project URL
- `SUPABASE_ANON_KEY` - Supabase anon key
    """,
    version="0.1.0",
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Tasks", "description": "Task management, workflow and comments"},
        {"name": "Users", "description": "User directory"},
        {"name": "Authentication", "description": "User authentication via Supabase Auth"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(tasks.router)
app.include_router(users.router)
app.include_router(auth.router)

logfire.instrument_fastapi(app)


# Exception handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    status_code = ERROR_STATUS_CODES.get(exc.code, 500)
    logger.warning(f"{format_component('API')} {request.method} {request.url.path} -> {status_code} {exc.code}: {exc.message}")
    if status_code >= 500:
        log_critical(exc, {"method": request.method, "path": request.url.path})
    notification = Notification(title="Error", description=exc.message, variant="destructive")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.to_dict(), "notification": notification.model_dump()},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"[VALIDATION ERROR] {request.method} {request.url.path}")
    for error in exc.errors():
        logger.error(f"  {error['loc']}: {error['msg']} (type={error['type']})")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"[UNHANDLED ERROR] {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


async def main_http() -> None:
    """Run the HTTP server."""
    port = int(os.environ.get("PORT", 8000))
    logger.info(f"Starting Taskboard API on http://0.0.0.0:{port}")

    config = uvicorn.Config(app, host="0.0.0.0", port=port, log_level=settings.log_level.lower())
    server = uvicorn.Server(config)
    await server.serve()


def run_http() -> None:
    """Entry point for HTTP server command."""
    asyncio.run(main_http())


def run_dev() -> None:
    """Entry point for local development with hot reload."""
    port = int(os.environ.get("PORT", 8000))
    logger.info(f"Starting dev server on http://0.0.0.0:{port} (reload enabled)")
    uvicorn.run(
        "api.server:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info",
    )


if __name__ == "__main__":
    asyncio.run(main_http())
