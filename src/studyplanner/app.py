"""Application factory for the FastAPI service."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import PROJECT_ROOT, Settings, get_settings
from .repository import ScheduleRepository
from .routers.assistant import router as assistant_router
from .routers.preferences import router as preferences_router
from .routers.schedule import router as schedule_router
from .routers.tasks import router as tasks_router
from .scheduling.errors import ScheduleStoreError
from .services.assistant_service import AssistantService
from .services.schedule_service import ScheduleService
from .services.time_context import Clock

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure logging based on LOG_LEVEL environment variable."""
    # Load .env file first to ensure LOG_FILE is available
    load_dotenv()

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []
    log_file = os.getenv("LOG_FILE")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    logging.getLogger("studyplanner").setLevel(log_level)
    logging.getLogger("uvicorn").setLevel(log_level)
    logging.getLogger("uvicorn.access").setLevel(log_level)
    logging.getLogger("uvicorn.error").setLevel(log_level)

    if log_level > logging.DEBUG:
        logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def _resolve_under(base: Path, p: Path) -> Path:
    # Absolute paths are used as-is (tests, external mounts).
    if p.is_absolute():
        return p.resolve()
    resolved = (base / p).resolve()
    if not resolved.is_relative_to(base):
        raise ValueError(f"Configured path {resolved} escapes project root {base}")
    return resolved


def create_app(
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    _configure_logging()

    settings = settings or get_settings()
    database_path = _resolve_under(PROJECT_ROOT, settings.database_path)

    repository = ScheduleRepository(database_path)
    schedule_service = ScheduleService(repository, settings, clock=clock)
    assistant_service = AssistantService(schedule_service)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await repository.initialize()
        logger.info("Schedule store ready at %s", database_path)
        try:
            yield
        finally:
            await repository.close()

    app = FastAPI(
        title="Study Planner Backend",
        version="0.1.0",
        description="Task scheduling and a conversational schedule assistant.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.schedule_service = schedule_service
    app.state.assistant_service = assistant_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ScheduleStoreError)
    async def _store_error_handler(request: Request, exc: ScheduleStoreError) -> JSONResponse:
        logger.error("Schedule store failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def _value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    app.include_router(tasks_router)
    app.include_router(preferences_router)
    app.include_router(schedule_router)
    app.include_router(assistant_router)

    @app.get("/health", tags=["health"])
    async def healthcheck() -> dict[str, str | None]:
        return {"status": "ok", "timezone": settings.timezone}

    return app


__all__ = ["create_app"]
