from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from studylog import __version__
from studylog.core.config import Settings, get_settings
from studylog.core.logging import configure_logging
from studylog.core.rate_limiter import RateLimiter
from studylog.repositories import StorageError, build_store
from studylog.routers import feedback as feedback_router
from studylog.routers import report as report_router
from studylog.routers import stats as stats_router
from studylog.routers import study as study_router
from studylog.routers import todo as todo_router
from studylog.services.feedback_service import FeedbackService
from studylog.services.report_service import ReportService
from studylog.services.study_service import StudyService
from studylog.services.todo_service import TodoService

logger = logging.getLogger("studylog.app")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, sniffing, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": _validation_message(exc)}, status_code=400)

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse({"error": "Internal storage error"}, status_code=500)


def _allowed_origins(settings: Settings) -> list[str]:
    allowed = {settings.public_base_url}
    if settings.app_env != "prod":
        allowed.update(
            {
                "http://localhost:8000",
                "http://127.0.0.1:8000",
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            }
        )
    return sorted(origin for origin in allowed if origin)


def create_app(store=None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API around an explicit store.

    Without arguments the store is chosen from the environment (JSON files in
    DATA_DIR, or SQL when DATABASE_URL is set). Compatible with
    ``uvicorn studylog.app:create_app --factory``.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    store = store if store is not None else build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Study tracker v%s starting up (%s storage)", __version__, settings.storage_backend)
        await run_in_threadpool(store.load)
        yield
        logger.info("Study tracker shutting down...")

    app = FastAPI(title="Study Tracker API", version=__version__, lifespan=lifespan)

    study_service = StudyService(store)
    app.state.settings = settings
    app.state.store = store
    app.state.rate_limiter = RateLimiter()
    app.state.study_service = study_service
    app.state.todo_service = TodoService(store)
    app.state.feedback_service = FeedbackService(store)
    app.state.report_service = ReportService(study_service)

    origins = _allowed_origins(settings)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    _install_error_handlers(app)

    app.include_router(study_router.router)
    app.include_router(stats_router.router)
    app.include_router(todo_router.router)
    app.include_router(feedback_router.router)
    app.include_router(report_router.router)

    @app.get("/api/health")
    def health():
        return {"status": "ok", "version": __version__, "storage": settings.storage_backend}

    return app
