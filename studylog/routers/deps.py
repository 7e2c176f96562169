"""Request-scoped accessors for the services stored on app.state."""
from __future__ import annotations

import logging
from contextlib import contextmanager

from fastapi import HTTPException, Request

from studylog.repositories import StorageError
from studylog.services.errors import InvalidRequestError, RecordNotFoundError
from studylog.services.feedback_service import FeedbackService
from studylog.services.report_service import ReportService
from studylog.services.study_service import StudyService
from studylog.services.todo_service import TodoService

logger = logging.getLogger("studylog.api")


def _state_attr(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if svc is None:
        raise RuntimeError(f"{name} not configured")
    return svc


def get_study_service(request: Request) -> StudyService:
    return _state_attr(request, "study_service")


def get_todo_service(request: Request) -> TodoService:
    return _state_attr(request, "todo_service")


def get_feedback_service(request: Request) -> FeedbackService:
    return _state_attr(request, "feedback_service")


def get_report_service(request: Request) -> ReportService:
    return _state_attr(request, "report_service")


@contextmanager
def service_errors(failure_message: str):
    """Map service/storage exceptions raised inside the block to HTTP errors."""
    try:
        yield
    except RecordNotFoundError as exc:
        raise HTTPException(404, exc.message) from exc
    except InvalidRequestError as exc:
        raise HTTPException(400, exc.message) from exc
    except StorageError as exc:
        logger.error("%s: %s", failure_message, exc, exc_info=True)
        raise HTTPException(500, failure_message) from exc
