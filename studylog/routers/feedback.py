from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from studylog.core.rate_limiter import rate_limit_ip
from studylog.domain.schemas import Feedback, FeedbackCreate
from studylog.routers.deps import get_feedback_service, service_errors
from studylog.services.feedback_service import FeedbackService

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


@router.post("", response_model=Feedback)
def submit_feedback(
    payload: FeedbackCreate,
    request: Request,
    svc: FeedbackService = Depends(get_feedback_service),
):
    settings = request.app.state.settings
    rate_limit_ip(
        request,
        "feedback:submit",
        limit=settings.feedback_rate_limit,
        window_seconds=settings.feedback_rate_window_seconds,
    )
    with service_errors("Failed to save feedback"):
        return svc.submit(payload)


@router.get("", response_model=list[Feedback])
def list_feedback(svc: FeedbackService = Depends(get_feedback_service)):
    with service_errors("Failed to fetch feedback"):
        return svc.list_feedback()
