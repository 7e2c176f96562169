from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from studylog.domain.schemas import StudyStats, SubjectHours, WeeklyHours
from studylog.routers.deps import get_study_service, service_errors
from studylog.services.study_service import StudyService

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=StudyStats)
def study_stats(svc: StudyService = Depends(get_study_service)):
    with service_errors("Failed to calculate statistics"):
        return svc.stats()


@router.get("/subjects", response_model=list[SubjectHours])
def hours_by_subject(
    limit: int = Query(10, ge=1, le=100),
    svc: StudyService = Depends(get_study_service),
):
    with service_errors("Failed to calculate statistics"):
        return svc.hours_by_subject(limit=limit)


@router.get("/weekly", response_model=list[WeeklyHours])
def weekly_progress(
    weeks: int = Query(8, ge=1, le=52),
    svc: StudyService = Depends(get_study_service),
):
    with service_errors("Failed to calculate statistics"):
        return svc.weekly_progress(weeks=weeks)
