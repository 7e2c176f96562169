from __future__ import annotations

from fastapi import APIRouter, Depends

from studylog.domain.schemas import StudySession, StudySessionCreate, StudySessionUpdate
from studylog.routers.deps import get_study_service, service_errors
from studylog.services.study_service import StudyService

router = APIRouter(prefix="/api/study", tags=["study"])


@router.post("", response_model=StudySession)
def add_study_session(payload: StudySessionCreate, svc: StudyService = Depends(get_study_service)):
    with service_errors("Failed to save study session"):
        return svc.add_session(payload)


@router.get("", response_model=list[StudySession])
def list_study_sessions(svc: StudyService = Depends(get_study_service)):
    with service_errors("Failed to fetch study sessions"):
        return svc.list_sessions()


@router.get("/{session_id}", response_model=StudySession)
def get_study_session(session_id: str, svc: StudyService = Depends(get_study_service)):
    with service_errors("Failed to fetch study session"):
        return svc.get_session(session_id)


@router.put("/{session_id}", response_model=StudySession)
def update_study_session(
    session_id: str,
    payload: StudySessionUpdate,
    svc: StudyService = Depends(get_study_service),
):
    with service_errors("Failed to update study session"):
        return svc.update_session(session_id, payload)


@router.delete("/{session_id}")
def delete_study_session(session_id: str, svc: StudyService = Depends(get_study_service)):
    with service_errors("Failed to delete study session"):
        svc.delete_session(session_id)
    return {"success": True, "message": "Study session deleted successfully"}
