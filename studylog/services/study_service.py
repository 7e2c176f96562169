"""Study session use cases and derived statistics."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from studylog.domain import stats
from studylog.domain.schemas import (
    StudySession,
    StudySessionCreate,
    StudySessionUpdate,
    StudyStats,
    SubjectHours,
    WeeklyHours,
    partial_fields,
)
from studylog.services.errors import RecordNotFoundError

NOT_FOUND_MESSAGE = "Study session not found"


class StudyService:
    """Logs, edits and summarises study sessions."""

    def __init__(self, store) -> None:
        self.store = store

    def list_sessions(
        self,
        start: Optional[dt.date] = None,
        end: Optional[dt.date] = None,
    ) -> list[StudySession]:
        sessions = self.store.list_study_sessions()
        if start or end:
            sessions = stats.filter_by_date_range(sessions, start, end)
        return sessions

    def get_session(self, session_id: str) -> StudySession:
        session = self.store.get_study_session(session_id)
        if session is None:
            raise RecordNotFoundError(NOT_FOUND_MESSAGE)
        return session

    def add_session(self, payload: StudySessionCreate) -> StudySession:
        return self.store.add_study_session(payload)

    def update_session(self, session_id: str, payload: StudySessionUpdate) -> StudySession:
        session = self.store.update_study_session(session_id, partial_fields(payload))
        if session is None:
            raise RecordNotFoundError(NOT_FOUND_MESSAGE)
        return session

    def delete_session(self, session_id: str) -> None:
        if not self.store.delete_study_session(session_id):
            raise RecordNotFoundError(NOT_FOUND_MESSAGE)

    def stats(self) -> StudyStats:
        return self.store.study_stats()

    def hours_by_subject(self, limit: int = 10) -> list[SubjectHours]:
        return stats.hours_by_subject(self.store.list_study_sessions(), limit=limit)

    def weekly_progress(self, weeks: int = 8, today: Optional[dt.date] = None) -> list[WeeklyHours]:
        return stats.weekly_progress(self.store.list_study_sessions(), weeks=weeks, today=today)
