"""Entity store backed by SQLAlchemy, same contract as the JSON store."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studylog.db import models
from studylog.db.session import Base, get_engine, get_session
from studylog.domain.schemas import (
    Feedback,
    FeedbackCreate,
    StudySession,
    StudySessionCreate,
    StudyStats,
    Todo,
    TodoCreate,
)
from studylog.domain.stats import compute_stats

from .json_storage import StorageError
from .store import new_id, utc_timestamp


def _to_study_session(entity: models.StudySessionRecord) -> StudySession:
    return StudySession(id=entity.id, subject=entity.subject, hours=entity.hours, date=entity.date)


def _to_todo(entity: models.TodoRecord) -> Todo:
    return Todo(id=entity.id, task=entity.task, completed=bool(entity.completed))


def _to_feedback(entity: models.FeedbackRecord) -> Feedback:
    return Feedback(id=entity.id, message=entity.message, timestamp=entity.timestamp)


@contextmanager
def _session() -> Iterator[Session]:
    try:
        with get_session() as session:
            yield session
    except SQLAlchemyError as exc:
        raise StorageError(f"Database error: {exc}") from exc


class SQLEntityStore:
    """CRUD helpers wrapping the SQLAlchemy session."""

    def __init__(self) -> None:
        self._loaded = False
        self._load_lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        """Create missing tables once."""
        if self._loaded:
            return
        with self._load_lock:
            if self._loaded:
                return
            try:
                Base.metadata.create_all(bind=get_engine())
            except SQLAlchemyError as exc:
                raise StorageError(f"Database error: {exc}") from exc
            self._loaded = True

    def _all(self, model) -> list:
        self.load()
        with _session() as session:
            stmt = select(model).order_by(model.created_at)
            return session.execute(stmt).scalars().all()

    def _delete(self, model, record_id: str) -> bool:
        self.load()
        with _session() as session:
            result = session.execute(delete(model).where(model.id == record_id))
            session.commit()
            return bool(result.rowcount)

    # -------------------------- study sessions --------------------------
    def list_study_sessions(self) -> list[StudySession]:
        sessions = [_to_study_session(e) for e in self._all(models.StudySessionRecord)]
        return sorted(sessions, key=lambda s: s.calendar_date, reverse=True)

    def get_study_session(self, session_id: str) -> Optional[StudySession]:
        self.load()
        with _session() as session:
            entity = session.get(models.StudySessionRecord, session_id)
            return _to_study_session(entity) if entity else None

    def add_study_session(self, payload: StudySessionCreate) -> StudySession:
        self.load()
        entity = models.StudySessionRecord(id=new_id(), **payload.model_dump())
        with _session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return _to_study_session(entity)

    def update_study_session(self, session_id: str, fields: dict) -> Optional[StudySession]:
        self.load()
        with _session() as session:
            entity = session.get(models.StudySessionRecord, session_id)
            if not entity:
                return None
            for key, value in fields.items():
                setattr(entity, key, value)
            session.commit()
            session.refresh(entity)
            return _to_study_session(entity)

    def delete_study_session(self, session_id: str) -> bool:
        return self._delete(models.StudySessionRecord, session_id)

    def study_stats(self) -> StudyStats:
        return compute_stats(_to_study_session(e) for e in self._all(models.StudySessionRecord))

    # -------------------------- todos --------------------------
    def list_todos(self) -> list[Todo]:
        return [_to_todo(e) for e in self._all(models.TodoRecord)]

    def get_todo(self, todo_id: str) -> Optional[Todo]:
        self.load()
        with _session() as session:
            entity = session.get(models.TodoRecord, todo_id)
            return _to_todo(entity) if entity else None

    def add_todo(self, payload: TodoCreate) -> Todo:
        self.load()
        entity = models.TodoRecord(id=new_id(), **payload.model_dump())
        with _session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return _to_todo(entity)

    def update_todo(self, todo_id: str, fields: dict) -> Optional[Todo]:
        self.load()
        with _session() as session:
            entity = session.get(models.TodoRecord, todo_id)
            if not entity:
                return None
            for key, value in fields.items():
                setattr(entity, key, value)
            session.commit()
            session.refresh(entity)
            return _to_todo(entity)

    def delete_todo(self, todo_id: str) -> bool:
        return self._delete(models.TodoRecord, todo_id)

    def toggle_todo(self, todo_id: str) -> Optional[Todo]:
        self.load()
        with _session() as session:
            entity = session.get(models.TodoRecord, todo_id, with_for_update=True)
            if not entity:
                return None
            entity.completed = not entity.completed
            session.commit()
            session.refresh(entity)
            return _to_todo(entity)

    # -------------------------- feedback --------------------------
    def list_feedback(self) -> list[Feedback]:
        return [_to_feedback(e) for e in self._all(models.FeedbackRecord)]

    def add_feedback(self, payload: FeedbackCreate) -> Feedback:
        self.load()
        entity = models.FeedbackRecord(id=new_id(), timestamp=utc_timestamp(), **payload.model_dump())
        with _session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return _to_feedback(entity)
