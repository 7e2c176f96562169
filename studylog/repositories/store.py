"""
In-memory entity store backed by JSON collection files.

The store owns the authoritative state of the three collections. Files are
read once (explicitly through ``load()`` or lazily on first access) and every
mutation rewrites the affected collection before returning.
"""
from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

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

from .json_storage import JsonCollectionFile, StorageError, ensure_data_dir

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

SESSIONS_FILE = "sessions.json"
TODOS_FILE = "todos.json"
FEEDBACK_FILE = "feedback.json"


def new_id() -> str:
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """Current instant as ISO-8601 UTC with millisecond precision (``...Z``)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RecordCollection(Generic[T]):
    """id -> record map for one collection, plus its backing file."""

    def __init__(self, file: JsonCollectionFile, model: type[T]) -> None:
        self.file = file
        self.model = model
        self.lock = threading.RLock()
        self.persistent = True
        self._records: dict[str, T] = {}

    @property
    def name(self) -> str:
        return self.file.name

    def load(self) -> None:
        raw = self.file.read()
        if raw is None:
            logger.info("No existing %s file, starting fresh", self.name)
            self._records = {}
            return
        try:
            records = [self.model.model_validate(item) for item in raw]
        except ValidationError as exc:
            raise StorageError(f"Invalid record in {self.file.path}: {exc}") from exc
        self._records = {record.id: record for record in records}
        logger.info("Loaded %d %s record(s)", len(records), self.name)

    def values(self) -> list[T]:
        with self.lock:
            return list(self._records.values())

    def get(self, record_id: str) -> Optional[T]:
        return self._records.get(record_id)

    def put(self, record: T) -> None:
        self._records[record.id] = record

    def pop(self, record_id: str) -> Optional[T]:
        return self._records.pop(record_id, None)

    def save(self) -> None:
        if not self.persistent:
            logger.warning("Data directory unavailable; %s kept in memory only", self.name)
            return
        self.file.write([record.model_dump() for record in self._records.values()])


class EntityStore:
    """Sessions, todos and feedback kept in memory and written through to disk."""

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)
        self.sessions: RecordCollection[StudySession] = RecordCollection(
            JsonCollectionFile(self.data_dir / SESSIONS_FILE), StudySession
        )
        self.todos: RecordCollection[Todo] = RecordCollection(JsonCollectionFile(self.data_dir / TODOS_FILE), Todo)
        self.feedback: RecordCollection[Feedback] = RecordCollection(
            JsonCollectionFile(self.data_dir / FEEDBACK_FILE), Feedback
        )
        self._loaded = False
        self._load_lock = threading.Lock()

    # -------------------------- lifecycle --------------------------
    @property
    def loaded(self) -> bool:
        return self._loaded

    def _collections(self) -> tuple[RecordCollection, ...]:
        return (self.sessions, self.todos, self.feedback)

    def load(self) -> None:
        """Read every collection file once; later calls are no-ops."""
        if self._loaded:
            return
        with self._load_lock:
            if self._loaded:
                return
            persistent = ensure_data_dir(self.data_dir)
            for collection in self._collections():
                collection.persistent = persistent
                with collection.lock:
                    collection.load()
            self._loaded = True

    # -------------------------- generic helpers --------------------------
    def _insert(self, collection: RecordCollection[T], record: T) -> T:
        self.load()
        with collection.lock:
            collection.put(record)
            collection.save()
        return record

    def _update(self, collection: RecordCollection[T], record_id: str, fields: dict) -> Optional[T]:
        self.load()
        with collection.lock:
            current = collection.get(record_id)
            if current is None:
                return None
            merged = current.model_copy(update=fields)
            collection.put(merged)
            collection.save()
            return merged

    def _delete(self, collection: RecordCollection, record_id: str) -> bool:
        self.load()
        with collection.lock:
            if collection.pop(record_id) is None:
                return False
            collection.save()
            return True

    def _get(self, collection: RecordCollection[T], record_id: str) -> Optional[T]:
        self.load()
        with collection.lock:
            return collection.get(record_id)

    # -------------------------- study sessions --------------------------
    def list_study_sessions(self) -> list[StudySession]:
        """All sessions, most recent date first."""
        self.load()
        return sorted(self.sessions.values(), key=lambda s: s.calendar_date, reverse=True)

    def get_study_session(self, session_id: str) -> Optional[StudySession]:
        return self._get(self.sessions, session_id)

    def add_study_session(self, payload: StudySessionCreate) -> StudySession:
        return self._insert(self.sessions, StudySession(id=new_id(), **payload.model_dump()))

    def update_study_session(self, session_id: str, fields: dict) -> Optional[StudySession]:
        return self._update(self.sessions, session_id, fields)

    def delete_study_session(self, session_id: str) -> bool:
        return self._delete(self.sessions, session_id)

    def study_stats(self) -> StudyStats:
        self.load()
        return compute_stats(self.sessions.values())

    # -------------------------- todos --------------------------
    def list_todos(self) -> list[Todo]:
        self.load()
        return self.todos.values()

    def get_todo(self, todo_id: str) -> Optional[Todo]:
        return self._get(self.todos, todo_id)

    def add_todo(self, payload: TodoCreate) -> Todo:
        return self._insert(self.todos, Todo(id=new_id(), **payload.model_dump()))

    def update_todo(self, todo_id: str, fields: dict) -> Optional[Todo]:
        return self._update(self.todos, todo_id, fields)

    def delete_todo(self, todo_id: str) -> bool:
        return self._delete(self.todos, todo_id)

    def toggle_todo(self, todo_id: str) -> Optional[Todo]:
        self.load()
        with self.todos.lock:
            current = self.todos.get(todo_id)
            if current is None:
                return None
            return self._update(self.todos, todo_id, {"completed": not current.completed})

    # -------------------------- feedback --------------------------
    def list_feedback(self) -> list[Feedback]:
        self.load()
        return self.feedback.values()

    def add_feedback(self, payload: FeedbackCreate) -> Feedback:
        record = Feedback(id=new_id(), timestamp=utc_timestamp(), **payload.model_dump())
        return self._insert(self.feedback, record)
