"""One-off migration script: JSON collection files (DATA_DIR) -> SQL database (DATABASE_URL)."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

# Make the package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from studylog.core.config import get_settings
from studylog.core.logging import configure_logging
from studylog.db import models
from studylog.db.session import Base, get_engine, get_session
from studylog.repositories.store import EntityStore

logger = logging.getLogger("studylog.migrate")


def migrate(data_dir: Path | None = None) -> dict[str, int]:
    settings = get_settings()
    if not settings.database_url:
        raise SystemExit("DATABASE_URL must be set to migrate")
    source = EntityStore(data_dir or settings.data_dir)
    source.load()
    Base.metadata.create_all(bind=get_engine())

    counts = {"sessions": 0, "todos": 0, "feedback": 0}
    with get_session() as session:
        for record in source.sessions.values():
            session.merge(models.StudySessionRecord(**record.model_dump()))
            counts["sessions"] += 1
        for record in source.todos.values():
            session.merge(models.TodoRecord(**record.model_dump()))
            counts["todos"] += 1
        for record in source.feedback.values():
            session.merge(models.FeedbackRecord(**record.model_dump()))
            counts["feedback"] += 1
        session.commit()
    return counts


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    data_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    result = migrate(data_dir)
    logger.info("Migrated %(sessions)d sessions, %(todos)d todos, %(feedback)d feedback entries", result)
    print("JSON data migrated to SQL successfully.")
