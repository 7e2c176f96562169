"""
JSON flat-file persistence for a single collection.

Each collection lives in its own file holding a JSON array of records. Reads
are whole-file, writes replace the whole file.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a backing file cannot be read or written."""


def ensure_data_dir(path: Path) -> bool:
    """Create the data directory; failures are logged, never raised."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Error creating data directory %s: %s", path, exc)
        return False
    return True


class JsonCollectionFile:
    """Read/write one collection file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @property
    def name(self) -> str:
        return self.path.stem

    def read(self) -> Optional[list[dict]]:
        """
        Return the stored records, or None when the file does not exist yet.

        A file that exists but cannot be parsed raises StorageError.
        """
        if not self.path.exists():
            return None
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not read {self.path}: {exc}") from exc
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise StorageError(f"{self.path} does not contain a list of records")
        return data

    def write(self, records: list[dict]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            raise StorageError(f"Could not write {self.path}: {exc}") from exc
