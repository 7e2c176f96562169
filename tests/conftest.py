from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from studylog.app import create_app  # noqa: E402
from studylog.core.config import Settings  # noqa: E402
from studylog.repositories.store import EntityStore  # noqa: E402


def make_settings(data_dir: Path, **overrides) -> Settings:
    base = Settings(
        app_env="test",
        data_dir=data_dir,
        database_url="",
        log_level="INFO",
        public_base_url="http://testserver",
        feedback_rate_limit=100,
        feedback_rate_window_seconds=60,
    )
    return dataclasses.replace(base, **overrides)


@pytest.fixture()
def data_dir(tmp_path) -> Path:
    return tmp_path / "data"


@pytest.fixture()
def store(data_dir) -> EntityStore:
    return EntityStore(data_dir)


@pytest.fixture()
def settings(data_dir) -> Settings:
    return make_settings(data_dir)


@pytest.fixture()
def client(store, settings):
    app = create_app(store=store, settings=settings)
    with TestClient(app) as test_client:
        yield test_client
