from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.app import create_app
from portrait_stage.storage import Storage


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A fresh session data directory per test."""
    return tmp_path / "data"


@pytest.fixture
def storage(data_dir: Path) -> Storage:
    return Storage(data_dir)


@pytest.fixture
def client(data_dir: Path) -> TestClient:
    return TestClient(create_app(data_dir))
