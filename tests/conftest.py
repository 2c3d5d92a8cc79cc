from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from fastapi.testclient import TestClient  # noqa: E402

from secretsanta.core.settings import Settings  # noqa: E402
from secretsanta.features.rooms import RoomService, RoomStore  # noqa: E402
from secretsanta.web.app import create_app  # noqa: E402


@pytest.fixture()
def service() -> RoomService:
    return RoomService(RoomStore(lock_timeout=2.0))


@pytest.fixture()
def client(service: RoomService) -> TestClient:
    settings = Settings(cors_origins=("http://localhost:3000",))
    return TestClient(create_app(settings, service))
