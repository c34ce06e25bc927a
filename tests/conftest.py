import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vlanmgr.dao.memory import InMemoryConfigStore
from vlanmgr.dependencies.auth import get_current_user
from vlanmgr.dependencies.store import get_config_store
from vlanmgr.main import app


class RecordingStore(InMemoryConfigStore):
    """In-memory store that remembers every write, in order."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, str, str]] = []

    def create_entry(self, table, key, fields):
        self.calls.append(("create", table, key))
        super().create_entry(table, key, fields)

    def mod_entry(self, table, key, fields):
        self.calls.append(("mod", table, key))
        super().mod_entry(table, key, fields)

    def delete_entry(self, table, key):
        self.calls.append(("delete", table, key))
        super().delete_entry(table, key)


@pytest.fixture()
def store():
    return RecordingStore()


@pytest.fixture()
def client(store):
    app.dependency_overrides[get_current_user] = lambda: "test-user"
    app.dependency_overrides[get_config_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
