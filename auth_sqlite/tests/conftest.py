import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from auth_sqlite.adapter import SQLiteAdapter
from auth_sqlite.db import Database
from auth_sqlite.migrations import up


@pytest.fixture()
def tmp_db_path(tmp_path):
    return str(tmp_path / "db" / "auth_test.db")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # Never pick up a developer's config.yaml or AUTH_SQLITE_URL
    monkeypatch.delenv("AUTH_SQLITE_URL", raising=False)
    monkeypatch.setenv("AUTH_SQLITE_CONFIG", str(tmp_path / "missing-config.yaml"))


@pytest_asyncio.fixture()
async def db(tmp_db_path):
    database = Database(tmp_db_path)
    failed = await up(database)
    assert failed == 0
    return database


@pytest_asyncio.fixture()
async def adapter(db):
    return SQLiteAdapter(db)
