import itertools
import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Settings are read at import time
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id.apps.googleusercontent.com"
os.environ["FRONTEND_URL"] = "http://localhost:5173"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["ENVIRONMENT"] = "test"
for name in ("DB_HOST", "DB_NAME", "DB_USER", "DB_PASSWORD"):
    os.environ.pop(name, None)

from fastapi.testclient import TestClient

from quranpro.auth.service import AuthService
from quranpro.database import ConnectionPool, DatabaseManager


class FakeCompletionClient:
    """Records every call and answers with a canned reply"""

    def __init__(self, reply="Peace be upon you.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, history, user_message):
        self.calls.append({"history": list(history), "message": user_message})
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def pool(tmp_path):
    pool = ConnectionPool(max_size=5, db_path=str(tmp_path / "quranpro-test.db"))
    pool.open()
    yield pool
    pool.close()


@pytest.fixture
def db(pool):
    manager = DatabaseManager(pool)
    manager.init_database()
    return manager


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(email=None, role="user", quota=None, used=0):
        n = next(counter)
        user = db.create_user(
            user_id=f"user-{n}",
            email=email or f"reader{n}@example.com",
            name=f"Reader {n}",
            google_id=f"google-sub-{n}",
            role=role,
            messages_quota=quota,
        )
        if used:
            db._execute("UPDATE users SET messages_used = ? WHERE id = ?", (used, user.id))
        return db.get_user_by_id(user.id)

    return _make


@pytest.fixture
def completion():
    return FakeCompletionClient()


@pytest.fixture
def app(db, completion):
    from app import create_app
    return create_app(database=db, completion_client=completion)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(db):
    service = AuthService(db)

    def _headers(user):
        return {"Authorization": f"Bearer {service.generate_token(user.id, user.email)}"}

    return _headers


@pytest.fixture
def count_rows(db):
    def _count(table, **where):
        query = f"SELECT COUNT(*) AS n FROM {table}"
        if where:
            query += " WHERE " + " AND ".join(f"{column} = ?" for column in where)
        return db._fetch_one(query, tuple(where.values()))["n"]

    return _count
