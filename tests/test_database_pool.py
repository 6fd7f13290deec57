import threading

import pytest

from quranpro.database import ConnectionPool, DatabaseError, DatabaseManager, IntegrityViolation


def test_connection_requires_open_pool(tmp_path):
    pool = ConnectionPool(max_size=1, db_path=str(tmp_path / "closed.db"))

    with pytest.raises(DatabaseError):
        with pool.connection():
            pass


def test_open_creates_directory_and_pings(tmp_path):
    db_path = tmp_path / "nested" / "dir" / "app.db"
    pool = ConnectionPool(max_size=2, db_path=str(db_path))

    pool.open()
    try:
        assert pool.is_open
        assert pool.ping() is True
        assert db_path.exists()
    finally:
        pool.close()

    assert not pool.is_open
    pool.close()


def test_exhausted_pool_times_out_waiting(tmp_path):
    pool = ConnectionPool(max_size=1, timeout=0.1, db_path=str(tmp_path / "busy.db"))
    pool.open()
    errors = []

    def second_caller():
        try:
            with pool.connection():
                pass
        except DatabaseError as e:
            errors.append(str(e))

    try:
        with pool.connection():
            worker = threading.Thread(target=second_caller)
            worker.start()
            worker.join()
    finally:
        pool.close()

    assert errors == ["Timed out waiting for a database connection"]


def test_exhausted_pool_queues_until_release(tmp_path):
    pool = ConnectionPool(max_size=1, db_path=str(tmp_path / "queue.db"))
    pool.open()
    acquired = threading.Event()

    def second_caller():
        with pool.connection():
            acquired.set()

    try:
        with pool.connection():
            worker = threading.Thread(target=second_caller)
            worker.start()
            assert not acquired.wait(0.2)
        worker.join(timeout=5)
    finally:
        pool.close()

    assert acquired.is_set()


def test_driver_errors_are_wrapped_and_rolled_back(db):
    with pytest.raises(DatabaseError):
        db._execute("SELECT * FROM missing_table")

    db.create_user(user_id="u-1", email="one@example.com", name="One")
    with pytest.raises(IntegrityViolation):
        db.create_user(user_id="u-2", email="one@example.com", name="Duplicate")

    assert db.get_user_by_id("u-2") is None


def test_oversized_integer_parameter_is_wrapped(db):
    with pytest.raises(DatabaseError):
        db.get_conversation(10 ** 20)


def test_init_database_is_idempotent(db):
    db.init_database()
    db.init_database()

    assert db.ping() is True


def test_manager_open_initialises_schema(tmp_path):
    manager = DatabaseManager(ConnectionPool(max_size=2, db_path=str(tmp_path / "fresh.db")))
    manager.open()
    try:
        user = manager.create_user(user_id="u-1", email="fresh@example.com", name="Fresh")
        assert user.messages_used == 0
        assert user.messages_quota == 1000
    finally:
        manager.close()
