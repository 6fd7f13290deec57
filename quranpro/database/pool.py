"""
Bounded connection pool with an explicit lifecycle.

One pool is created per process at startup, handed to the DatabaseManager,
and drained on shutdown. Callers wait for a free slot instead of being
rejected when every connection is in use.
"""
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Any, Dict, Optional

import psycopg2
from psycopg2 import Error as PostgreSQLError
from psycopg2.pool import ThreadedConnectionPool

from quranpro.config.settings import settings
from quranpro.config.logger import logger


class DatabaseError(Exception):
    """Storage-layer failure (driver errors are wrapped into this)"""


class IntegrityViolation(DatabaseError):
    """Unique or foreign-key constraint violated"""


class ConnectionPool:
    """PostgreSQL (psycopg2) or SQLite connection pool"""

    def __init__(
        self,
        max_size: int = None,
        timeout: Optional[float] = None,
        db_path: str = None,
        postgres_config: Optional[Dict[str, Any]] = None,
    ):
        self.max_size = max_size or settings.DB_POOL_SIZE
        self.timeout = timeout or None
        self.postgres_config = postgres_config
        self.is_postgres = postgres_config is not None
        self.db_path = db_path or settings.DATABASE_NAME

        self._slots = threading.BoundedSemaphore(self.max_size)
        self._pg_pool: Optional[ThreadedConnectionPool] = None
        self._opened = False

    @classmethod
    def from_settings(cls) -> "ConnectionPool":
        """Build the pool described by the environment"""
        if settings.USE_RDS:
            return cls(
                max_size=settings.DB_POOL_SIZE,
                timeout=settings.DB_POOL_TIMEOUT,
                postgres_config={
                    "host": settings.DB_HOST,
                    "port": settings.DB_PORT,
                    "dbname": settings.DB_NAME,
                    "user": settings.DB_USER,
                    "password": settings.DB_PASSWORD,
                    "sslmode": settings.DB_SSLMODE,
                    "connect_timeout": 30,
                },
            )
        return cls(
            max_size=settings.DB_POOL_SIZE,
            timeout=settings.DB_POOL_TIMEOUT,
            db_path=settings.DATABASE_NAME,
        )

    @property
    def is_open(self) -> bool:
        return self._opened

    def open(self):
        """Create the underlying pool and check that the database answers"""
        if self._opened:
            return

        if self.is_postgres:
            try:
                self._pg_pool = ThreadedConnectionPool(minconn=1, maxconn=self.max_size, **self.postgres_config)
            except PostgreSQLError as e:
                raise DatabaseError(f"Failed to connect to PostgreSQL: {e}") from e
        else:
            directory = os.path.dirname(os.path.abspath(self.db_path))
            os.makedirs(directory, exist_ok=True)

        self._opened = True
        try:
            self.ping()
        except DatabaseError:
            self.close()
            raise

        logger.info("db_pool_initialized", extra={
            "backend": "postgresql" if self.is_postgres else "sqlite",
            "max_size": self.max_size,
        })

    def ping(self) -> bool:
        with self.connection() as conn:
            cur = conn.cursor()
            cur.execute("SELECT 1")
            cur.fetchone()
        return True

    def _connect(self):
        if self.is_postgres:
            return self._pg_pool.getconn()

        conn = sqlite3.connect(self.db_path, timeout=30, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        # SQLite leaves foreign keys (and so ON DELETE CASCADE) off per connection
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _release(self, conn):
        try:
            if self.is_postgres and self._pg_pool is not None:
                self._pg_pool.putconn(conn, close=bool(conn.closed))
            else:
                conn.close()
        except Exception as e:
            logger.warning("db_release_failed", extra={"error": str(e)})

    @contextmanager
    def connection(self):
        """Scoped connection: commit on success, rollback on error, always returned"""
        if not self._opened:
            raise DatabaseError("Connection pool is not open")

        if not self._slots.acquire(timeout=self.timeout):
            raise DatabaseError("Timed out waiting for a database connection")

        conn = None
        try:
            try:
                conn = self._connect()
            except (sqlite3.Error, PostgreSQLError) as e:
                raise DatabaseError(f"Unable to obtain a database connection: {e}") from e

            try:
                yield conn
                conn.commit()
            except (sqlite3.IntegrityError, psycopg2.IntegrityError) as e:
                conn.rollback()
                raise IntegrityViolation(str(e)) from e
            except (sqlite3.Error, PostgreSQLError, OverflowError) as e:
                # sqlite3 raises OverflowError for integers beyond 64 bits
                conn.rollback()
                raise DatabaseError(str(e)) from e
            except Exception:
                conn.rollback()
                raise
        finally:
            if conn is not None:
                self._release(conn)
            self._slots.release()

    def close(self):
        """Drain the pool; safe to call more than once"""
        if self._pg_pool is not None:
            try:
                self._pg_pool.closeall()
            finally:
                self._pg_pool = None
        if self._opened:
            logger.info("db_pool_closed")
        self._opened = False
