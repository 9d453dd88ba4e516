from __future__ import annotations

import sqlite3
from collections.abc import Generator, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

from querykit import BuilderConfig, Connection, QueryFactory
from querykit.protocols import ExecutorProtocol

here = Path(__file__).parent
root_path = here.parent

SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT UNIQUE NOT NULL,
    age INTEGER,
    country TEXT,
    status TEXT DEFAULT 'active',
    deleted_at TEXT
);
CREATE TABLE posts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER,
    title TEXT NOT NULL,
    views INTEGER DEFAULT 0,
    FOREIGN KEY (user_id) REFERENCES users(id)
);
"""


class SQLiteExecutor:
    """Executor over an in-memory sqlite3 database, used by the integration tests."""

    def __init__(self, database: str = ":memory:") -> None:
        self.connection = sqlite3.connect(database, isolation_level=None)
        self.connection.row_factory = sqlite3.Row
        self._cursor: sqlite3.Cursor | None = None

    def execute(self, sql: str, bindings: Sequence[Any]) -> list[dict[str, Any]]:
        self._cursor = self.connection.execute(sql, tuple(bindings))
        if self._cursor.description is None:
            return []
        return [dict(row) for row in self._cursor.fetchall()]

    def last_insert_id(self) -> Any:
        return self._cursor.lastrowid if self._cursor is not None else None

    def affected_rows(self) -> int:
        return self._cursor.rowcount if self._cursor is not None else 0

    def begin_transaction(self) -> None:
        self.connection.execute("BEGIN")

    def commit(self) -> None:
        self.connection.execute("COMMIT")

    def rollback(self) -> None:
        self.connection.execute("ROLLBACK")

    def close(self) -> None:
        self.connection.close()


@pytest.fixture
def sql() -> QueryFactory:
    return QueryFactory(BuilderConfig())


@pytest.fixture
def mock_executor() -> Mock:
    executor = Mock(spec=ExecutorProtocol)
    executor.execute.return_value = []
    executor.last_insert_id.return_value = 1
    executor.affected_rows.return_value = 0
    return executor


@pytest.fixture
def sqlite_executor() -> Generator[SQLiteExecutor, None, None]:
    executor = SQLiteExecutor()
    executor.connection.executescript(SCHEMA)
    yield executor
    executor.close()


@pytest.fixture
def db(sqlite_executor: SQLiteExecutor) -> Connection:
    return Connection(sqlite_executor)
