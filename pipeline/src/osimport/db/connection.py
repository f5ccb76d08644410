"""Database connection helpers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import psycopg

from osimport.errors import DatabaseOperationError


@contextmanager
def connect(dsn: str) -> Iterator[psycopg.Connection]:
    """Open an autocommit connection; stages scope their own transactions."""

    try:
        conn = psycopg.connect(dsn, autocommit=True)
    except psycopg.Error as exc:
        raise DatabaseOperationError(f"Could not connect to database: {exc}") from exc
    try:
        yield conn
    finally:
        conn.close()


def qualified_name(schema: str, *table_names: str) -> str:
    return ", ".join(f"{schema}.{name}" for name in table_names)


@contextmanager
def database_operation(action: str, schema: str, *table_names: str) -> Iterator[None]:
    """Re-raise driver errors as DatabaseOperationError naming the tables involved."""

    try:
        yield
    except psycopg.Error as exc:
        raise DatabaseOperationError(
            f"Error attempting to {action} {qualified_name(schema, *table_names)}: {exc}"
        ) from exc
