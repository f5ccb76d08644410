"""Bulk loading of staged tables."""

from __future__ import annotations

import psycopg

from osimport.contracts.postgis import DESTINATION_COLUMNS_SQL, render_copy_rows
from osimport.db.connection import database_operation
from osimport.errors import SchemaMismatchError
from osimport.progress import ProgressCallback, ProgressEvent, discard_progress
from osimport.transform import StagedTable


def destination_columns(conn: psycopg.Connection, schema: str, table_name: str) -> tuple[str, ...]:
    with conn.cursor() as cur:
        cur.execute(DESTINATION_COLUMNS_SQL, (schema, table_name))
        return tuple(str(row[0]) for row in cur.fetchall())


def load(
    conn: psycopg.Connection,
    staged: StagedTable,
    schema: str,
    table_name: str,
    progress: ProgressCallback = discard_progress,
) -> int:
    """COPY every staged row into ``schema.table_name`` in one transaction.

    Columns are mapped by exact name. Returns the number of rows written.
    """

    progress(ProgressEvent("load", f"Bulk loading the data into {schema}.{table_name}"))
    with database_operation("bulk load data into", schema, table_name):
        with conn.transaction():
            available = destination_columns(conn, schema, table_name)
            if not available:
                raise SchemaMismatchError(f"Destination table {schema}.{table_name} has no columns")
            missing = [column for column in staged.columns if column not in available]
            if missing:
                raise SchemaMismatchError(
                    f"Destination table {schema}.{table_name} has no column(s) "
                    f"matching staged column(s): {', '.join(missing)}"
                )

            with conn.cursor() as cur:
                with cur.copy(render_copy_rows(schema, table_name, staged.columns)) as copy:
                    for row in staged.rows:
                        copy.write_row(row)

    progress(ProgressEvent("load", f"Rows inserted into {schema}.{table_name}", {"rows": len(staged)}))
    return len(staged)
