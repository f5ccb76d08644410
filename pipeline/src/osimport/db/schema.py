"""Table provisioning and post-load finalisation."""

from __future__ import annotations

from typing import Sequence

import psycopg

from osimport.config import WGS84_SRID
from osimport.contracts.postgis import (
    EXISTING_TABLES_SQL,
    render_add_foreign_key,
    render_add_primary_key,
    render_create_spatial_index,
    render_create_table,
    render_set_geo_point,
)
from osimport.db.connection import database_operation
from osimport.db.tables import ForeignKey, TableDefinition
from osimport.errors import ConfigurationError, TableAlreadyExistsError
from osimport.progress import ProgressCallback, ProgressEvent, discard_progress


def existing_tables(conn: psycopg.Connection, schema: str, table_names: Sequence[str]) -> list[str]:
    with conn.cursor() as cur:
        cur.execute(EXISTING_TABLES_SQL, (schema, list(table_names)))
        return [str(row[0]) for row in cur.fetchall()]


def provision(
    conn: psycopg.Connection,
    schema: str,
    tables: Sequence[TableDefinition],
    progress: ProgressCallback = discard_progress,
) -> None:
    """Create every table in ``tables``, or none of them if any already exists."""

    table_names = [table.name for table in tables]
    if len(set(table_names)) != len(table_names):
        raise ConfigurationError(f"Target table names must be distinct: {', '.join(table_names)}")

    progress(ProgressEvent("provision", f"Creating tables in schema {schema}: {', '.join(table_names)}"))
    with database_operation("create tables to load data into", schema, *table_names):
        with conn.transaction():
            conflicts = existing_tables(conn, schema, table_names)
            if conflicts:
                raise TableAlreadyExistsError(schema, conflicts)
            with conn.cursor() as cur:
                for table in tables:
                    cur.execute(
                        render_create_table(
                            schema,
                            table.name,
                            [(column.name, column.sql_type, column.nullable) for column in table.columns],
                        )
                    )
    progress(ProgressEvent("provision", "Tables created", {"tables": len(tables)}))


def _execute_step(
    conn: psycopg.Connection,
    action: str,
    schema: str,
    table_names: Sequence[str],
    statement: object,
    params: tuple | None = None,
) -> int:
    with database_operation(action, schema, *table_names):
        with conn.transaction():
            with conn.cursor() as cur:
                cur.execute(statement, params)
                return cur.rowcount


def set_geo_column(conn: psycopg.Connection, schema: str, table: TableDefinition) -> int:
    if table.geo_column is None:
        raise ConfigurationError(f"Table {table.name} has no geography column")
    return _execute_step(
        conn,
        "set geography points on",
        schema,
        [table.name],
        render_set_geo_point(schema, table.name, table.geo_column),
        (WGS84_SRID,),
    )


def add_primary_key(conn: psycopg.Connection, schema: str, table: TableDefinition) -> None:
    _execute_step(
        conn,
        "add primary key on",
        schema,
        [table.name],
        render_add_primary_key(schema, table.name, table.primary_key),
    )


def add_foreign_key(conn: psycopg.Connection, schema: str, foreign_key: ForeignKey) -> None:
    _execute_step(
        conn,
        "add foreign key between",
        schema,
        [foreign_key.table.name, foreign_key.references.name],
        render_add_foreign_key(
            schema,
            foreign_key.table.name,
            foreign_key.column,
            foreign_key.references.name,
            foreign_key.referenced_column,
        ),
    )


def create_spatial_index(conn: psycopg.Connection, schema: str, table: TableDefinition) -> None:
    if table.geo_column is None:
        raise ConfigurationError(f"Table {table.name} has no geography column")
    _execute_step(
        conn,
        "create spatial index on",
        schema,
        [table.name],
        render_create_spatial_index(schema, table.name, table.geo_column),
    )


def finalize(
    conn: psycopg.Connection,
    schema: str,
    primary: TableDefinition,
    lookups: Sequence[TableDefinition] = (),
    foreign_keys: Sequence[ForeignKey] = (),
    progress: ProgressCallback = discard_progress,
) -> None:
    """Run the post-load steps in order.

    Each step commits on its own. A failure leaves earlier steps in place and
    the table must be repaired or dropped by hand.
    """

    progress(ProgressEvent("finalize", f"Setting {primary.geo_column} from longitude/latitude on {primary.name}"))
    updated = set_geo_column(conn, schema, primary)
    progress(ProgressEvent("finalize", "Geography points set", {"rows": updated}))

    for table in (primary, *lookups):
        progress(ProgressEvent("finalize", f"Setting PRIMARY KEY on {table.name}"))
        add_primary_key(conn, schema, table)

    for foreign_key in foreign_keys:
        progress(
            ProgressEvent(
                "finalize",
                f"Setting FOREIGN KEY from {foreign_key.table.name} to {foreign_key.references.name}",
            )
        )
        add_foreign_key(conn, schema, foreign_key)

    progress(ProgressEvent("finalize", f"Creating spatial index on {primary.name}"))
    create_spatial_index(conn, schema, primary)
