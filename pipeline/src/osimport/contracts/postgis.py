"""Locked SQL templates for provisioning, loading and finalising import tables.

Identifiers are bound through ``psycopg.sql`` so schema and table names from
the command line are always quoted; values are bound as query parameters.
"""

from __future__ import annotations

from typing import Sequence

from psycopg import sql

EXISTING_TABLES_SQL = (
    "SELECT table_name "
    "FROM information_schema.tables "
    "WHERE table_schema = %s "
    "AND table_name = ANY(%s) "
    "ORDER BY table_name"
)

DESTINATION_COLUMNS_SQL = (
    "SELECT column_name "
    "FROM information_schema.columns "
    "WHERE table_schema = %s "
    "AND table_name = %s "
    "ORDER BY ordinal_position"
)

CREATE_TABLE_SQL = "CREATE TABLE {table} ({columns})"

COPY_ROWS_SQL = "COPY {table} ({columns}) FROM STDIN"

SELECT_COLUMNS_SQL = "SELECT {columns} FROM {table}"

SET_GEO_POINT_SQL = (
    "UPDATE {table} "
    "SET {geo} = ST_SetSRID(ST_MakePoint({longitude}, {latitude}), %s)::geography"
)

ADD_PRIMARY_KEY_SQL = "ALTER TABLE {table} ADD CONSTRAINT {constraint} PRIMARY KEY ({columns})"

ADD_FOREIGN_KEY_SQL = (
    "ALTER TABLE {table} ADD CONSTRAINT {constraint} "
    "FOREIGN KEY ({column}) REFERENCES {referenced_table} ({referenced_column})"
)

CREATE_SPATIAL_INDEX_SQL = "CREATE INDEX {index} ON {table} USING GIST ({geo})"


def table_ident(schema: str, table_name: str) -> sql.Identifier:
    return sql.Identifier(schema, table_name)


def column_list(names: Sequence[str]) -> sql.Composed:
    return sql.SQL(", ").join(sql.Identifier(name) for name in names)


def render_create_table(
    schema: str,
    table_name: str,
    columns: Sequence[tuple[str, str, bool]],
) -> sql.Composed:
    """Render CREATE TABLE from (name, sql_type, nullable) column triples."""

    column_defs = sql.SQL(", ").join(
        sql.SQL("{} {}{}").format(
            sql.Identifier(name),
            sql.SQL(sql_type),
            sql.SQL("") if nullable else sql.SQL(" NOT NULL"),
        )
        for name, sql_type, nullable in columns
    )
    return sql.SQL(CREATE_TABLE_SQL).format(
        table=table_ident(schema, table_name),
        columns=column_defs,
    )


def render_copy_rows(schema: str, table_name: str, columns: Sequence[str]) -> sql.Composed:
    return sql.SQL(COPY_ROWS_SQL).format(
        table=table_ident(schema, table_name),
        columns=column_list(columns),
    )


def render_select_columns(schema: str, table_name: str, columns: Sequence[str]) -> sql.Composed:
    return sql.SQL(SELECT_COLUMNS_SQL).format(
        table=table_ident(schema, table_name),
        columns=column_list(columns),
    )


def render_set_geo_point(
    schema: str,
    table_name: str,
    geo_column: str,
    longitude_column: str = "longitude",
    latitude_column: str = "latitude",
) -> sql.Composed:
    return sql.SQL(SET_GEO_POINT_SQL).format(
        table=table_ident(schema, table_name),
        geo=sql.Identifier(geo_column),
        longitude=sql.Identifier(longitude_column),
        latitude=sql.Identifier(latitude_column),
    )


def primary_key_name(table_name: str) -> str:
    return f"pk_{table_name}"


def foreign_key_name(table_name: str, referenced_table_name: str) -> str:
    return f"fk_{table_name}_{referenced_table_name}"


def spatial_index_name(table_name: str, geo_column: str) -> str:
    return f"ix_{table_name}_{geo_column}"


def render_add_primary_key(schema: str, table_name: str, columns: Sequence[str]) -> sql.Composed:
    return sql.SQL(ADD_PRIMARY_KEY_SQL).format(
        table=table_ident(schema, table_name),
        constraint=sql.Identifier(primary_key_name(table_name)),
        columns=column_list(columns),
    )


def render_add_foreign_key(
    schema: str,
    table_name: str,
    column: str,
    referenced_table_name: str,
    referenced_column: str,
) -> sql.Composed:
    return sql.SQL(ADD_FOREIGN_KEY_SQL).format(
        table=table_ident(schema, table_name),
        constraint=sql.Identifier(foreign_key_name(table_name, referenced_table_name)),
        column=sql.Identifier(column),
        referenced_table=table_ident(schema, referenced_table_name),
        referenced_column=sql.Identifier(referenced_column),
    )


def render_create_spatial_index(schema: str, table_name: str, geo_column: str) -> sql.Composed:
    return sql.SQL(CREATE_SPATIAL_INDEX_SQL).format(
        index=sql.Identifier(spatial_index_name(table_name, geo_column)),
        table=table_ident(schema, table_name),
        geo=sql.Identifier(geo_column),
    )
