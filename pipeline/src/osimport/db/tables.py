"""Destination table definitions for both datasets."""

from __future__ import annotations

from dataclasses import dataclass

from osimport.config import WGS84_SRID

GEO_COLUMN = "geo_location"
GEO_COLUMN_TYPE = f"geography(Point, {WGS84_SRID})"


@dataclass(frozen=True)
class ColumnDefinition:
    name: str
    sql_type: str
    nullable: bool = True


@dataclass(frozen=True)
class TableDefinition:
    name: str
    columns: tuple[ColumnDefinition, ...]
    primary_key: tuple[str, ...]
    geo_column: str | None = None

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)


@dataclass(frozen=True)
class ForeignKey:
    table: TableDefinition
    column: str
    references: TableDefinition
    referenced_column: str


def _coordinate_columns() -> tuple[ColumnDefinition, ...]:
    return (
        ColumnDefinition("longitude", "double precision"),
        ColumnDefinition("latitude", "double precision"),
        ColumnDefinition(GEO_COLUMN, GEO_COLUMN_TYPE),
    )


def codepoint_table(name: str) -> TableDefinition:
    return TableDefinition(
        name=name,
        columns=(
            ColumnDefinition("outward_code", "varchar(4)", nullable=False),
            ColumnDefinition("inward_code", "varchar(3)", nullable=False),
            *_coordinate_columns(),
        ),
        primary_key=("outward_code", "inward_code"),
        geo_column=GEO_COLUMN,
    )


def gazetteer_point_table(name: str) -> TableDefinition:
    return TableDefinition(
        name=name,
        columns=(
            ColumnDefinition("seq_no", "integer", nullable=False),
            ColumnDefinition("place_name", "varchar(60)", nullable=False),
            ColumnDefinition("county_code", "char(2)", nullable=False),
            ColumnDefinition("feature_code", "varchar(3)", nullable=False),
            *_coordinate_columns(),
        ),
        primary_key=("seq_no",),
        geo_column=GEO_COLUMN,
    )


def county_lookup_table(name: str) -> TableDefinition:
    return TableDefinition(
        name=name,
        columns=(
            ColumnDefinition("code", "char(2)", nullable=False),
            ColumnDefinition("name", "varchar(60)", nullable=False),
        ),
        primary_key=("code",),
    )


def feature_lookup_table(name: str) -> TableDefinition:
    return TableDefinition(
        name=name,
        columns=(
            ColumnDefinition("code", "varchar(3)", nullable=False),
            ColumnDefinition("description", "varchar(50)", nullable=False),
        ),
        primary_key=("code",),
    )
