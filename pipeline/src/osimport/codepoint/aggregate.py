"""Postcode district and sector centroids derived from loaded points."""

from __future__ import annotations

from typing import Iterable

import psycopg

from osimport.contracts.postgis import render_select_columns
from osimport.db.bulk import load
from osimport.db.connection import database_operation
from osimport.progress import ProgressCallback, ProgressEvent, discard_progress
from osimport.transform import PostcodePoint, StagedTable

DISTRICT_INWARD_CODE = ""
READ_BACK_CURSOR = "osimport_postcode_points"


class _Mean:
    __slots__ = ("longitude", "latitude", "count")

    def __init__(self) -> None:
        self.longitude = 0.0
        self.latitude = 0.0
        self.count = 0

    def add(self, longitude: float, latitude: float) -> None:
        self.longitude += longitude
        self.latitude += latitude
        self.count += 1


def district_and_sector_rows(points: Iterable[tuple[str, str, float, float]]) -> list[PostcodePoint]:
    """Average point coordinates per district (outward code) and sector.

    A district row has an empty inward code; a sector row carries the first
    character of the inward code.
    """

    groups: dict[tuple[str, str], _Mean] = {}
    for outward_code, inward_code, longitude, latitude in points:
        groups.setdefault((outward_code, DISTRICT_INWARD_CODE), _Mean()).add(longitude, latitude)
        groups.setdefault((outward_code, inward_code[:1]), _Mean()).add(longitude, latitude)

    return [
        PostcodePoint(outward_code, inward_code, mean.longitude / mean.count, mean.latitude / mean.count)
        for (outward_code, inward_code), mean in sorted(groups.items())
    ]


def _aggregate_loaded_points(conn: psycopg.Connection, schema: str, table_name: str) -> list[PostcodePoint]:
    query = render_select_columns(schema, table_name, PostcodePoint._fields)
    with conn.transaction():
        # Named cursor streams rows from the server instead of buffering them.
        with conn.cursor(name=READ_BACK_CURSOR) as cur:
            cur.execute(query)
            return district_and_sector_rows(
                (str(row[0]), str(row[1]), float(row[2]), float(row[3])) for row in cur
            )


def load_districts_and_sectors(
    conn: psycopg.Connection,
    schema: str,
    table_name: str,
    progress: ProgressCallback = discard_progress,
) -> int:
    """Insert district and sector rows computed from the committed point rows."""

    progress(ProgressEvent("aggregate", "Calculating averages for postcode districts and sectors"))
    with database_operation("read postcode points from", schema, table_name):
        derived = _aggregate_loaded_points(conn, schema, table_name)

    loaded = load(conn, StagedTable.from_rows(PostcodePoint, derived), schema, table_name, progress)
    progress(ProgressEvent("aggregate", "District and sector rows inserted", {"rows": loaded}))
    return loaded
