"""1:50 000 Scale Gazetteer import pipeline."""

from __future__ import annotations

import csv

import psycopg

from osimport.config import GAZETTEER_DELIMITER, GAZETTEER_ENCODING
from osimport.db import schema as db_schema
from osimport.db.bulk import load as bulk_load
from osimport.db.tables import (
    ForeignKey,
    TableDefinition,
    county_lookup_table,
    feature_lookup_table,
    gazetteer_point_table,
)
from osimport.geo import CoordinateConverter
from osimport.job import DatasetKind, ImportJob, ImportResult
from osimport.parsing.records import gazetteer_data_file, iter_records
from osimport.progress import ProgressCallback, ProgressEvent, discard_progress
from osimport.reference import feature_codes
from osimport.transform import COUNTY_ROLE, FEATURE_ROLE, POINT_ROLE, StagedDataset, stage_gazetteer


def tables(job: ImportJob) -> tuple[TableDefinition, TableDefinition, TableDefinition]:
    return (
        gazetteer_point_table(job.table),
        county_lookup_table(str(job.county_table)),
        feature_lookup_table(str(job.feature_table)),
    )


def foreign_keys(job: ImportJob) -> tuple[ForeignKey, ...]:
    point_table, county_table, feature_table = tables(job)
    return (
        ForeignKey(point_table, "county_code", county_table, "code"),
        ForeignKey(point_table, "feature_code", feature_table, "code"),
    )


def provision(
    conn: psycopg.Connection,
    job: ImportJob,
    progress: ProgressCallback = discard_progress,
) -> None:
    db_schema.provision(conn, job.schema, tables(job), progress)


def stage(
    job: ImportJob,
    convert: CoordinateConverter | None = None,
    progress: ProgressCallback = discard_progress,
) -> StagedDataset:
    """Read the gazetteer file; coordinates are already in degrees and minutes."""

    data_file = gazetteer_data_file(job.source)
    progress(ProgressEvent("stage", f"Loading scale gazetteer data from {data_file} into memory"))
    records = iter_records(
        [data_file],
        GAZETTEER_DELIMITER,
        job.encoding or GAZETTEER_ENCODING,
        quoting=csv.QUOTE_NONE,
    )
    staged = stage_gazetteer(records, feature_codes())
    progress(ProgressEvent("stage", "Gazetteer rows prepared", staged.row_counts()))
    return staged


def load(
    conn: psycopg.Connection,
    job: ImportJob,
    staged: StagedDataset,
    progress: ProgressCallback = discard_progress,
) -> dict[str, int]:
    targets = (
        (POINT_ROLE, job.table),
        (COUNTY_ROLE, str(job.county_table)),
        (FEATURE_ROLE, str(job.feature_table)),
    )
    return {
        table_name: bulk_load(conn, staged[role], job.schema, table_name, progress)
        for role, table_name in targets
    }


def finalize(
    conn: psycopg.Connection,
    job: ImportJob,
    progress: ProgressCallback = discard_progress,
) -> None:
    point_table, county_table, feature_table = tables(job)
    db_schema.finalize(
        conn,
        job.schema,
        point_table,
        lookups=(county_table, feature_table),
        foreign_keys=foreign_keys(job),
        progress=progress,
    )


def run(
    conn: psycopg.Connection,
    job: ImportJob,
    convert: CoordinateConverter | None = None,
    progress: ProgressCallback = discard_progress,
) -> ImportResult:
    if job.kind is not DatasetKind.GAZETTEER:
        raise ValueError(f"Gazetteer pipeline cannot run a {job.kind.value} job")

    provision(conn, job, progress)
    staged = stage(job, convert, progress)
    loaded = load(conn, job, staged, progress)
    finalize(conn, job, progress)

    return ImportResult(
        kind=job.kind,
        schema=job.schema,
        table=job.table,
        rows_loaded=loaded.pop(job.table),
        lookup_rows=loaded,
        staged_sha256=staged.digest(),
    )
