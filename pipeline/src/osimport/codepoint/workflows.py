"""Code-Point postcode import pipeline."""

from __future__ import annotations

import psycopg

from osimport.codepoint.aggregate import load_districts_and_sectors
from osimport.config import CODEPOINT_DELIMITER, CODEPOINT_ENCODING
from osimport.db import schema as db_schema
from osimport.db.bulk import load as bulk_load
from osimport.db.tables import TableDefinition, codepoint_table
from osimport.geo import CoordinateConverter
from osimport.job import DatasetKind, ImportJob, ImportResult
from osimport.parsing.headers import resolve_columns
from osimport.parsing.records import codepoint_data_files, iter_records
from osimport.progress import ProgressCallback, ProgressEvent, discard_progress
from osimport.transform import POINT_ROLE, StagedDataset, stage_codepoint


def tables(job: ImportJob) -> tuple[TableDefinition, ...]:
    return (codepoint_table(job.table),)


def provision(
    conn: psycopg.Connection,
    job: ImportJob,
    progress: ProgressCallback = discard_progress,
) -> None:
    db_schema.provision(conn, job.schema, tables(job), progress)


def stage(
    job: ImportJob,
    convert: CoordinateConverter,
    progress: ProgressCallback = discard_progress,
) -> StagedDataset:
    columns = resolve_columns(job.header_file)
    files = codepoint_data_files(job.source)
    progress(ProgressEvent("stage", f"Loading postcode data from {len(files)} file(s) into memory"))
    records = iter_records(files, CODEPOINT_DELIMITER, job.encoding or CODEPOINT_ENCODING)
    staged = stage_codepoint(records, columns, convert)
    progress(ProgressEvent("stage", "Postcode rows prepared", staged.row_counts()))
    return staged


def load(
    conn: psycopg.Connection,
    job: ImportJob,
    staged: StagedDataset,
    progress: ProgressCallback = discard_progress,
) -> dict[str, int]:
    return {job.table: bulk_load(conn, staged[POINT_ROLE], job.schema, job.table, progress)}


def finalize(
    conn: psycopg.Connection,
    job: ImportJob,
    progress: ProgressCallback = discard_progress,
) -> None:
    (point_table,) = tables(job)
    db_schema.finalize(conn, job.schema, point_table, progress=progress)


def run(
    conn: psycopg.Connection,
    job: ImportJob,
    convert: CoordinateConverter,
    progress: ProgressCallback = discard_progress,
) -> ImportResult:
    if job.kind is not DatasetKind.CODEPOINT:
        raise ValueError(f"Code-Point pipeline cannot run a {job.kind.value} job")

    provision(conn, job, progress)
    staged = stage(job, convert, progress)
    loaded = load(conn, job, staged, progress)
    derived = load_districts_and_sectors(conn, job.schema, job.table, progress)
    finalize(conn, job, progress)

    return ImportResult(
        kind=job.kind,
        schema=job.schema,
        table=job.table,
        rows_loaded=loaded[job.table],
        derived_rows=derived,
        staged_sha256=staged.digest(),
    )
