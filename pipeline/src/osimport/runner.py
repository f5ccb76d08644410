"""Dispatch an import job to its dataset pipeline."""

from __future__ import annotations

from typing import Callable

import psycopg

from osimport.codepoint import workflows as codepoint_workflows
from osimport.config import build_conninfo
from osimport.db.connection import connect
from osimport.gazetteer import workflows as gazetteer_workflows
from osimport.geo import CoordinateConverter, convert as grid_to_wgs84
from osimport.job import DatasetKind, ImportJob, ImportResult
from osimport.progress import ProgressCallback, log_progress

PipelineRunner = Callable[
    [psycopg.Connection, ImportJob, CoordinateConverter, ProgressCallback],
    ImportResult,
]

PIPELINES: dict[DatasetKind, PipelineRunner] = {
    DatasetKind.CODEPOINT: codepoint_workflows.run,
    DatasetKind.GAZETTEER: gazetteer_workflows.run,
}


def run_job(
    conn: psycopg.Connection,
    job: ImportJob,
    convert: CoordinateConverter = grid_to_wgs84,
    progress: ProgressCallback = log_progress,
) -> ImportResult:
    return PIPELINES[job.kind](conn, job, convert, progress)


def run_import(
    job: ImportJob,
    base_dsn: str | None = None,
    convert: CoordinateConverter = grid_to_wgs84,
    progress: ProgressCallback = log_progress,
) -> ImportResult:
    """Run ``job`` on a connection held for the whole run and closed on exit."""

    with connect(build_conninfo(job.server, job.database, base_dsn)) as conn:
        return run_job(conn, job, convert, progress)
