"""Code-Point column header definition handling."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from osimport.config import (
    DEFAULT_CODEPOINT_COLUMNS,
    EASTING_COLUMN_CODE,
    NORTHING_COLUMN_CODE,
    POSTCODE_COLUMN_CODE,
)
from osimport.errors import ConfigurationError

REQUIRED_CODES = (POSTCODE_COLUMN_CODE, EASTING_COLUMN_CODE, NORTHING_COLUMN_CODE)


@dataclass(frozen=True)
class CodePointColumns:
    postcode: int
    easting: int
    northing: int
    # Exact when a header file defines the layout, otherwise a minimum.
    field_count: int
    exact_field_count: bool


def _read_header_row(path: Path) -> list[str]:
    try:
        with path.open("r", encoding="utf-8-sig", newline="") as handle:
            first_row = next(csv.reader(handle), None)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Column header file does not exist: {path}") from exc
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise ConfigurationError(f"Column header file is unreadable: {path}: {exc}") from exc

    if not first_row:
        raise ConfigurationError(f"Column header file is empty: {path}")
    return [code.strip() for code in first_row]


def _header_map(row: list[str], path: Path) -> Mapping[str, int]:
    headers: dict[str, int] = {}
    for index, code in enumerate(row):
        if not code:
            continue
        if code in headers:
            raise ConfigurationError(f"Column header file {path} repeats column code {code}")
        headers[code] = index

    missing = [code for code in REQUIRED_CODES if code not in headers]
    if missing:
        raise ConfigurationError(
            f"Column header file {path} is missing required columns: {', '.join(missing)}"
        )
    return MappingProxyType(headers)


def read_column_headers(path: Path) -> Mapping[str, int]:
    """Map each short column code on the first line of ``path`` to its index."""

    return _header_map(_read_header_row(path), path)


def resolve_columns(header_file: Path | None) -> CodePointColumns:
    if header_file is None:
        columns = DEFAULT_CODEPOINT_COLUMNS
        return CodePointColumns(
            postcode=columns[POSTCODE_COLUMN_CODE],
            easting=columns[EASTING_COLUMN_CODE],
            northing=columns[NORTHING_COLUMN_CODE],
            field_count=max(columns.values()) + 1,
            exact_field_count=False,
        )

    row = _read_header_row(header_file)
    headers = _header_map(row, header_file)
    return CodePointColumns(
        postcode=headers[POSTCODE_COLUMN_CODE],
        easting=headers[EASTING_COLUMN_CODE],
        northing=headers[NORTHING_COLUMN_CODE],
        field_count=len(row),
        exact_field_count=True,
    )
