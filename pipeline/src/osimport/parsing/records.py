"""Delimited record readers for Code-Point and gazetteer data files."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from osimport.config import CODEPOINT_FILE_GLOB
from osimport.errors import DataFileError, MalformedRecordError


@dataclass(frozen=True)
class RawRecord:
    path: Path
    line_no: int
    fields: tuple[str, ...]

    def malformed(self, reason: str) -> MalformedRecordError:
        return MalformedRecordError(self.path, self.line_no, reason)


def codepoint_data_files(path: Path) -> tuple[Path, ...]:
    """Return the Code-Point CSV files to read, in a stable order."""

    if not path.exists():
        raise FileNotFoundError(f"Data file directory does not exist: {path}")
    if path.is_file():
        return (path,)
    files = tuple(
        sorted(item for item in path.glob(CODEPOINT_FILE_GLOB) if item.is_file())
    )
    if not files:
        raise FileNotFoundError(f"No {CODEPOINT_FILE_GLOB} data files found in {path}")
    return files


def gazetteer_data_file(path: Path) -> Path:
    if not path.is_file():
        raise FileNotFoundError(f"Data file does not exist: {path}")
    return path


def _iter_file(
    path: Path,
    delimiter: str,
    encoding: str,
    quoting: int,
) -> Iterator[RawRecord]:
    try:
        handle = path.open("r", encoding=encoding, newline="")
    except FileNotFoundError:
        raise
    except OSError as exc:
        raise DataFileError(f"Data file is unreadable: {path}: {exc}") from exc

    with handle:
        reader = csv.reader(handle, delimiter=delimiter, quoting=quoting)
        try:
            for fields in reader:
                if not fields or not any(value.strip() for value in fields):
                    continue
                yield RawRecord(path=path, line_no=reader.line_num, fields=tuple(fields))
        except (csv.Error, UnicodeDecodeError) as exc:
            raise MalformedRecordError(path, reader.line_num, str(exc)) from exc
        except OSError as exc:
            raise DataFileError(f"Data file is unreadable: {path}: {exc}") from exc


def iter_records(
    paths: Iterable[Path],
    delimiter: str,
    encoding: str,
    quoting: int = csv.QUOTE_MINIMAL,
) -> Iterator[RawRecord]:
    """Yield one record per non-empty line of each file, reading files in order."""

    for path in paths:
        yield from _iter_file(path, delimiter, encoding, quoting)
