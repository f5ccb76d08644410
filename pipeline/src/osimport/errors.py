"""Error taxonomy for import runs.

Every error aborts the run. Missing data files and directories raise the
builtin ``FileNotFoundError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class OSImportError(RuntimeError):
    """Base class for import failures reported by the CLI."""


class ConfigurationError(OSImportError):
    """Raised for missing or invalid arguments and header definition files."""


class MalformedRecordError(OSImportError):
    """Raised when a data file line cannot be parsed."""

    def __init__(self, path: Path, line_no: int, reason: str) -> None:
        self.path = path
        self.line_no = line_no
        self.reason = reason
        super().__init__(f"Malformed record in {path} at line {line_no}: {reason}")


class DataFileError(OSImportError):
    """Raised when a data file exists but cannot be opened or read."""


class TableAlreadyExistsError(OSImportError):
    """Raised when any target table already exists in the target schema."""

    def __init__(self, schema: str, table_names: Iterable[str]) -> None:
        self.schema = schema
        self.table_names = tuple(table_names)
        names = ", ".join(f"{schema}.{name}" for name in self.table_names)
        super().__init__(
            f"Cannot create new tables to load to because they already exist: {names}"
        )


class SchemaMismatchError(OSImportError):
    """Raised when staged columns do not match the destination table."""


class DatabaseOperationError(OSImportError):
    """Raised when a DDL or DML statement fails."""
