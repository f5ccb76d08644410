"""Import job definition and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from osimport.errors import ConfigurationError


class DatasetKind(str, Enum):
    CODEPOINT = "CODEPOINT"
    GAZETTEER = "GAZETTEER"

    @classmethod
    def parse(cls, value: str) -> "DatasetKind":
        try:
            return cls(value.strip().upper())
        except ValueError as exc:
            raise ConfigurationError(
                f"Unsupported import type '{value}'. Must be: CODEPOINT or GAZETTEER"
            ) from exc


def _require_string(value: str | None, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{name} must be supplied")
    return value.strip()


@dataclass(frozen=True)
class ImportJob:
    kind: DatasetKind
    server: str
    database: str
    schema: str
    table: str
    source: Path
    header_file: Path | None = None
    county_table: str | None = None
    feature_table: str | None = None
    encoding: str | None = None

    def __post_init__(self) -> None:
        for name in ("server", "database", "schema", "table"):
            object.__setattr__(self, name, _require_string(getattr(self, name), name))
        if self.kind is DatasetKind.GAZETTEER:
            object.__setattr__(
                self, "county_table", _require_string(self.county_table, "county_table")
            )
            object.__setattr__(
                self, "feature_table", _require_string(self.feature_table, "feature_table")
            )
        elif self.county_table is not None or self.feature_table is not None:
            raise ConfigurationError("Lookup tables are only used by GAZETTEER imports")

    @property
    def table_names(self) -> tuple[str, ...]:
        if self.kind is DatasetKind.GAZETTEER:
            return (self.table, str(self.county_table), str(self.feature_table))
        return (self.table,)


@dataclass(frozen=True)
class ImportResult:
    kind: DatasetKind
    schema: str
    table: str
    rows_loaded: int
    derived_rows: int = 0
    lookup_rows: dict[str, int] = field(default_factory=dict)
    staged_sha256: str = ""
