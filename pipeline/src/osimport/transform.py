"""Typed rows and in-memory staging for both datasets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, NamedTuple, Sequence

from osimport.geo import CoordinateConverter
from osimport.parsing.headers import CodePointColumns
from osimport.parsing.records import RawRecord
from osimport.util.hashing import sha256_rows
from osimport.util.normalise import split_postcode


class PostcodePoint(NamedTuple):
    outward_code: str
    inward_code: str
    longitude: float
    latitude: float


class GazetteerPoint(NamedTuple):
    seq_no: int
    place_name: str
    county_code: str
    feature_code: str
    longitude: float
    latitude: float


class CountyLookup(NamedTuple):
    code: str
    name: str


class FeatureLookup(NamedTuple):
    code: str
    description: str


POINT_ROLE = "point"
COUNTY_ROLE = "county"
FEATURE_ROLE = "feature"

HEMISPHERE_WEST = "W"

GAZETTEER_FIELD_COUNT = 15
GAZ_SEQ_NO = 0
GAZ_PLACE_NAME = 2
GAZ_LAT_DEGREES = 4
GAZ_LAT_MINUTES = 5
GAZ_LON_DEGREES = 6
GAZ_LON_MINUTES = 7
GAZ_HEMISPHERE = 10
GAZ_COUNTY_CODE = 11
GAZ_COUNTY_NAME = 13
GAZ_FEATURE_CODE = 14


@dataclass(frozen=True)
class StagedTable:
    columns: tuple[str, ...]
    rows: tuple[tuple, ...]

    @classmethod
    def from_rows(cls, row_type: type, rows: Iterable[tuple]) -> "StagedTable":
        return cls(columns=tuple(row_type._fields), rows=tuple(rows))

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class StagedDataset:
    tables: Mapping[str, StagedTable] = field(default_factory=dict)

    def __getitem__(self, role: str) -> StagedTable:
        return self.tables[role]

    def row_counts(self) -> dict[str, int]:
        return {role: len(table) for role, table in self.tables.items()}

    def digest(self) -> str:
        # Roles are hashed in staging order so the digest pins row order too.
        return sha256_rows(
            tuple(self.tables),
            (
                (role, sha256_rows(table.columns, table.rows))
                for role, table in self.tables.items()
            ),
        )


def _parse_int(record: RawRecord, index: int, name: str) -> int:
    value = record.fields[index].strip()
    try:
        return int(value)
    except ValueError as exc:
        raise record.malformed(f"{name} is not an integer: {value!r}") from exc


def _parse_float(record: RawRecord, index: int, name: str) -> float:
    value = record.fields[index].strip()
    try:
        return float(value)
    except ValueError as exc:
        raise record.malformed(f"{name} is not a number: {value!r}") from exc


def _check_field_count(record: RawRecord, expected: int, exact: bool) -> None:
    actual = len(record.fields)
    if actual < expected or (exact and actual != expected):
        qualifier = "" if exact else "at least "
        raise record.malformed(f"expected {qualifier}{expected} fields, found {actual}")


def codepoint_point(
    record: RawRecord,
    columns: CodePointColumns,
    convert: CoordinateConverter,
) -> PostcodePoint:
    _check_field_count(record, columns.field_count, columns.exact_field_count)

    try:
        outward_code, inward_code = split_postcode(record.fields[columns.postcode])
    except ValueError as exc:
        raise record.malformed(str(exc)) from exc

    easting = _parse_int(record, columns.easting, "easting")
    northing = _parse_int(record, columns.northing, "northing")
    longitude, latitude = convert(easting, northing)
    return PostcodePoint(outward_code, inward_code, longitude, latitude)


def degrees_minutes(degrees: float, minutes: float) -> float:
    return degrees + minutes / 60.0


def signed_longitude(longitude: float, hemisphere: str) -> float:
    return -longitude if hemisphere == HEMISPHERE_WEST else longitude


def gazetteer_point(record: RawRecord) -> GazetteerPoint:
    _check_field_count(record, GAZETTEER_FIELD_COUNT, exact=False)
    fields = record.fields

    latitude = degrees_minutes(
        _parse_float(record, GAZ_LAT_DEGREES, "latitude degrees"),
        _parse_float(record, GAZ_LAT_MINUTES, "latitude minutes"),
    )
    longitude = degrees_minutes(
        _parse_float(record, GAZ_LON_DEGREES, "longitude degrees"),
        _parse_float(record, GAZ_LON_MINUTES, "longitude minutes"),
    )
    return GazetteerPoint(
        seq_no=_parse_int(record, GAZ_SEQ_NO, "sequence number"),
        place_name=fields[GAZ_PLACE_NAME],
        county_code=fields[GAZ_COUNTY_CODE],
        feature_code=fields[GAZ_FEATURE_CODE],
        longitude=signed_longitude(longitude, fields[GAZ_HEMISPHERE]),
        latitude=latitude,
    )


def stage_codepoint(
    records: Iterable[RawRecord],
    columns: CodePointColumns,
    convert: CoordinateConverter,
) -> StagedDataset:
    points = StagedTable.from_rows(
        PostcodePoint,
        (codepoint_point(record, columns, convert) for record in records),
    )
    return StagedDataset(tables={POINT_ROLE: points})


def stage_gazetteer(
    records: Iterable[RawRecord],
    feature_codes: Sequence[tuple[str, str]],
) -> StagedDataset:
    points: list[GazetteerPoint] = []
    counties: dict[str, str] = {}
    for record in records:
        point = gazetteer_point(record)
        points.append(point)
        # First name seen for a county code wins.
        counties.setdefault(point.county_code, record.fields[GAZ_COUNTY_NAME])

    return StagedDataset(
        tables={
            POINT_ROLE: StagedTable.from_rows(GazetteerPoint, points),
            COUNTY_ROLE: StagedTable.from_rows(
                CountyLookup,
                (CountyLookup(code, name) for code, name in counties.items()),
            ),
            FEATURE_ROLE: StagedTable.from_rows(
                FeatureLookup,
                (FeatureLookup(code, description) for code, description in feature_codes),
            ),
        }
    )
