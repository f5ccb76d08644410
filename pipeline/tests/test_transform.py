from __future__ import annotations

import csv
from pathlib import Path

import pytest

from fakes import fake_convert
from osimport.errors import MalformedRecordError
from osimport.parsing.headers import resolve_columns
from osimport.parsing.records import RawRecord, iter_records
from osimport.transform import (
    COUNTY_ROLE,
    FEATURE_ROLE,
    POINT_ROLE,
    PostcodePoint,
    codepoint_point,
    gazetteer_point,
    signed_longitude,
    stage_codepoint,
    stage_gazetteer,
)

FEATURES = (("T", "Town"), ("W", "Water feature"))


def _codepoint_fields(postcode: str, easting: str, northing: str) -> tuple[str, ...]:
    return (postcode, "10", "a", "b", "c", "d", "e", "f", "g", "h", easting, northing)


def _gazetteer_line(
    seq_no: str = "1",
    name: str = "Aberdeen",
    hemisphere: str = "W",
    county_code: str = "GR",
    county_name: str = "Grampian",
    feature_code: str = "T",
) -> str:
    fields = [
        seq_no, "NJ9406", name, "NJ90", "57", "9", "2", "6",
        "806", "394", hemisphere, county_code, "GRAMP", county_name, feature_code,
        "01-MAR-1993", "U", "38",
    ]
    return ":".join(fields)


def _gazetteer_record(line: str, line_no: int = 1) -> RawRecord:
    return RawRecord(path=Path("50kgaz.txt"), line_no=line_no, fields=tuple(line.split(":")))


def test_codepoint_point_splits_postcode_and_converts_coordinates() -> None:
    record = RawRecord(Path("ab.csv"), 1, _codepoint_fields("AB1 2CD", "100000", "200000"))

    point = codepoint_point(record, resolve_columns(None), fake_convert)

    assert point == PostcodePoint("AB1", "2CD", -2.0, 52.0)


def test_codepoint_point_short_line_names_file_and_line() -> None:
    record = RawRecord(Path("ab.csv"), 7, ("AB1 2CD", "10", "100000"))

    with pytest.raises(MalformedRecordError) as excinfo:
        codepoint_point(record, resolve_columns(None), fake_convert)

    assert excinfo.value.path == Path("ab.csv")
    assert excinfo.value.line_no == 7
    assert "ab.csv" in str(excinfo.value)


def test_codepoint_point_exact_width_from_header_file(write_file) -> None:
    columns = resolve_columns(write_file("headers.csv", "PC,PQ,EA,NO\n"))
    record = RawRecord(Path("ab.csv"), 1, ("AB1 2CD", "10", "100000", "200000", "extra"))

    with pytest.raises(MalformedRecordError, match="expected 4 fields, found 5"):
        codepoint_point(record, columns, fake_convert)


def test_codepoint_point_non_numeric_easting() -> None:
    record = RawRecord(Path("ab.csv"), 2, _codepoint_fields("AB1 2CD", "east", "200000"))

    with pytest.raises(MalformedRecordError, match="easting"):
        codepoint_point(record, resolve_columns(None), fake_convert)


def test_codepoint_point_empty_postcode() -> None:
    record = RawRecord(Path("ab.csv"), 3, _codepoint_fields("", "100000", "200000"))

    with pytest.raises(MalformedRecordError, match="postcode"):
        codepoint_point(record, resolve_columns(None), fake_convert)


def test_codepoint_point_without_inward_code_is_malformed() -> None:
    record = RawRecord(Path("ab.csv"), 5, _codepoint_fields("AB12", "100000", "200000"))

    with pytest.raises(MalformedRecordError, match="inward code") as excinfo:
        codepoint_point(record, resolve_columns(None), fake_convert)

    assert excinfo.value.line_no == 5


def test_gazetteer_point_west_longitude_is_negated() -> None:
    point = gazetteer_point(_gazetteer_record(_gazetteer_line(hemisphere="W")))

    assert point.seq_no == 1
    assert point.place_name == "Aberdeen"
    assert point.county_code == "GR"
    assert point.feature_code == "T"
    assert point.latitude == pytest.approx(57 + 9 / 60)
    assert point.longitude == pytest.approx(-(2 + 6 / 60))


@pytest.mark.parametrize("hemisphere", ["E", "", "w"])
def test_gazetteer_point_other_hemispheres_keep_sign(hemisphere: str) -> None:
    point = gazetteer_point(_gazetteer_record(_gazetteer_line(hemisphere=hemisphere)))
    assert point.longitude == pytest.approx(2 + 6 / 60)


def test_signed_longitude() -> None:
    assert signed_longitude(1.5, "W") == -1.5
    assert signed_longitude(1.5, "E") == 1.5


def test_gazetteer_point_short_line_is_malformed() -> None:
    with pytest.raises(MalformedRecordError, match="at least 15 fields"):
        gazetteer_point(_gazetteer_record("1:NJ9406:Aberdeen"))


def test_gazetteer_point_bad_degrees_is_malformed() -> None:
    line = _gazetteer_line().replace(":57:", ":N57:", 1)
    with pytest.raises(MalformedRecordError, match="latitude degrees"):
        gazetteer_point(_gazetteer_record(line, line_no=4))


def test_stage_gazetteer_counties_first_seen_wins() -> None:
    records = [
        _gazetteer_record(_gazetteer_line(seq_no="1", county_code="GR", county_name="Grampian"), 1),
        _gazetteer_record(_gazetteer_line(seq_no="2", county_code="HI", county_name="Highland"), 2),
        _gazetteer_record(_gazetteer_line(seq_no="3", county_code="GR", county_name="Renamed"), 3),
    ]

    staged = stage_gazetteer(records, FEATURES)

    assert staged[COUNTY_ROLE].columns == ("code", "name")
    assert staged[COUNTY_ROLE].rows == (("GR", "Grampian"), ("HI", "Highland"))
    assert staged[FEATURE_ROLE].rows == FEATURES
    assert len(staged[POINT_ROLE]) == 3
    assert staged.row_counts() == {POINT_ROLE: 3, COUNTY_ROLE: 2, FEATURE_ROLE: 2}


def test_stage_codepoint_columns_match_point_row() -> None:
    records = [RawRecord(Path("ab.csv"), 1, _codepoint_fields("AB1 2CD", "100000", "200000"))]

    staged = stage_codepoint(records, resolve_columns(None), fake_convert)

    assert staged[POINT_ROLE].columns == ("outward_code", "inward_code", "longitude", "latitude")


def test_reparsing_unchanged_files_gives_identical_staged_dataset(write_file) -> None:
    path = write_file(
        "50kgaz.txt",
        "\n".join(
            [
                _gazetteer_line(seq_no="1"),
                _gazetteer_line(seq_no="2", name="Ythan", hemisphere="E", feature_code="W"),
            ]
        )
        + "\n",
    )

    def _stage():
        return stage_gazetteer(iter_records([path], ":", "latin-1", quoting=csv.QUOTE_NONE), FEATURES)

    first, second = _stage(), _stage()

    assert first == second
    assert first.digest() == second.digest()


def test_digest_changes_with_row_order() -> None:
    first = stage_gazetteer(
        [_gazetteer_record(_gazetteer_line(seq_no="1")), _gazetteer_record(_gazetteer_line(seq_no="2"))],
        FEATURES,
    )
    second = stage_gazetteer(
        [_gazetteer_record(_gazetteer_line(seq_no="2")), _gazetteer_record(_gazetteer_line(seq_no="1"))],
        FEATURES,
    )
    assert first.digest() != second.digest()
