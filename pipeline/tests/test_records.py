from __future__ import annotations

import csv
from pathlib import Path

import pytest

from osimport.errors import DataFileError, MalformedRecordError
from osimport.parsing.records import codepoint_data_files, gazetteer_data_file, iter_records


def test_codepoint_data_files_are_sorted_csv_files(tmp_path: Path) -> None:
    (tmp_path / "b.csv").write_text("", encoding="utf-8")
    (tmp_path / "a.csv").write_text("", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")

    files = codepoint_data_files(tmp_path)

    assert [path.name for path in files] == ["a.csv", "b.csv"]


def test_codepoint_data_files_accepts_single_file(write_file) -> None:
    path = write_file("ab.csv", "")
    assert codepoint_data_files(path) == (path,)


def test_codepoint_data_files_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        codepoint_data_files(tmp_path / "missing")


def test_codepoint_data_files_empty_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="No"):
        codepoint_data_files(tmp_path)


def test_gazetteer_data_file_must_exist(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        gazetteer_data_file(tmp_path / "50kgaz.txt")


def test_iter_records_skips_blank_lines_and_tracks_line_numbers(write_file) -> None:
    path = write_file("ab.csv", '"AB1 2CD",1,2\n\n"AB1 3EF",3,4\n')

    records = list(iter_records([path], ",", "utf-8"))

    assert [record.line_no for record in records] == [1, 3]
    assert records[0].fields == ("AB1 2CD", "1", "2")
    assert records[1].path == path


def test_iter_records_reads_files_in_order(write_file) -> None:
    first = write_file("a.csv", "1,a\n")
    second = write_file("b.csv", "2,b\n3,c\n")

    records = list(iter_records([first, second], ",", "utf-8"))

    assert [record.fields[0] for record in records] == ["1", "2", "3"]


def test_iter_records_is_restartable(write_file) -> None:
    path = write_file("a.csv", "1,a\n2,b\n")
    assert list(iter_records([path], ",", "utf-8")) == list(iter_records([path], ",", "utf-8"))


def test_iter_records_colon_delimited_without_quoting(write_file) -> None:
    path = write_file("gaz.txt", '1:NS1:Ben "The Hill":x\n')

    (record,) = iter_records([path], ":", "utf-8", quoting=csv.QUOTE_NONE)

    assert record.fields == ("1", "NS1", 'Ben "The Hill"', "x")


def test_iter_records_undecodable_file_is_malformed(tmp_path: Path) -> None:
    path = tmp_path / "bad.csv"
    path.write_bytes(b"1,\xff\xfe\n")

    with pytest.raises(MalformedRecordError) as excinfo:
        list(iter_records([path], ",", "utf-8"))

    assert excinfo.value.path == path


def test_iter_records_unopenable_file_names_the_file(monkeypatch, write_file) -> None:
    path = write_file("ab.csv", "AB1 2CD,1,2\n")

    def denied(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "open", denied)

    with pytest.raises(DataFileError, match="ab.csv"):
        list(iter_records([path], ",", "utf-8"))


def test_iter_records_directory_is_data_file_error(tmp_path: Path) -> None:
    with pytest.raises(DataFileError):
        list(iter_records([tmp_path], ",", "utf-8"))
