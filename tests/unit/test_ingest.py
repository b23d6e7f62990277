from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from chartdata.models.config_models import IngestConfig
from chartdata.models.file_type import FileType
from chartdata.readers.errors import ParseError, SizeExceededError, UnsupportedFormatError
from chartdata.services.ingest import check_file_size, detect_file_type, ingest_bytes, ingest_file

MB = 1024 * 1024


def test_detect_file_type_is_case_insensitive():
    assert detect_file_type("Report.CSV") is FileType.CSV


def test_detect_file_type_rejects_unsupported_extension():
    with pytest.raises(UnsupportedFormatError) as e:
        detect_file_type("data.pdf")

    assert str(e.value) == "Unsupported file type: .pdf. Supported types: csv, tsv, xlsx, xls, json, xml"
    assert e.value.error_type == "UNSUPPORTED_FORMAT"
    assert e.value.file_name == "data.pdf"


def test_check_file_size_message():
    with pytest.raises(SizeExceededError) as e:
        check_file_size(51 * MB, 50)

    assert e.value.message == "File size (51.00MB) exceeds maximum allowed size (50MB)"
    assert e.value.size_bytes == 51 * MB
    assert e.value.max_size_mb == 50


def test_check_file_size_limit_is_inclusive_and_optional():
    check_file_size(50 * MB, 50)
    check_file_size(500 * MB, None)


def test_ingest_bytes_csv():
    data = ingest_bytes(b"name,score\nA,10\nB,20\nA,5\n", "scores.csv")

    assert data.file_type is FileType.CSV
    assert data.row_count == 3


def test_ingest_bytes_applies_reader_options():
    cfg = IngestConfig(delimiter=";")

    data = ingest_bytes(b"a;b\n1;2\n", "semi.csv", cfg)

    assert data.rows == [{"a": 1, "b": 2}]


def test_ingest_bytes_routes_every_format(make_xlsx):
    assert ingest_bytes(b"a\tb\n1\t2\n", "t.tsv").file_type is FileType.TSV
    assert ingest_bytes(b'[{"a": 1}]', "t.json").file_type is FileType.JSON
    assert ingest_bytes(b"<r><i><a>1</a></i><i><a>2</a></i></r>", "t.xml").file_type is FileType.XML
    xlsx = make_xlsx({"Sheet1": [["a"], [1]]})
    assert ingest_bytes(xlsx, "t.xlsx").file_type is FileType.XLSX
    assert ingest_bytes(xlsx, "t.xls").file_type is FileType.XLS


def test_size_checked_before_parsing():
    cfg = IngestConfig(max_size_mb=0.001)

    with pytest.raises(SizeExceededError):
        # 不正な内容でもサイズ超過が先に報告される
        ingest_bytes(b"\xff" * 2048, "big.csv", cfg)


def test_unsupported_type_checked_before_size():
    cfg = IngestConfig(max_size_mb=0.001)

    with pytest.raises(UnsupportedFormatError):
        ingest_bytes(b"x" * 2048, "big.pdf", cfg)


def test_parse_error_propagates():
    with pytest.raises(ParseError):
        ingest_bytes(b"[]", "empty.json")


def test_ingest_file_reads_from_disk(tmp_path: Path):
    path = tmp_path / "scores.csv"
    path.write_text("name,score\nA,10\n", encoding="utf-8")

    data = ingest_file(path)

    assert data.file_name == "scores.csv"
    assert data.rows == [{"name": "A", "score": 10}]


def test_ingest_file_rejects_type_without_touching_file(tmp_path: Path):
    # 存在しないファイルでも拡張子で先に弾かれる
    with pytest.raises(UnsupportedFormatError):
        ingest_file(tmp_path / "missing.pdf")


def test_ingest_file_size_checked_before_read(tmp_path: Path):
    path = tmp_path / "big.csv"
    path.write_bytes(b"a\n" + b"1\n" * 2048)

    with patch.object(Path, "read_bytes") as mock_read:
        with pytest.raises(SizeExceededError):
            ingest_file(path, IngestConfig(max_size_mb=0.001))

    mock_read.assert_not_called()


def test_ingest_file_missing_file_raises_oserror(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        ingest_file(tmp_path / "missing.csv")
