from __future__ import annotations

import json

import pytest

import chartdata
from chartdata import (
    ColumnType,
    FileType,
    UnsupportedFormatError,
    aggregate,
    describe_columns,
    infer_column_types,
    ingest_bytes,
    to_number,
    trend_line,
)

"""Upload -> dataset -> column types -> chart series, through the package API."""


def test_csv_upload_to_bar_series():
    data = ingest_bytes(b"name,score\nA,10\nB,20\nA,5\n", "scores.csv")

    assert data.headers == ["name", "score"]
    assert data.row_count == 3
    assert infer_column_types(data)["score"] is ColumnType.NUMBER
    assert aggregate(data.rows, "name", "score", "sum") == [
        {"name": "A", "score": 15},
        {"name": "B", "score": 20},
    ]


def test_json_object_with_items_array():
    content = b'{"meta": {"source": "api"}, "items": [{"id": 1, "v": "3.5"}, {"id": 2, "v": "4"}]}'

    data = ingest_bytes(content, "payload.json")

    assert data.file_type is FileType.JSON
    assert data.headers == ["id", "v"]
    assert [to_number(r["v"]) for r in data.rows] == [3.5, 4.0]


def test_xml_items_to_line_series():
    content = (
        b"<root>"
        b"<item><month>1</month><sales>100</sales></item>"
        b"<item><month>2</month><sales>120</sales></item>"
        b"<item><month>3</month><sales>140</sales></item>"
        b"</root>"
    )

    data = ingest_bytes(content, "sales.xml")

    assert data.row_count == 3
    types = infer_column_types(data)
    assert types == {"month": ColumnType.NUMBER, "sales": ColumnType.NUMBER}
    line = trend_line(data.rows, "month", "sales")
    assert line.slope == pytest.approx(20.0)
    assert line.intercept == pytest.approx(80.0)


def test_excel_upload_profile(make_xlsx):
    content = make_xlsx({"Sheet1": [["region", "revenue", "active"], ["East", 10, True], ["West", None, False]]})

    data = ingest_bytes(content, "book.xlsx")
    stats = describe_columns(data)

    assert stats.numeric_columns() == ["revenue"]
    assert stats.get("revenue").null_count == 1
    assert stats.get("active").type is ColumnType.BOOLEAN


def test_dataset_serializes_for_dashboard_storage():
    data = ingest_bytes(b"a,b\n1,x\n", "s.csv")

    stored = json.loads(json.dumps(data.to_dict()))

    assert stored["rawData"] == [[1, "x"]]
    assert stored["fileName"] == "s.csv"
    assert stored["rowCount"] == 1


def test_pdf_rejected():
    with pytest.raises(UnsupportedFormatError) as e:
        ingest_bytes(b"%PDF-1.4", "data.pdf")

    assert "Unsupported file type: .pdf" in e.value.message


def test_package_exports():
    assert chartdata.__version__
    for name in chartdata.__all__:
        assert hasattr(chartdata, name)
