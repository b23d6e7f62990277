from __future__ import annotations

from datetime import date, datetime

import pytest

from chartdata.models.column_info import ColumnType
from chartdata.models.file_type import FileType
from chartdata.models.parsed_data import ParsedData
from chartdata.services.inference import (
    SAMPLE_SIZE,
    describe_columns,
    infer_column_types,
    infer_type,
)


@pytest.mark.parametrize(
    "values,expected",
    [
        ([1, 2, 3], ColumnType.NUMBER),
        (["1", "2.5", "1,000"], ColumnType.NUMBER),
        ([1, 0, 1], ColumnType.NUMBER),
        ([True, False], ColumnType.BOOLEAN),
        (["true", "false", "true"], ColumnType.BOOLEAN),
        (["2024-01-01", "2024-02-15"], ColumnType.DATE),
        (["01/15/2024", "02/20/2024"], ColumnType.DATE),
        ([datetime(2024, 1, 1), date(2024, 1, 2)], ColumnType.DATE),
        (["East", "West"], ColumnType.STRING),
        ([None, ""], ColumnType.UNKNOWN),
        ([], ColumnType.UNKNOWN),
    ],
)
def test_infer_type(values, expected):
    assert infer_type(values) is expected


def test_missing_values_do_not_count():
    assert infer_type([None, "", 5, None]) is ColumnType.NUMBER


def test_ninety_percent_majority_is_enough():
    values = [1, 2, 3, 4, 5, 6, 7, 8, 9, "n/a"]

    assert infer_type(values) is ColumnType.NUMBER


def test_below_majority_falls_back_to_string():
    values = [1, 2, 3, 4, 5, 6, 7, 8, "n/a", "?"]

    assert infer_type(values) is ColumnType.STRING


def test_only_first_sample_is_inspected():
    values = list(range(SAMPLE_SIZE)) + ["text"] * SAMPLE_SIZE

    assert infer_type(values) is ColumnType.NUMBER


def test_infer_column_types_in_header_order():
    data = ParsedData.from_rows(
        ["name", "score", "active"],
        [
            {"name": "A", "score": 10, "active": True},
            {"name": "B", "score": "20", "active": False},
        ],
        "t.csv",
        FileType.CSV,
    )

    types = infer_column_types(data)

    assert list(types) == ["name", "score", "active"]
    assert types == {
        "name": ColumnType.STRING,
        "score": ColumnType.NUMBER,
        "active": ColumnType.BOOLEAN,
    }


def test_describe_columns_profiles_each_column():
    data = ParsedData.from_rows(
        ["a", "b"],
        [{"a": 1, "b": None}, {"a": 2, "b": "x"}, {"b": "y"}],
        "t.csv",
        FileType.CSV,
    )

    stats = describe_columns(data)

    assert stats.total_rows == 3
    assert stats.total_columns == 2
    a = stats.get("a")
    assert a.type is ColumnType.NUMBER
    assert a.sample_values == [1, 2]
    assert a.null_count == 1
    assert stats.get("b").null_count == 1
    assert stats.numeric_columns() == ["a"]
    assert stats.categorical_columns() == ["b"]
    assert stats.get("missing") is None
