# Shared pytest fixtures
from __future__ import annotations
import io
import tempfile
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from chartdata.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    # 各テストで logger を作り直す (capsys の stdout を掴むため)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """max_size_mb: 5
csv:
  delimiter: ";"
  header: true
excel:
  sheet_index: 0
json:
  flatten_nested: true
xml:
  attribute_prefix: "@"
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "ingest.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_xlsx_bytes(sheets: dict[str, list[list[Any]]]) -> bytes:
    """Build an in-memory workbook; each sheet is written cell by cell without header/index."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, header=False, index=False)
    return buf.getvalue()


@pytest.fixture()
def make_xlsx():
    return make_xlsx_bytes


@pytest.fixture()
def sample_files(temp_workdir: Path) -> dict[str, Path]:
    """One small file per supported format under data/."""
    data_dir = temp_workdir / "data"
    files = {
        "csv": data_dir / "scores.csv",
        "tsv": data_dir / "scores.tsv",
        "json": data_dir / "orders.json",
        "xml": data_dir / "items.xml",
        "xlsx": data_dir / "sales.xlsx",
    }
    files["csv"].write_text("name,score\nA,10\nB,20\nA,5\n", encoding="utf-8")
    files["tsv"].write_text("name\tscore\nA\t1\nB\t2\n", encoding="utf-8")
    files["json"].write_text(
        '{"meta": {"version": 1}, "items": [{"id": 1, "amount": 3.5}, {"id": 2, "amount": 4}]}',
        encoding="utf-8",
    )
    files["xml"].write_text(
        "<root><item><name>A</name><qty>1</qty></item><item><name>B</name><qty>2</qty></item></root>",
        encoding="utf-8",
    )
    files["xlsx"].write_bytes(
        make_xlsx_bytes({"Sheet1": [["region", "revenue"], ["East", 100], ["West", 50], ["East", 25]]})
    )
    return files
