from __future__ import annotations

from pathlib import Path

from chartdata.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL
from chartdata.cli.__main__ import main as cli_main

"""Exit code contract: 0 all ingested, 2 at least one file failed, 1 fatal."""


def test_exit_code_all_success(sample_files: dict[str, Path], capsys):
    code = cli_main([str(p) for p in sample_files.values()])

    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS_ALL == 0
    assert "SUMMARY files=5 success=5 failed=0 rows=12" in out


def test_exit_code_partial_failure(sample_files: dict[str, Path], temp_workdir: Path, capsys):
    """Exit code 2 when some files fail but others succeed."""
    broken = temp_workdir / "data" / "broken.xml"
    broken.write_text("<root><item>", encoding="utf-8")

    code = cli_main([str(sample_files["csv"]), str(broken)])

    out = capsys.readouterr().out
    assert code == EXIT_PARTIAL_FAILURE == 2
    assert "WARN broken.xml: Invalid XML format" in out
    assert "SUMMARY files=2 success=1 failed=1 rows=3" in out


def test_exit_code_all_failed_is_still_partial(temp_workdir: Path, capsys):
    pdf = temp_workdir / "data" / "data.pdf"
    pdf.write_bytes(b"%PDF")

    code = cli_main([str(pdf)])

    out = capsys.readouterr().out
    assert code == 2
    assert "Unsupported file type: .pdf. Supported types: csv, tsv, xlsx, xls, json, xml" in out


def test_exit_code_fatal_missing_config(sample_files: dict[str, Path], temp_workdir: Path, capsys):
    code = cli_main(["--config", str(temp_workdir / "config" / "nope.yml"), str(sample_files["csv"])])

    out = capsys.readouterr().out
    assert code == EXIT_FATAL == 1
    assert "ERROR config: config file not found" in out
    assert "SUMMARY" not in out


def test_exit_code_fatal_invalid_config(write_config: Path, sample_files: dict[str, Path], capsys):
    write_config.write_text("unknown_key: 1\n", encoding="utf-8")

    code = cli_main([str(sample_files["csv"])])

    assert code == 1
    assert "ERROR config: config validation failed" in capsys.readouterr().out


def test_exit_code_fatal_without_files(temp_workdir: Path, capsys):
    code = cli_main([])

    assert code == 1
    assert "required" in capsys.readouterr().err


def test_exit_code_fatal_group_by_without_value(sample_files: dict[str, Path], capsys):
    code = cli_main([str(sample_files["csv"]), "--group-by", "name"])

    assert code == 1
    assert "--group-by and --value must be given together" in capsys.readouterr().err


def test_exit_code_fatal_same_group_by_and_value(sample_files: dict[str, Path], capsys):
    code = cli_main([str(sample_files["csv"]), "--group-by", "score", "--value", "score"])

    assert code == 1
    assert "--group-by and --value must name different columns" in capsys.readouterr().err


def test_help_exits_zero(capsys):
    code = cli_main(["--help"])

    assert code == 0
    assert "usage: chartdata" in capsys.readouterr().out
