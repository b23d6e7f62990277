from __future__ import annotations

import argparse
import json
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, config_from_mapping, load_config
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.aggregation import AggregationType
from ..models.config_models import IngestConfig
from ..models.parsed_data import ParsedData
from ..services.aggregation import aggregate
from ..services.batch import process_files
from ..services.inference import infer_column_types
from ..services.summary import render_summary_line

"""Command line runner.

Ingests one or more files the same way an upload would, prints each
dataset's headers and first rows, optionally the inferred column types and
an aggregation, and ends with a SUMMARY line.

Exit codes: 0 all files ingested, 2 at least one file failed, 1 fatal
(configuration or arguments).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

SAMPLE_ROWS = 3


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=_json_default)


def _load_env_file(path: Path) -> None:
    """Load .env (existing environment variables win)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="chartdata", description="Ingest tabular files for charting")
    p.add_argument("files", nargs="+", type=Path, help="csv/tsv/xlsx/xls/json/xml files")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH} if present)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--types", action="store_true", help="Print inferred column types")
    p.add_argument("--group-by", dest="group_by", help="Column to group rows by")
    p.add_argument("--value", help="Column to aggregate")
    p.add_argument(
        "--agg",
        default=AggregationType.SUM.value,
        choices=[a.value for a in AggregationType],
        help="Aggregation applied to --value (default: sum)",
    )
    args = p.parse_args(argv)
    if (args.group_by is None) != (args.value is None):
        p.error("--group-by and --value must be given together")
    if args.group_by is not None and args.group_by == args.value:
        p.error("--group-by and --value must name different columns")
    return args


def _resolve_config(path: Path | None) -> IngestConfig:
    if path is not None:
        return load_config(path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    # ファイルなし: デフォルト値 + 環境変数
    return config_from_mapping({})


def _print_dataset(data: ParsedData, args: argparse.Namespace) -> None:
    print(f"FILE: {data.file_name} type={data.file_type.value} rows={data.row_count} cols={data.headers}")
    print("    sample_rows=", _dumps(data.rows[:SAMPLE_ROWS]))
    if args.types:
        types = {h: t.value for h, t in infer_column_types(data).items()}
        print("    TYPES:", _dumps(types))
    if args.group_by is not None:
        missing = [c for c in (args.group_by, args.value) if c not in data.headers]
        if missing:
            print(f"    AGGREGATE: skipped, missing columns {missing}")
            return
        result = aggregate(data.rows, args.group_by, args.value, args.agg)
        print("    AGGREGATE:", _dumps(result))


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む ([] は明示的な空引数)
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = _parse_args(argv)
    except SystemExit as e:
        return EXIT_SUCCESS_ALL if e.code == 0 else EXIT_FATAL

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    logger.info(f"Ingesting {len(args.files)} file(s)")
    result = process_files(args.files, cfg, on_dataset=lambda d: _print_dataset(d, args))

    log_summary(render_summary_line(result).removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
