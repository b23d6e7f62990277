"""Tabular data ingestion, column type inference and aggregation for chart dashboards.

Typical use::

    from chartdata import ingest_bytes, infer_column_types, aggregate

    data = ingest_bytes(upload_bytes, "sales.csv")
    types = infer_column_types(data)
    bars = aggregate(data.rows, "region", "revenue", "sum")
"""

from .models import (
    SUPPORTED_EXTENSIONS,
    AggregationType,
    ColumnInfo,
    ColumnType,
    DataStats,
    FileType,
    ParsedData,
    TrendLine,
)
from .models.config_models import IngestConfig
from .readers.errors import IngestError, ParseError, SizeExceededError, UnsupportedFormatError
from .services.aggregation import aggregate, trend_line
from .services.coercion import to_number
from .services.inference import describe_columns, infer_column_types, infer_type
from .services.ingest import detect_file_type, ingest_bytes, ingest_file

__version__ = "0.1.0"

__all__ = [
    # Models
    "AggregationType",
    "ColumnInfo",
    "ColumnType",
    "DataStats",
    "FileType",
    "IngestConfig",
    "ParsedData",
    "SUPPORTED_EXTENSIONS",
    "TrendLine",
    # Errors
    "IngestError",
    "ParseError",
    "SizeExceededError",
    "UnsupportedFormatError",
    # Operations
    "aggregate",
    "describe_columns",
    "detect_file_type",
    "infer_column_types",
    "infer_type",
    "ingest_bytes",
    "ingest_file",
    "to_number",
    "trend_line",
]
