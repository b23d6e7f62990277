"""Domain models for the tabular ingestion and aggregation core.

Datasets, column classifications, aggregation options and the batch/error
records used by the command line runner.
"""

from .aggregation import UNKNOWN_GROUP, AggregationType, TrendLine
from .column_info import ColumnInfo, ColumnType, DataStats
from .error_record import ErrorRecord
from .file_type import SUPPORTED_EXTENSIONS, FileType
from .parsed_data import ParsedData
from .processing_result import FileStat, ProcessingResult

__all__ = [
    # Dataset models
    "FileType",
    "SUPPORTED_EXTENSIONS",
    "ParsedData",
    # Column models
    "ColumnType",
    "ColumnInfo",
    "DataStats",
    # Aggregation models
    "AggregationType",
    "TrendLine",
    "UNKNOWN_GROUP",
    # Batch models
    "ErrorRecord",
    "FileStat",
    "ProcessingResult",
]
