"""
txnreader - A reader for semicolon-delimited financial transaction exports.

This package turns CSV exports into typed, validated records with
locale-aware amount parsing and per-line error attribution.
"""

from .csv_reader import (
    AmountParseError,
    CSVRecordReader,
    DateParseError,
    RecordReader,
    RecordReadError,
    RowError,
    StreamError,
    new_reader,
)
from .models import ReaderConfig, Record
from .output_formatter import LineFormatter, SummaryFormatter

__version__ = "0.1.0"
__all__ = [
    "AmountParseError",
    "CSVRecordReader",
    "DateParseError",
    "LineFormatter",
    "ReaderConfig",
    "Record",
    "RecordReadError",
    "RecordReader",
    "RowError",
    "StreamError",
    "SummaryFormatter",
    "new_reader",
]
