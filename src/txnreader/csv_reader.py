"""
CSV reading functionality for semicolon-delimited transaction exports.
"""

import csv
import io
import logging
import re
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import IO

from .models import Record, ReaderConfig

logger = logging.getLogger(__name__)

MIN_FIELDS = 4

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

# Fits a C long on every platform
MAX_FIELD_SIZE = 2**31 - 1

_START_FIELD, _IN_FIELD, _IN_QUOTED, _QUOTE_IN_QUOTED = range(4)


def _has_bare_quote(raw: str, delimiter: str) -> bool:
    """Report whether a quote appears inside a field that did not start with one."""
    state = _START_FIELD
    for char in raw:
        if state == _IN_QUOTED:
            if char == '"':
                state = _QUOTE_IN_QUOTED
        elif char == '"':
            if state == _IN_FIELD:
                return True
            # Opening quote, or the second half of a doubled quote
            state = _IN_QUOTED
        elif char in (delimiter, "\r", "\n"):
            state = _START_FIELD
        else:
            state = _IN_FIELD
    return False


class RecordReadError(Exception):
    """Base exception for failures while reading records."""


class StreamError(RecordReadError):
    """Exception raised when the underlying input cannot be lexed or decoded."""

    def __init__(self, rows_read: int, cause: Exception):
        self.rows_read = rows_read
        self.cause = cause
        super().__init__(f"error reading input after {rows_read} rows: {cause}")


class RowError(RecordReadError):
    """Exception raised when a field of a data row is invalid."""

    field_name = "field"

    def __init__(self, row: int, text: str, cause: Exception):
        self.row = row
        self.text = text
        self.cause = cause
        super().__init__(
            f"invalid {self.field_name} found on line {row}: {text!r}: {cause}",
        )


class DateParseError(RowError):
    """Exception raised when the date field does not match the date format."""

    field_name = "time"


class AmountParseError(RowError):
    """Exception raised when the amount field is not a valid minor-unit integer."""

    field_name = "amount"


class RecordReader(ABC):
    """Interface for record readers."""

    @abstractmethod
    def read(self) -> list[Record]:
        """Read all records from the input."""


class CSVRecordReader(RecordReader):
    """Reader for delimiter-separated transaction exports."""

    def __init__(self, stream: IO, config: ReaderConfig | None = None):
        self.stream = stream
        self.config = config or ReaderConfig()

    def read(self) -> list[Record]:
        """
        Read every row of the stream and convert data rows to records.

        Rows with fewer than four fields are skipped. Any invalid date or
        amount aborts the read and no records are returned.

        Returns:
            List of Record objects in input order

        Raises:
            StreamError: If the input cannot be lexed, decoded or read
            DateParseError: If a data row has an invalid date
            AmountParseError: If a data row has an invalid amount
        """
        text_stream, wrapper = self._text_stream()
        try:
            return self._read_rows(text_stream)
        finally:
            # Leave the caller's binary stream open.
            if wrapper is not None:
                wrapper.detach()

    def _text_stream(self) -> tuple[IO[str], io.TextIOWrapper | None]:
        if isinstance(self.stream, (io.RawIOBase, io.BufferedIOBase)):
            wrapper = io.TextIOWrapper(
                self.stream,
                encoding=self.config.encoding,
                newline="",
            )
            return wrapper, wrapper
        return self.stream, None

    def _read_rows(self, text_stream: IO[str]) -> list[Record]:
        if csv.field_size_limit() < MAX_FIELD_SIZE:
            csv.field_size_limit(MAX_FIELD_SIZE)

        # Raw text consumed by the lexer for the current row
        consumed: list[str] = []

        def lines():
            for raw_line in text_stream:
                consumed.append(raw_line)
                yield raw_line

        rows = csv.reader(
            lines(),
            delimiter=self.config.delimiter,
            quotechar='"',
            doublequote=True,
            strict=True,
        )

        records = []
        line = 0
        skipped = 0
        while True:
            try:
                row = next(rows)
            except StopIteration:
                break
            except (csv.Error, UnicodeDecodeError, OSError) as e:
                raise StreamError(line, e) from e

            raw = "".join(consumed)
            consumed.clear()
            if _has_bare_quote(raw, self.config.delimiter):
                cause = csv.Error('bare " in non-quoted field')
                raise StreamError(line, cause) from cause

            # Blank lines are not rows
            if not row:
                continue

            line += 1
            if len(row) < MIN_FIELDS:
                logger.debug(f"Skipping line {line} with {len(row)} fields")
                skipped += 1
                continue

            try:
                time = self._parse_time(row[0])
            except ValueError as e:
                raise DateParseError(line, row[0], e) from e

            text = row[2]

            try:
                amount = self._parse_amount(row[3])
            except (ValueError, OverflowError) as e:
                raise AmountParseError(line, row[3], e) from e

            records.append(Record(time=time, text=text, amount=amount))

        logger.info(f"Read {len(records)} records, skipped {skipped} short rows")
        return records

    def _parse_time(self, text: str) -> date:
        fmt = self.config.date_format
        parsed = datetime.strptime(text, fmt)
        # strptime accepts unpadded day and month; %Y is padded explicitly
        # for years below 1000.
        expected = parsed.strftime(fmt.replace("%Y", f"{parsed.year:04d}"))
        if expected != text:
            raise ValueError(f"time data {text!r} does not match format {fmt!r}")
        return parsed.date()

    def _parse_amount(self, text: str) -> int:
        """Strip both separators and parse the rest as a signed 64-bit integer."""
        digits = text.replace(self.config.decimal_separator, "").replace(
            self.config.thousands_separator,
            "",
        )
        if not _INTEGER_PATTERN.fullmatch(digits):
            raise ValueError(f"invalid syntax: {digits!r}")

        value = int(digits)
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise OverflowError(f"value out of range: {digits!r}")
        return value


def new_reader(stream: IO, config: ReaderConfig | None = None) -> RecordReader:
    """Create the default record reader for a text or binary stream."""
    return CSVRecordReader(stream, config)


def filter_by_date_range(
    records: list[Record],
    start_date: date,
    end_date: date,
) -> list[Record]:
    """
    Filter records by date range.

    Args:
        records: List of records to filter
        start_date: Start date (inclusive)
        end_date: End date (inclusive)

    Returns:
        Filtered list of records
    """
    return [r for r in records if start_date <= r.time <= end_date]
