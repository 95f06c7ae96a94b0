"""
Data models for transaction record parsing.
"""

import codecs
from dataclasses import dataclass, fields
from datetime import date
from typing import Any


def format_minor_units(amount: int, separator: str = ",") -> str:
    """Render a minor-unit amount with a separator before the last two digits."""
    sign = "-" if amount < 0 else ""
    digits = str(abs(amount)).rjust(3, "0")
    return f"{sign}{digits[:-2]}{separator}{digits[-2:]}"


@dataclass(frozen=True)
class Record:
    """Represents a single transaction line."""

    time: date
    text: str
    amount: int

    def string_amount(self, separator: str = ",") -> str:
        return format_minor_units(self.amount, separator)

    def __str__(self) -> str:
        return f"{self.time.strftime('%Y-%m-%d')}\t{self.text}\t{self.string_amount()}"


@dataclass(frozen=True)
class ReaderConfig:
    """Locale and layout settings for a record reader."""

    decimal_separator: str = "."
    thousands_separator: str = ","
    delimiter: str = ";"
    date_format: str = "%d.%m.%Y"
    encoding: str = "utf-8"

    def __post_init__(self):
        for name in ("decimal_separator", "thousands_separator", "delimiter"):
            value = getattr(self, name)
            if not isinstance(value, str) or len(value) != 1:
                raise ValueError(f"{name} must be a single character, got {value!r}")

        if self.decimal_separator == self.thousands_separator:
            raise ValueError(
                f"decimal and thousands separators must differ, both are {self.decimal_separator!r}",
            )

        if self.delimiter in ('"', "\r", "\n"):
            raise ValueError(f"invalid delimiter {self.delimiter!r}")

        if self.delimiter in (self.decimal_separator, self.thousands_separator):
            raise ValueError(
                f"delimiter {self.delimiter!r} clashes with a numeric separator",
            )

        if not isinstance(self.date_format, str) or not self.date_format:
            raise ValueError(
                f"date_format must be a non-empty string, got {self.date_format!r}",
            )

        if not isinstance(self.encoding, str):
            raise ValueError(f"encoding must be a string, got {self.encoding!r}")
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ValueError(f"unknown encoding {self.encoding!r}") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReaderConfig":
        """Create ReaderConfig from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
