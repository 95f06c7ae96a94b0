"""
Output formatting for parsed records.
"""

import logging

import pandas as pd

from .models import Record, format_minor_units

logger = logging.getLogger(__name__)

COLUMNS = ["time", "text", "amount"]


def records_to_frame(records: list[Record]) -> pd.DataFrame:
    """Convert records to a DataFrame with time, text and amount columns."""
    df = pd.DataFrame(
        [(r.time, r.text, r.amount) for r in records],
        columns=COLUMNS,
    )
    df["time"] = pd.to_datetime(df["time"])
    df["amount"] = df["amount"].astype("int64")
    return df


class LineFormatter:
    """Formats records as tab-separated lines."""

    @staticmethod
    def format_lines(records: list[Record]) -> str:
        return "\n".join(str(record) for record in records)


class SummaryFormatter:
    """Formats summary information."""

    def __init__(self, separator: str = ","):
        self.separator = separator

    def format_summary(self, records: list[Record]) -> str:
        """
        Format a summary of the records.

        Totals are summed on integer minor units, never on floats.

        Args:
            records: List of Record objects

        Returns:
            Multi-line summary string
        """
        df = records_to_frame(records)

        income = int(df.loc[df["amount"] >= 0, "amount"].sum())
        expenses = int(df.loc[df["amount"] < 0, "amount"].sum())

        lines = []
        lines.append("=== Record Summary ===")
        lines.append(f"Total records: {len(df)}")
        lines.append(f"Total income: {self._format(income)}")
        lines.append(f"Total expenses: {self._format(abs(expenses))}")
        lines.append(f"Net balance: {self._format(income + expenses)}")

        if not df.empty:
            monthly = df.groupby(df["time"].dt.strftime("%Y-%m"))["amount"].sum()
            logger.debug(f"Monthly totals: {monthly.to_dict()}")
            lines.append("")
            lines.append("Monthly totals:")
            for month, total in monthly.items():
                lines.append(f"  {month}: {self._format(int(total))}")

        return "\n".join(lines)

    def _format(self, amount: int) -> str:
        return format_minor_units(amount, self.separator)
