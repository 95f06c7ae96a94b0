"""
Command-line interface for reading transaction exports.
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path

from .csv_reader import RecordReadError, filter_by_date_range, new_reader
from .models import ReaderConfig
from .output_formatter import LineFormatter, SummaryFormatter

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d.%m.%Y"
OUTPUT_FORMATS = ("lines", "summary", "both")


def load_config(config_file: str | None) -> dict:
    """Load CLI configuration from JSON file."""
    if not config_file:
        return {}

    config_path = Path(config_file)
    if not config_path.exists():
        logger.debug(f"CLI config file {config_file} does not exist")
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            config = json.load(f)
        logger.debug(f"Loaded CLI config from {config_file}")
        return config
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in CLI config file {config_file}: {e}")
        return {}
    except OSError as e:
        logger.warning(f"Failed to load CLI config from {config_file}: {e}")
        return {}


def _parse_date(parser: argparse.ArgumentParser, value: str | None) -> date | None:
    if not value:
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        parser.error(f"invalid date {value!r}, expected DD.MM.YYYY")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Read semicolon-delimited transaction exports",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    parser.add_argument(
        "--config",
        help="Path to CLI configuration file (contains reader settings and output format)",
    )

    parser.add_argument(
        "csv_file",
        help="Path to the CSV export",
    )

    parser.add_argument(
        "--start-date",
        help="Start date filter (DD.MM.YYYY format)",
    )

    parser.add_argument(
        "--end-date",
        help="End date filter (DD.MM.YYYY format)",
    )

    parser.add_argument(
        "--output-format",
        choices=OUTPUT_FORMATS,
        help="Output format (default: lines, or output_format from config)",
    )

    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    config = load_config(args.config)

    try:
        reader_config = ReaderConfig.from_dict(config.get("reader", {}))
    except (ValueError, TypeError, AttributeError) as e:
        logger.error(f"Error: invalid reader configuration: {e}")
        sys.exit(1)

    output_format = args.output_format or config.get("output_format", "lines")
    if output_format not in OUTPUT_FORMATS:
        logger.error(
            f"Error: output_format must be one of {', '.join(OUTPUT_FORMATS)}, got {output_format!r}",
        )
        sys.exit(1)

    start_date = _parse_date(parser, args.start_date)
    end_date = _parse_date(parser, args.end_date)

    # Read the CSV file
    try:
        with open(args.csv_file, "rb") as f:
            records = new_reader(f, reader_config).read()
    except (RecordReadError, OSError) as e:
        logger.error(f"Error reading file: {e}")
        sys.exit(1)

    if start_date or end_date:
        records = filter_by_date_range(
            records,
            start_date or date.min,
            end_date or date.max,
        )

    if output_format in ["lines", "both"]:
        logger.info(LineFormatter.format_lines(records))

    if output_format == "both":
        logger.info("\n" + "=" * 50 + "\n")

    if output_format in ["summary", "both"]:
        logger.info(SummaryFormatter().format_summary(records))


if __name__ == "__main__":
    main()
