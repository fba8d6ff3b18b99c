"""
ReviewPulse - Review Export Ingestion

CLI entry point for importing, filtering and summarizing review datasets.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from src.pipeline import ReviewPipeline
from src.utils.dates import parse_reference_date
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ReviewPulse - review export ingestion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Merge a scraper export into a stored dataset
  python main.py import --dataset mena-q7 --name "Mena Q7" exports/q7.csv

  # Print the last month of a dataset as canonical CSV
  python main.py filter --dataset mena-q7 --window 1

  # Week-over-week summary against a fixed reference date
  python main.py stats --dataset mena-q7 --mode week --reference-date 2026-01-11T12:00:00
        """
    )

    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    parser.add_argument(
        "--reference-date",
        default=settings.REFERENCE_DATE,
        help="ISO instant relative dates are resolved against (default: now)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Merge a CSV or JSON export into a dataset")
    import_parser.add_argument("--dataset", required=True, help="Dataset id")
    import_parser.add_argument("--name", help="Display name (defaults to dataset id)")
    import_parser.add_argument("path", help="Export file (.csv, or .json API payload)")

    filter_parser = subparsers.add_parser("filter", help="Print a dataset restricted to a time window")
    filter_parser.add_argument("--dataset", required=True, help="Dataset id")
    filter_parser.add_argument(
        "--window",
        default="all",
        choices=settings.TIME_FILTER_OPTIONS,
        help="Trailing window in months (default: all)"
    )

    stats_parser = subparsers.add_parser("stats", help="Summarize a dataset for a time window")
    stats_parser.add_argument("--dataset", required=True, help="Dataset id")
    stats_parser.add_argument(
        "--window",
        default="1",
        choices=settings.TIME_FILTER_OPTIONS,
        help="Trailing window in months (default: 1)"
    )
    stats_parser.add_argument("--mode", default="month", choices=["month", "week"])

    return parser


def run(args: argparse.Namespace) -> int:
    logger = logging.getLogger(__name__)
    pipeline = ReviewPipeline(data_root=args.data_root)

    if args.command == "import":
        path = Path(args.path)
        text = path.read_text(encoding="utf-8")
        name = args.name or args.dataset
        if path.suffix.lower() == ".json":
            dataset = pipeline.import_comments(args.dataset, name, json.loads(text))
        else:
            dataset = pipeline.import_csv(args.dataset, name, text)
        print(f"Stored {dataset.id} ({len(pipeline.extractor.extract(dataset.csv_text))} reviews)")
        return 0

    now = parse_reference_date(args.reference_date)

    if args.command == "filter":
        filtered = pipeline.filtered_csv(args.dataset, args.window, now)
        if filtered is None:
            logger.error(f"Unknown dataset: {args.dataset}")
            return 1
        print(filtered)
        return 0

    summary = pipeline.summarize(args.dataset, args.window, now, mode=args.mode)
    if summary is None:
        logger.error(f"Unknown dataset: {args.dataset}")
        return 1

    print(f"Reviews: {summary.total_reviews}")
    print(f"Average rating: {summary.average_rating:.2f}")
    if summary.period_change is not None:
        print(f"Previous period: {summary.previous_total}")
        print(f"Change: {summary.period_change:+.1f}%")
    return 0


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        sys.exit(run(args))

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        print(f"\n❌ Command failed: {e}", file=sys.stderr)
        print(f"Check {settings.LOG_FILE} for details", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()


# Design Rationale and Trade-offs:
#
# 1. Why subcommands instead of one flag-driven command?
#    - import, filter and stats take different arguments
#    - Each maps onto one ReviewPipeline call
#    - Trade-off: Slightly longer invocations
#
# 2. Why log to stderr and a file?
#    - stdout carries the filtered CSV, so it can be piped
#    - file: Debugging after the run
#    - Trade-off: Double I/O, but logs are small
#
# 3. Why resolve "now" here and nowhere else?
#    - Library calls take `now` explicitly and stay deterministic
#    - REVIEWPULSE_REFERENCE_DATE pins it for reproducible runs
#    - Trade-off: Every library caller must pass a reference instant
#
# 4. Why exit codes (0 for success, 1 for failure)?
#    - Shell scripting integration
#    - Trade-off: Failure causes are only in the log
