#!/usr/bin/env python3
"""
Civic Triage CLI Application

Command-line interface for complaint classification and insights.
"""

import argparse
import json
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from civic_triage import __version__, get_logger
from civic_triage.analytics import InsightGenerator
from civic_triage.classification import BatchClassifier, get_complaint_classifier

logger = get_logger(__name__)


def _load_records(path: str) -> list:
    with open(path, encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"{path} must contain a JSON array")
    return records


def _dump(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def classify_complaint(title: str, description: str) -> dict:
    """Classify a single complaint."""
    result = get_complaint_classifier().classify(title, description)
    return result.to_dict()


def classify_batch(path: str, batch_size: int = None, workers: int = None) -> list:
    """Classify every complaint in a JSON file."""
    records = _load_records(path)
    run = BatchClassifier(batch_size=batch_size, max_workers=workers).run(records)
    logger.info(f"Batch priorities: {run.priority_counts}")
    return run.to_list()


def build_insights(path: str) -> dict:
    """Aggregate insights from classified complaints in a JSON file."""
    records = _load_records(path)
    return InsightGenerator().generate_insights(records).to_dict()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Civic Triage - municipal complaint classification")
    parser.add_argument("--version", action="version", version=f"Civic Triage {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Classify command
    classify_parser = subparsers.add_parser("classify", help="Classify a single complaint")
    classify_parser.add_argument("--title", default="", help="Complaint title")
    classify_parser.add_argument("--description", default="", help="Complaint description")

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Classify complaints from a JSON file")
    batch_parser.add_argument("file", help="JSON array of {id, title, description}")
    batch_parser.add_argument("--batch-size", type=int, default=None,
                              help="Complaints per chunk")
    batch_parser.add_argument("--workers", type=int, default=None,
                              help="Worker threads")

    # Insights command
    insights_parser = subparsers.add_parser("insights", help="Summarize classified complaints")
    insights_parser.add_argument("file", help="JSON array of classified complaints or batch output")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "classify":
            _dump(classify_complaint(args.title, args.description))
        elif args.command == "batch":
            _dump(classify_batch(args.file, args.batch_size, args.workers))
        elif args.command == "insights":
            _dump(build_insights(args.file))
    except KeyboardInterrupt:
        print("\n❌ Interrupted by user")
        return 130
    except (OSError, ValueError) as e:
        logger.error(f"Command failed: {e}")
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
