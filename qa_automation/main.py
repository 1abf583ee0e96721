"""Command-line entry point for qa-automation."""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

import structlog

from .config import NamingStrategy, ScriptLanguage, load_config
from .processor import SessionProcessor
from .recording.models import Session
from .utils.logging import configure_logging

logger = structlog.get_logger()


def load_session(path: str) -> Session:
    """Load a recorded session from its JSON export."""
    with open(path, encoding="utf-8") as f:
        return Session.from_dict(json.load(f))


def process_command(args: argparse.Namespace) -> int:
    """Preview (and optionally apply) the changes for a recorded session."""
    config = load_config(
        args.project_root,
        naming_strategy=args.strategy,
        test_language=args.language,
    )
    configure_logging(config.log_level, json_format=config.json_logs)

    try:
        session = load_session(args.session)
    except (OSError, ValueError) as e:
        logger.error("Could not load session", path=args.session, error=str(e))
        return 1

    processor = SessionProcessor(config)
    result = processor.process_session(session)

    print(processor.dry_run_report(result), end="")
    if args.show_diff:
        for change in result.file_changes:
            print(change.diff, end="")

    exit_code = 0 if result.success else 1

    if args.apply and result.success:
        applied = processor.apply_result(result)
        print(f"Applied {len(applied.applied)} file(s)")
        for backup in applied.backup_paths:
            print(f"  backup: {backup}")
        if not applied.success:
            for error in applied.errors:
                print(f"  error: {error}", file=sys.stderr)
            exit_code = 1

    if args.report:
        report_path = Path(args.report)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2, default=str)
        logger.info("Report saved", path=str(report_path))

    return exit_code


def rollback_command(args: argparse.Namespace) -> int:
    """Restore source files from backups written by ``process --apply``."""
    config = load_config(args.project_root)
    configure_logging(config.log_level, json_format=config.json_logs)

    result = SessionProcessor(config).rollback(args.backups)
    for restored in result.restored:
        print(f"Restored {restored}")
    for error in result.errors:
        print(f"error: {error}", file=sys.stderr)
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qa-automation",
        description="Turn recorded React sessions into test ids and Playwright tests",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    process = subparsers.add_parser("process", help="Process a recorded session")
    process.add_argument("session", help="Path to the session JSON export")
    process.add_argument(
        "--project-root", "-p",
        help="Root of the target application (default: discovered from cwd)"
    )
    process.add_argument(
        "--strategy",
        choices=[s.value for s in NamingStrategy],
        help="Test id naming strategy"
    )
    process.add_argument(
        "--language",
        choices=[l.value for l in ScriptLanguage],
        help="Generated test language"
    )
    process.add_argument(
        "--apply",
        action="store_true",
        help="Write source changes and tests (default: preview only)"
    )
    process.add_argument("--report", help="Write a JSON report to this path")
    process.add_argument(
        "--show-diff",
        action="store_true",
        help="Print unified diffs of the source changes"
    )
    process.set_defaults(handler=process_command)

    rollback = subparsers.add_parser("rollback", help="Restore files from backups")
    rollback.add_argument("backups", nargs="+", help="Backup file paths to restore")
    rollback.add_argument("--project-root", "-p", help="Root of the target application")
    rollback.set_defaults(handler=rollback_command)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line interface."""
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
