"""CLI log inspector — file statistics, recent records, and clearing."""

import argparse
import json
import logging
import sys

from levellog.config import ConfigError, load_config
from levellog.formatter import format_parsed
from levellog.reader import LogFileNotFound, LogReadError
from levellog.writer import LogWriter

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [log-inspector] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect leveled log files")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--log-dir", default=None, help="Directory containing log files")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--stats", action="store_true", help="Show per-level file statistics")
    group.add_argument("--recent", metavar="LEVEL", help="Show the most recent records of a level")
    group.add_argument("--clear", metavar="LEVEL", help="Clear a level's logs, or 'all'")
    parser.add_argument("--limit", type=int, default=50,
                        help="Number of records for --recent (default: 50)")
    parser.add_argument("--json", action="store_true", help="Print records as JSON lines")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config, log_dir=args.log_dir)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    writer = LogWriter(config)

    if args.stats:
        print(json.dumps(writer.get_log_stats(), indent=2))

    elif args.recent:
        try:
            records = writer.read_recent(args.recent, args.limit)
        except LogFileNotFound:
            print(f"Error: log file not found for level '{args.recent}'", file=sys.stderr)
            return 1
        except LogReadError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        for record in records:
            print(record.to_json() if args.json else format_parsed(record, color=False))

    elif args.clear:
        try:
            deleted = writer.clear_logs(args.clear)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Cleared {args.clear} logs ({len(deleted)} rotated file(s) removed)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
