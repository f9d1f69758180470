"""Live log monitor — tails the per-level files and renders new records as they appear."""

import argparse
import logging
import signal
import sys
import threading

from levellog.config import ConfigError, load_config
from levellog.tailer import LogTailer

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [log-monitor] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Watch log files for new entries")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--log-dir", default=None, help="Directory containing log files")
    parser.add_argument("--levels", default=None,
                        help="Comma-separated levels to watch (default: all)")
    parser.add_argument("--interval", type=float, default=None,
                        help="Polling interval in seconds (default: 0.1)")
    parser.add_argument("--from-start", action="store_true",
                        help="Render existing content before following")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_cli_parser().parse_args(argv)
    try:
        config = load_config(
            args.config,
            log_dir=args.log_dir,
            levels=args.levels,
            poll_interval=args.interval,
        )
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    shutdown_event = threading.Event()

    def signal_handler(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    tailer = LogTailer(config, emit=lambda line: print(line, flush=True), color=not args.no_color)
    print("Log Monitor - Watching for new log entries...\n")
    for level, path in tailer.monitored_files():
        print(f"Monitoring {level.label} logs: {path}")
    print("\nWaiting for new log entries... (Press Ctrl+C to stop)\n", flush=True)

    tailer.prime(from_start=args.from_start)
    tailer.run(shutdown_event)

    print("\nLog monitoring stopped.", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
