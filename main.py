"""Demo log producer — emits leveled records through LogWriter with automatic rotation."""

import argparse
import logging
import random
import signal
import sys
import time
import uuid

from levellog.config import ConfigError, load_config
from levellog.models import Level
from levellog.writer import LogWriter

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [log-producer] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_running = True


def _signal_handler(sig, _frame):
    global _running
    logger.info("Shutdown signal received (signal %d), stopping...", sig)
    _running = False


LEVELS = [Level.INFO, Level.INFO, Level.INFO, Level.INFO, Level.DEBUG, Level.WARN, Level.ERROR]
SERVICES = ["auth-api", "order-svc", "payment-gw", "user-svc", "catalog-api"]
MESSAGES = {
    Level.INFO: [
        "Incoming request",
        "Request completed",
        "Health check requested",
        "Cache hit for user session",
    ],
    Level.DEBUG: [
        "Entering request handler",
        "Parsed request body",
        "Token validation started",
    ],
    Level.WARN: [
        "Route not found",
        "Slow query detected (>500ms)",
        "Connection pool nearing capacity",
    ],
    Level.ERROR: [
        "Unhandled error",
        "Failed to connect to database",
        "Timeout waiting for upstream response",
    ],
}


def emit_random(writer: LogWriter):
    level = random.choice(LEVELS)
    data = {
        "service": random.choice(SERVICES),
        "request_id": uuid.uuid4().hex[:8],
        "duration_ms": random.randint(1, 900),
    }
    writer.log(level, random.choice(MESSAGES[level]), data)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Emit demo log records with size-based rotation")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--log-dir", default=None, help="Directory for log files")
    parser.add_argument("--max-file-size", type=int, default=None,
                        help="Rotation threshold in bytes")
    parser.add_argument("--max-files", type=int, default=None,
                        help="Rotated generations to keep per level")
    parser.add_argument("--count", type=int, default=0,
                        help="Stop after N records (default: run until interrupted)")
    parser.add_argument("--delay", type=float, default=0.05,
                        help="Seconds between records (default: 0.05)")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    return parser


def main(argv: list[str] | None = None) -> int:
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    args = build_cli_parser().parse_args(argv)
    try:
        config = load_config(
            args.config,
            log_dir=args.log_dir,
            max_file_size_bytes=args.max_file_size,
            max_files=args.max_files,
        )
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    logger.info("Config: log_dir=%s, max_size=%d bytes, max_files=%d",
                config.log_dir, config.max_file_size_bytes, config.max_files)

    writer = LogWriter(config, color=not args.no_color)
    written = 0
    try:
        while _running and (args.count <= 0 or written < args.count):
            emit_random(writer)
            written += 1
            if args.delay > 0:
                time.sleep(args.delay)
    except KeyboardInterrupt:
        pass

    logger.info("Shut down cleanly. Total records written: %d", written)
    return 0


if __name__ == "__main__":
    sys.exit(main())
