"""Leveled log writer: console echo plus per-level JSON files with size-based rotation."""

import logging
import os
import sys
import threading
from dataclasses import replace
from datetime import datetime, timezone

from levellog.config import Config
from levellog.formatter import format_console
from levellog.models import Level, LogRecord, normalize_level
from levellog.reader import read_recent
from levellog.rotator import clear_level, current_path, rotate, rotated_generations

logger = logging.getLogger(__name__)


class LogWriter:
    """Synchronous writer: by the time log() returns the record is on disk or the fault is reported.

    Each level has its own lock around "check size -> rotate -> append", so
    within one writer instance records of a level land in call order. Separate
    processes sharing a directory are not coordinated.
    """

    def __init__(self, config: Config, stream=None, color: bool = True):
        self._config = config
        self._stream = stream
        self._color = color
        self._locks = {level: threading.Lock() for level in Level}
        # Fatal on failure: the only I/O fault allowed to propagate.
        os.makedirs(config.log_dir, exist_ok=True)

    @property
    def config(self) -> Config:
        return self._config

    def log(self, level, message: str, data: dict | None = None) -> LogRecord:
        """Emit one record. Unknown levels are logged as info. Never raises."""
        lvl = normalize_level(level)
        record = LogRecord.create(lvl, message, data)
        try:
            line = record.to_json()
        except (TypeError, ValueError) as e:
            # Non-string keys, circular references: keep the record, store data as text.
            logger.error("Failed to serialize log data: %s", e)
            record = replace(record, data={"unserializable": repr(data)})
            line = record.to_json()
        try:
            print(format_console(record, color=self._color), file=self._stream or sys.stdout)
        except (OSError, ValueError) as e:
            logger.error("Failed to echo log record: %s", e)
        self._write(lvl, line)
        return record

    def _write(self, level: Level, line: str):
        with self._locks[level]:
            try:
                rotated = rotate(self._config, level)
                if rotated:
                    logger.info("Rotated %s log to %s", level.value, rotated)
                with open(current_path(self._config, level), "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError as e:
                logger.error("Failed to write to log file: %s", e)

    def error(self, message: str, data: dict | None = None) -> LogRecord:
        return self.log(Level.ERROR, message, data)

    def warn(self, message: str, data: dict | None = None) -> LogRecord:
        return self.log(Level.WARN, message, data)

    def info(self, message: str, data: dict | None = None) -> LogRecord:
        return self.log(Level.INFO, message, data)

    def debug(self, message: str, data: dict | None = None) -> LogRecord:
        return self.log(Level.DEBUG, message, data)

    def get_log_stats(self) -> dict[str, dict]:
        """Per-level current file status; absent files report exists=False."""
        stats = {}
        for level in Level:
            path = current_path(self._config, level)
            rotated = len(rotated_generations(self._config, level))
            try:
                st = os.stat(path)
            except OSError as e:
                if not isinstance(e, FileNotFoundError):
                    logger.warning("Failed to stat %s: %s", path, e)
                stats[level.value] = {"exists": False, "rotated": rotated}
                continue
            modified = datetime.fromtimestamp(st.st_mtime, timezone.utc)
            stats[level.value] = {
                "exists": True,
                "size": st.st_size,
                "modified": modified.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
                "rotated": rotated,
            }
        return stats

    def clear_logs(self, level: str | Level | None = None) -> list[str]:
        """Empty the current file and delete rotated generations.

        `None` or "all" clears every level. Unknown level names raise ValueError.
        Returns the deleted generation paths.
        """
        if level is None or (isinstance(level, str) and level.lower() == "all"):
            targets = list(Level)
        elif isinstance(level, Level):
            targets = [level]
        else:
            try:
                targets = [Level(level.lower())]
            except (AttributeError, ValueError):
                raise ValueError(f"Invalid log level: {level!r}") from None

        deleted = []
        for lvl in targets:
            with self._locks[lvl]:
                deleted.extend(clear_level(self._config, lvl))
        logger.info("Cleared %s log(s), removed %d rotated file(s)",
                    ", ".join(t.value for t in targets), len(deleted))
        return deleted

    def read_recent(self, level, limit: int = 50) -> list[LogRecord]:
        return read_recent(self._config, level, limit)
