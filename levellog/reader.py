"""Read recent records back from a level's current file."""

import json
import logging
import os
from collections import deque

from levellog.config import Config
from levellog.models import Level, LogRecord
from levellog.rotator import current_path

logger = logging.getLogger(__name__)


class LogReadError(Exception):
    """The current file for a level could not be read or parsed."""

    def __init__(self, level: str, path: str, reason: str):
        super().__init__(f"Failed to read {level} log {path}: {reason}")
        self.level = level
        self.path = path
        self.reason = reason


class LogFileNotFound(LogReadError):
    """The current file for a level does not exist."""


def read_recent(config: Config, level, limit: int = 50) -> list[LogRecord]:
    """Return the last `limit` records of a level's current file, oldest first.

    Raises LogFileNotFound if the file is absent, LogReadError if it cannot be
    read or contains a line that is not a valid record.
    """
    try:
        lvl = level if isinstance(level, Level) else Level(str(level).lower())
    except ValueError:
        path = os.path.join(config.log_dir, f"{level}.log")
        raise LogFileNotFound(str(level), path, "unknown level") from None
    path = current_path(config, lvl)

    recent: deque[LogRecord] = deque(maxlen=max(limit, 0))
    try:
        with open(path, "r", encoding="utf-8") as f:
            if limit <= 0:
                return []
            for line_num, line in enumerate(f, 1):
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    recent.append(LogRecord.from_dict(json.loads(stripped)))
                except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                    raise LogReadError(lvl.value, path, f"line {line_num}: {e}") from e
    except FileNotFoundError:
        raise LogFileNotFound(lvl.value, path, "file not found") from None
    except (OSError, UnicodeDecodeError) as e:
        raise LogReadError(lvl.value, path, str(e)) from e

    logger.debug("Read %d recent %s records from %s", len(recent), lvl.value, path)
    return list(recent)
