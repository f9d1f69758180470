"""Log record model, level enumeration, and line parsing."""

import json
import os
import socket
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class Level(Enum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"

    @property
    def label(self) -> str:
        return self.value.upper()


def normalize_level(value) -> Level:
    """Map a level name (any case) or Level to a Level. Unknown values become INFO."""
    if isinstance(value, Level):
        return value
    if isinstance(value, str):
        try:
            return Level(value.strip().lower())
        except ValueError:
            pass
    return Level.INFO


@dataclass(frozen=True)
class LogRecord:
    timestamp: str       # ISO 8601
    level: str           # ERROR, WARN, INFO, DEBUG
    message: str
    data: dict | None = None
    pid: int = 0
    hostname: str = ""

    @classmethod
    def create(cls, level, message: str, data: dict | None = None) -> "LogRecord":
        """Stamp a new record with the current time and process identity."""
        now = datetime.now(timezone.utc)
        return cls(
            timestamp=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            level=normalize_level(level).label,
            message=str(message),
            data=data,
            pid=os.getpid(),
            hostname=socket.gethostname(),
        )

    def to_dict(self) -> dict:
        d = {
            "timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
        }
        if self.data is not None:
            d["data"] = self.data
        d["pid"] = self.pid
        d["hostname"] = self.hostname
        return d

    def to_json(self) -> str:
        """Compact single-line JSON; json.dumps escapes embedded newlines."""
        return json.dumps(self.to_dict(), separators=(",", ":"), default=str)

    @classmethod
    def from_dict(cls, d: dict) -> "LogRecord":
        """Rebuild a record. Raises KeyError/TypeError on missing or malformed fields."""
        if not isinstance(d, dict):
            raise TypeError(f"expected a JSON object, got {type(d).__name__}")
        for key in ("timestamp", "level", "message"):
            if not isinstance(d[key], str):
                raise TypeError(f"field {key!r} must be a string")
        data = d.get("data")
        return cls(
            timestamp=d["timestamp"],
            level=d["level"],
            message=d["message"],
            data=data,
            pid=int(d.get("pid", 0)),
            hostname=str(d.get("hostname", "")),
        )

    def parsed_time(self) -> datetime | None:
        try:
            return datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))
        except ValueError:
            return None


@dataclass(frozen=True)
class Parsed:
    record: LogRecord


@dataclass(frozen=True)
class Unparsed:
    raw: str


def parse_line(line: str) -> Parsed | Unparsed:
    """Parse one newline-delimited JSON record, falling back to the raw text."""
    stripped = line.strip()
    try:
        return Parsed(LogRecord.from_dict(json.loads(stripped)))
    except (json.JSONDecodeError, KeyError, TypeError, ValueError):
        return Unparsed(stripped)
