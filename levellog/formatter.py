"""Console formatters — ANSI-colored record lines and raw fallback."""

import json

from levellog.models import Level, LogRecord, Parsed, Unparsed

# ANSI color codes
COLORS = {
    Level.ERROR: "\033[31m",  # red
    Level.WARN: "\033[33m",   # yellow
    Level.INFO: "\033[36m",   # cyan
    Level.DEBUG: "\033[35m",  # magenta
}
RESET = "\033[0m"
RAW_PREFIX = "[RAW]"


def _color_for(level_label: str) -> str:
    try:
        return COLORS[Level(level_label.lower())]
    except ValueError:
        return ""


def _local_time(record: LogRecord) -> str:
    ts = record.parsed_time()
    if ts is None:
        return record.timestamp
    return ts.astimezone().strftime("%H:%M:%S")


def _data_json(data) -> str:
    return json.dumps(data, default=str)


def _prefix(record: LogRecord, color: bool) -> str:
    head = f"[{_local_time(record)}] [{record.level}]"
    code = _color_for(record.level) if color else ""
    if code:
        return f"{code}{head}{RESET}"
    return head


def format_console(record: LogRecord, color: bool = True) -> str:
    """Line echoed by the writer when a record is emitted."""
    line = f"{_prefix(record, color)} {record.message}"
    if record.data is not None:
        line += f" {_data_json(record.data)}"
    return line


def format_parsed(record: LogRecord, color: bool = True) -> str:
    """Line rendered by the monitor for a parsed record."""
    line = f"{_prefix(record, color)} {record.message}"
    if record.data:
        line += f" - {_data_json(record.data)}"
    return line


def format_unparsed(raw: str) -> str:
    return f"{RAW_PREFIX} {raw}"


def render(result: Parsed | Unparsed, color: bool = True) -> str:
    if isinstance(result, Parsed):
        return format_parsed(result.record, color=color)
    return format_unparsed(result.raw)
