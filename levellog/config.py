"""Configuration module — frozen dataclass loaded from an optional YAML file and env vars."""

import logging
import os
from dataclasses import dataclass, field, fields

import yaml

from levellog.models import Level

logger = logging.getLogger(__name__)

# Order the monitor walks the files in.
DEFAULT_LEVELS = (Level.INFO, Level.ERROR, Level.WARN, Level.DEBUG)


class ConfigError(ValueError):
    """Raised when configuration values are missing, malformed, or out of range."""


@dataclass(frozen=True)
class Config:
    log_dir: str = "./logs"
    max_file_size_bytes: int = 5 * 1024 * 1024  # 5 MB
    max_files: int = 5
    poll_interval: float = 0.1
    levels: tuple[Level, ...] = field(default=DEFAULT_LEVELS)

    def __post_init__(self):
        if self.max_file_size_bytes <= 0:
            raise ConfigError("max_file_size_bytes must be positive")
        if self.max_files < 1:
            raise ConfigError("max_files must be at least 1")
        if self.poll_interval <= 0:
            raise ConfigError("poll_interval must be positive")
        if not self.levels:
            raise ConfigError("at least one level must be configured")


def parse_levels(raw) -> tuple[Level, ...]:
    """Parse a comma-separated string or list of level names. Unknown names are rejected."""
    if isinstance(raw, str):
        names = [p.strip() for p in raw.split(",") if p.strip()]
    elif isinstance(raw, (list, tuple)):
        names = [p.value if isinstance(p, Level) else str(p).strip() for p in raw]
    else:
        raise ConfigError(f"levels must be a list or comma-separated string, got {raw!r}")
    levels = []
    for name in names:
        try:
            level = Level(name.lower())
        except ValueError:
            raise ConfigError(f"Unknown log level: {name!r}") from None
        if level not in levels:
            levels.append(level)
    return tuple(levels)


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path or the file is missing."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def _coerce(name: str, value, cast):
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid value for {name}: {value!r}") from None


def load_config(path: str | None = None, **overrides) -> Config:
    """Build Config from defaults <- YAML file <- env vars <- keyword overrides."""
    path = path or os.environ.get("CONFIG_PATH")
    known = {f.name for f in fields(Config)}
    kwargs: dict = {}

    for key, value in load_yaml_config(path).items():
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        kwargs[key] = value

    env = os.environ
    if "LOG_DIR" in env:
        kwargs["log_dir"] = env["LOG_DIR"]
    # MAX_FILE_SIZE_BYTES takes precedence over MAX_FILE_SIZE_MB
    if "MAX_FILE_SIZE_BYTES" in env:
        kwargs["max_file_size_bytes"] = env["MAX_FILE_SIZE_BYTES"]
    elif "MAX_FILE_SIZE_MB" in env:
        kwargs["max_file_size_bytes"] = int(
            _coerce("MAX_FILE_SIZE_MB", env["MAX_FILE_SIZE_MB"], float) * 1024 * 1024
        )
    if "MAX_FILES" in env:
        kwargs["max_files"] = env["MAX_FILES"]
    if "POLL_INTERVAL" in env:
        kwargs["poll_interval"] = env["POLL_INTERVAL"]
    if "LOG_LEVELS" in env:
        kwargs["levels"] = env["LOG_LEVELS"]

    kwargs.update({k: v for k, v in overrides.items() if v is not None})

    if "log_dir" in kwargs:
        if not isinstance(kwargs["log_dir"], (str, os.PathLike)) or not str(kwargs["log_dir"]):
            raise ConfigError(f"Invalid value for log_dir: {kwargs['log_dir']!r}")
        kwargs["log_dir"] = str(kwargs["log_dir"])
    if "max_file_size_bytes" in kwargs:
        kwargs["max_file_size_bytes"] = _coerce(
            "max_file_size_bytes", kwargs["max_file_size_bytes"], int
        )
    if "max_files" in kwargs:
        kwargs["max_files"] = _coerce("max_files", kwargs["max_files"], int)
    if "poll_interval" in kwargs:
        kwargs["poll_interval"] = _coerce("poll_interval", kwargs["poll_interval"], float)
    if "levels" in kwargs:
        kwargs["levels"] = parse_levels(kwargs["levels"])

    return Config(**kwargs)
