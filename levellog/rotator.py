"""Per-level file layout, size-based rotation, and clearing."""

import logging
import os

from levellog.config import Config
from levellog.models import Level

logger = logging.getLogger(__name__)


def current_path(config: Config, level: Level) -> str:
    return os.path.join(config.log_dir, f"{level.value}.log")


def rotated_path(config: Config, level: Level, generation: int) -> str:
    return os.path.join(config.log_dir, f"{level.value}.{generation}.log")


def rotated_generations(config: Config, level: Level) -> list[str]:
    """Existing rotated files for a level, newest (generation 1) first."""
    paths = []
    for gen in range(1, config.max_files + 1):
        path = rotated_path(config, level, gen)
        if os.path.exists(path):
            paths.append(path)
    return paths


def should_rotate(config: Config, level: Level) -> bool:
    try:
        return os.path.getsize(current_path(config, level)) > config.max_file_size_bytes
    except FileNotFoundError:
        return False


def rotate(config: Config, level: Level) -> str | None:
    """Rotate the current file if it has grown past the threshold.

    The oldest retained generation (max_files - 1) is deleted, the remaining
    generations shift up by one, and the current file becomes generation 1.
    No current file exists afterwards until the next append recreates it.
    Returns the generation-1 path if rotation occurred.
    """
    if not should_rotate(config, level):
        return None

    oldest = config.max_files - 1
    if oldest >= 1:
        oldest_path = rotated_path(config, level, oldest)
        if os.path.exists(oldest_path):
            os.remove(oldest_path)
            logger.debug("Aged out %s", oldest_path)

    for gen in range(config.max_files - 2, 0, -1):
        src = rotated_path(config, level, gen)
        if os.path.exists(src):
            os.replace(src, rotated_path(config, level, gen + 1))

    newest = rotated_path(config, level, 1)
    os.replace(current_path(config, level), newest)
    return newest


def clear_level(config: Config, level: Level) -> list[str]:
    """Truncate the current file (if present) and delete every rotated generation.

    A missing current file is left missing. Returns the deleted generation paths.
    """
    path = current_path(config, level)
    if os.path.exists(path):
        with open(path, "w", encoding="utf-8"):
            pass

    deleted = []
    for gen in range(1, config.max_files + 1):
        gen_path = rotated_path(config, level, gen)
        try:
            os.remove(gen_path)
        except FileNotFoundError:
            continue
        deleted.append(gen_path)
    return deleted
