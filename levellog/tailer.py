"""Log tailer: polls per-level files and renders newly appended records.

Each poll cycle (`tick`) compares every monitored file's size with the last
offset seen, reads only the appended byte range, and renders one line per
complete record. A file that shrank, vanished, or was replaced (inode change)
is treated as cleared or rotated and read again from the start.
"""

import logging
import os
import threading
from dataclasses import dataclass, field

from levellog.config import Config
from levellog.formatter import render
from levellog.models import Level, parse_line
from levellog.rotator import current_path

logger = logging.getLogger(__name__)


@dataclass
class TailState:
    offsets: dict[str, int] = field(default_factory=dict)
    inodes: dict[str, int] = field(default_factory=dict)
    # Trailing bytes of the last read that did not end with a newline yet.
    pending: dict[str, bytes] = field(default_factory=dict)

    def reset(self, path: str):
        self.offsets[path] = 0
        self.pending.pop(path, None)


class LogTailer:
    def __init__(
        self,
        config: Config,
        levels: list[Level] | None = None,
        emit=print,
        color: bool = True,
        state: TailState | None = None,
    ):
        self._config = config
        self._levels = list(levels or config.levels)
        self._emit = emit
        self._color = color
        self._state = state or TailState()
        self._lock = threading.Lock()

    @property
    def state(self) -> TailState:
        return self._state

    def monitored_files(self) -> list[tuple[Level, str]]:
        return [(level, current_path(self._config, level)) for level in self._levels]

    def prime(self, from_start: bool = False):
        """Record current sizes so only records appended from now on are rendered."""
        for _, path in self.monitored_files():
            try:
                st = os.stat(path)
            except FileNotFoundError:
                self._state.reset(path)
                continue
            except OSError as e:
                logger.warning("Failed to stat %s: %s", path, e)
                continue
            self._state.offsets[path] = 0 if from_start else st.st_size
            self._state.inodes[path] = st.st_ino
            self._state.pending.pop(path, None)

    def tick(self) -> int:
        """Run one poll cycle over all monitored files. Returns the number of lines rendered."""
        # Cycles never overlap: a slow cycle holds the lock until it has rendered everything.
        with self._lock:
            rendered = 0
            for _, path in self.monitored_files():
                rendered += self._poll(path)
            return rendered

    def run(self, shutdown_event: threading.Event):
        """Poll until shutdown_event is set. The in-flight cycle always completes."""
        logger.info("Tailing %d file(s) every %.3fs", len(self._levels), self._config.poll_interval)
        while not shutdown_event.is_set():
            self.tick()
            shutdown_event.wait(self._config.poll_interval)
        logger.info("Tailer stopped")

    def _poll(self, path: str) -> int:
        state = self._state
        try:
            st = os.stat(path)
        except FileNotFoundError:
            if state.offsets.get(path, 0) or path in state.pending:
                logger.info("File removed or rotated away: %s", path)
            state.reset(path)
            state.inodes.pop(path, None)
            return 0
        except OSError as e:
            logger.warning("Failed to stat %s: %s", path, e)
            return 0

        offset = state.offsets.get(path, 0)
        known_inode = state.inodes.get(path)
        if known_inode is not None and known_inode != st.st_ino:
            logger.info("File replaced (inode changed): %s", path)
            state.reset(path)
            offset = 0
        elif st.st_size < offset:
            logger.info("File truncated: %s (%d -> %d bytes)", path, offset, st.st_size)
            state.reset(path)
            offset = 0
        state.inodes[path] = st.st_ino

        if st.st_size <= offset:
            state.offsets[path] = offset
            return 0

        try:
            with open(path, "rb") as f:
                f.seek(offset)
                chunk = f.read(st.st_size - offset)
        except OSError as e:
            logger.warning("Failed to read %s: %s", path, e)
            return 0

        state.offsets[path] = offset + len(chunk)
        return self._render_chunk(path, chunk)

    def _render_chunk(self, path: str, chunk: bytes) -> int:
        data = self._state.pending.pop(path, b"") + chunk
        lines = data.split(b"\n")
        tail = lines.pop()
        if tail:
            self._state.pending[path] = tail

        rendered = 0
        for raw in lines:
            text = raw.decode("utf-8", errors="replace").strip()
            if not text:
                continue
            self._emit(render(parse_line(text), color=self._color))
            rendered += 1
        return rendered
