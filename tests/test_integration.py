"""Integration tests — E2E via subprocess against the root scripts."""

import json
import os
import signal
import subprocess
import sys
import time

import pytest

ROOT = os.path.join(os.path.dirname(__file__), "..")
MAIN_PY = os.path.join(ROOT, "main.py")
MONITOR_PY = os.path.join(ROOT, "log_monitor.py")
INSPECTOR_PY = os.path.join(ROOT, "log_inspector.py")
LEVELS = ("error", "warn", "info", "debug")


def _env():
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [os.path.abspath(ROOT), env.get("PYTHONPATH")]))
    for var in ("CONFIG_PATH", "LOG_DIR", "MAX_FILE_SIZE_BYTES", "MAX_FILE_SIZE_MB",
                "MAX_FILES", "POLL_INTERVAL", "LOG_LEVELS"):
        env.pop(var, None)
    return env


def _run(script, *args) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, script, *args],
        capture_output=True,
        text=True,
        env=_env(),
        timeout=30,
    )


def _count_lines(path):
    if not os.path.exists(path):
        return 0
    with open(path) as f:
        return sum(1 for line in f if line.strip())


@pytest.fixture
def log_dir(tmp_path):
    return str(tmp_path / "logs")


class TestProducer:
    def test_writes_requested_count(self, log_dir):
        result = _run(MAIN_PY, "--log-dir", log_dir, "--count", "30", "--delay", "0", "--no-color")
        assert result.returncode == 0, result.stderr
        total = sum(_count_lines(os.path.join(log_dir, f"{lvl}.log")) for lvl in LEVELS)
        assert total == 30
        assert len(result.stdout.strip().split("\n")) == 30
        assert "Total records written: 30" in result.stderr

    def test_rotates_with_small_threshold(self, log_dir):
        result = _run(MAIN_PY, "--log-dir", log_dir, "--count", "80", "--delay", "0",
                      "--max-file-size", "300", "--max-files", "3")
        assert result.returncode == 0, result.stderr
        assert os.path.exists(os.path.join(log_dir, "info.1.log"))
        assert not os.path.exists(os.path.join(log_dir, "info.3.log"))
        assert "Rotated info log" in result.stderr

    def test_invalid_config_exits_2(self, log_dir):
        result = _run(MAIN_PY, "--log-dir", log_dir, "--max-files", "0", "--count", "1")
        assert result.returncode == 2


class TestInspector:
    def test_stats_and_recent(self, log_dir):
        _run(MAIN_PY, "--log-dir", log_dir, "--count", "40", "--delay", "0")

        stats = json.loads(_run(INSPECTOR_PY, "--log-dir", log_dir, "--stats").stdout)
        assert set(stats) == set(LEVELS)
        assert stats["info"]["exists"] is True

        result = _run(INSPECTOR_PY, "--log-dir", log_dir, "--recent", "info", "--limit", "2", "--json")
        assert result.returncode == 0
        lines = result.stdout.strip().split("\n")
        assert len(lines) == 2
        assert all(json.loads(line)["level"] == "INFO" for line in lines)

    def test_recent_missing_file(self, log_dir):
        result = _run(INSPECTOR_PY, "--log-dir", log_dir, "--recent", "debug")
        assert result.returncode == 1
        assert "not found" in result.stderr

    def test_recent_corrupt_file(self, log_dir):
        os.makedirs(log_dir)
        with open(os.path.join(log_dir, "warn.log"), "w") as f:
            f.write("garbage\n")
        result = _run(INSPECTOR_PY, "--log-dir", log_dir, "--recent", "warn")
        assert result.returncode == 1
        assert "Failed to read warn log" in result.stderr

    def test_clear_all(self, log_dir):
        _run(MAIN_PY, "--log-dir", log_dir, "--count", "60", "--delay", "0", "--max-file-size", "200")
        result = _run(INSPECTOR_PY, "--log-dir", log_dir, "--clear", "all")
        assert result.returncode == 0

        stats = json.loads(_run(INSPECTOR_PY, "--log-dir", log_dir, "--stats").stdout)
        for entry in stats.values():
            assert entry["rotated"] == 0
            assert entry["exists"] is False or entry["size"] == 0

    def test_clear_invalid_level(self, log_dir):
        result = _run(INSPECTOR_PY, "--log-dir", log_dir, "--clear", "verbose")
        assert result.returncode == 1
        assert "Invalid log level" in result.stderr


class TestMonitor:
    def test_tails_existing_content_and_stops_on_sigterm(self, log_dir):
        _run(MAIN_PY, "--log-dir", log_dir, "--count", "10", "--delay", "0")
        with open(os.path.join(log_dir, "error.log"), "a") as f:
            f.write("this line is not json\n")

        proc = subprocess.Popen(
            [sys.executable, MONITOR_PY, "--log-dir", log_dir, "--from-start", "--no-color",
             "--interval", "0.05"],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            env=_env(),
        )
        time.sleep(2)
        proc.send_signal(signal.SIGTERM)
        stdout, _ = proc.communicate(timeout=10)

        assert proc.returncode == 0
        assert "Monitoring INFO logs" in stdout
        assert "[RAW] this line is not json" in stdout
        rendered = [line for line in stdout.splitlines()
                    if any(f"] [{lvl.upper()}] " in line for lvl in LEVELS)]
        assert len(rendered) == 10
        assert stdout.rstrip().endswith("Log monitoring stopped.")
