import pytest

from levellog.config import Config


@pytest.fixture
def make_config(tmp_path):
    """Build a Config rooted in a temp directory with small rotation limits."""
    def _make(**overrides):
        defaults = dict(
            log_dir=str(tmp_path / "logs"),
            max_file_size_bytes=10 * 1024 * 1024,
            max_files=5,
            poll_interval=0.05,
        )
        defaults.update(overrides)
        return Config(**defaults)
    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("CONFIG_PATH", "LOG_DIR", "MAX_FILE_SIZE_BYTES", "MAX_FILE_SIZE_MB",
                "MAX_FILES", "POLL_INTERVAL", "LOG_LEVELS"):
        monkeypatch.delenv(var, raising=False)
