"""Unit tests for logging setup."""

import logging

import pytest

from docpush.core.config import Settings
from docpush.core.logging import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def make_settings(**overrides) -> Settings:
    return Settings(
        SECRET_KEY="k",
        GITHUB_TOKEN="t",
        GITHUB_OWNER="acme",
        GITHUB_REPO="handbook",
        AUTH={"mode": "public", "admin_password": "pw"},
        **overrides,
    )


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_and_quiet_libraries(self, restore_root_logger):
        setup_logging(make_settings(LOG_LEVEL="debug"))

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("github").level == logging.WARNING

    def test_file_handler(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "docpush.log"
        setup_logging(make_settings(LOG_FILE=str(log_file)))

        logging.getLogger("docpush.test").info("draft created")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "draft created" in log_file.read_text()

    def test_repeated_setup_replaces_handlers(self, restore_root_logger):
        setup_logging(make_settings())
        setup_logging(make_settings())

        assert len(logging.getLogger().handlers) == 1
