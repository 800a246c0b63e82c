import logging
import sys

import pytest

from mailthread.logging_config import setup_logging


@pytest.fixture
def restore_logging(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    yield
    logger = logging.getLogger("mailthread")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_uses_configured_level(self, test_config, restore_logging):
        test_config.settings["logging"]["level"] = "WARNING"

        logger = setup_logging(test_config)

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_debug_overrides_level(self, test_config, restore_logging):
        logger = setup_logging(test_config, debug=True)
        assert logger.level == logging.DEBUG

    def test_log_file_goes_to_state_dir(self, test_config, restore_logging):
        test_config.settings["logging"]["file"] = "../elsewhere/mailthread.log"

        logger = setup_logging(test_config)
        logger.warning("reconcile done")
        for handler in logger.handlers:
            handler.flush()

        log_path = test_config.get_log_dir() / "mailthread.log"
        assert log_path.exists()
        assert "reconcile done" in log_path.read_text()

    def test_repeated_setup_does_not_stack_handlers(self, test_config, restore_logging):
        setup_logging(test_config)
        logger = setup_logging(test_config)
        assert len(logger.handlers) == 1
