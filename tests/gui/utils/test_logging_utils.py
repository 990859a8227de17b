"""Tests for logging setup."""

import logging

import pytest

from photo_grid.gui.utils.logging_utils import configure_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("photo_grid")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved[0]:
            logger.removeHandler(handler)
            handler.close()
    logger.level, logger.propagate = saved[1], saved[2]


def _own_handlers(logger):
    return [h for h in logger.handlers if getattr(h, "_photo_grid_handler", False)]


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_configure_sets_level(self, package_logger):
        configure_logging(logging.DEBUG)
        assert package_logger.level == logging.DEBUG

    def test_configure_twice_does_not_duplicate_handlers(self, package_logger):
        configure_logging()
        configure_logging()
        assert len(_own_handlers(package_logger)) == 1

    def test_configure_with_file_writes_log(self, package_logger, tmp_path):
        log_file = tmp_path / "logs" / "photo_grid.log"

        configure_logging(logging.INFO, log_file)
        logging.getLogger("photo_grid.composer.export").info("exported")
        for handler in _own_handlers(package_logger):
            handler.flush()

        assert "photo_grid.composer.export: exported" in log_file.read_text(encoding="utf-8")
