"""Unit tests for the logging setup."""

import logging

from waystats.logging_config import get_logger, setup_logging


class TestSetupLogging:

    def test_package_level_follows_argument(self):
        setup_logging("DEBUG")

        assert logging.getLogger("waystats").level == logging.DEBUG
        assert logging.getLogger("waystats.cache").level == logging.NOTSET
        assert get_logger("waystats.cache.store").getEffectiveLevel() == logging.DEBUG

    def test_noisy_libraries_are_quieted(self):
        setup_logging("INFO")

        assert logging.getLogger("aiohttp").level == logging.WARNING
        assert logging.getLogger("redis").level == logging.WARNING
