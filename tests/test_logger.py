import logging

from logger import LOGGER_NAME, get_logger, setup_logging


class TestGetLogger:
    """Tests for get_logger function."""

    def test_default_is_application_logger(self):
        assert get_logger() is logging.getLogger(LOGGER_NAME)
        assert get_logger(None) is logging.getLogger(LOGGER_NAME)

    def test_child_logger(self):
        assert get_logger("ingestion").name == "hasaba.ingestion"
        assert get_logger("ingestion").parent is get_logger()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_writes_to_dated_file(self, test_config):
        logger = setup_logging(test_config)
        try:
            logger.info("hello")
            for handler in logger.handlers:
                handler.flush()

            [log_file] = list(test_config.log_dir.glob("hasaba-*.log"))
            assert "hello" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
