import logging
from collections.abc import Iterator

import pytest

from docarchive.logging.logger import Log


@pytest.fixture()
def docarchive_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger("docarchive")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    httpx_level = logging.getLogger("httpx").level
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
    logging.getLogger("httpx").setLevel(httpx_level)


class TestLogConfigure:
    def test_single_handler_with_thread_name(self, docarchive_logger: logging.Logger) -> None:
        Log.configure("info")
        Log.configure("info")
        assert len(docarchive_logger.handlers) == 1
        formatter = docarchive_logger.handlers[0].formatter
        assert formatter is not None
        assert "%(threadName)s" in formatter._fmt  # type: ignore[operator]
        assert docarchive_logger.level == logging.INFO

    def test_library_loggers_held_at_warning(self, docarchive_logger: logging.Logger) -> None:
        Log.configure("DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_unknown_level_rejected(self, docarchive_logger: logging.Logger) -> None:
        with pytest.raises(ValueError):
            Log.configure("chatty")
