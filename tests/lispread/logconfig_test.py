import logging

import pytest

from lispread import logconfig
from lispread import main as lispread_main


@pytest.fixture
def lispread_logger():
    logger = logging.getLogger(logconfig.LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    installed = logconfig._installed_handler
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logconfig._installed_handler = installed


class TestMakeHandler:
    def test_default_handler_discards_output(self, monkeypatch):
        monkeypatch.delenv("LISPREAD_USE_DEV_LOGGER", raising=False)
        assert isinstance(logconfig.make_handler("WARNING"), logging.NullHandler)

    @pytest.mark.parametrize("val", ["true", "TRUE", "True"])
    def test_dev_handler(self, monkeypatch, val: str):
        monkeypatch.setenv("LISPREAD_USE_DEV_LOGGER", val)
        handler = logconfig.make_handler("WARNING")
        assert isinstance(handler, logging.StreamHandler)
        assert not isinstance(handler, logging.NullHandler)

    def test_handler_level(self):
        assert logging.DEBUG == logconfig.make_handler("DEBUG").level
        assert logconfig.TRACE == logconfig.make_handler("TRACE").level

    def test_reader_format(self):
        handler = logconfig.make_handler("WARNING")
        record = logging.LogRecord(
            "lispread.lang.reader",
            logging.WARNING,
            __file__,
            1,
            "Line comment at %s:%s",
            (2, 3),
            None,
        )
        assert "WARNING [lispread.lang.reader] Line comment at 2:3" == (
            handler.format(record)
        )


class TestLevelFromEnv:
    def test_default_level(self, monkeypatch):
        monkeypatch.delenv("LISPREAD_LOGGING_LEVEL", raising=False)
        assert "WARNING" == logconfig.level_from_env()

    def test_level_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("LISPREAD_LOGGING_LEVEL", "trace")
        assert "TRACE" == logconfig.level_from_env()


def test_trace_level_name():
    assert "TRACE" == logging.getLevelName(logconfig.TRACE)


def test_configure_logger(lispread_logger: logging.Logger):
    count = len(lispread_logger.handlers)

    assert lispread_logger is logconfig.configure_logger(level="INFO")
    assert logging.INFO == lispread_logger.level
    assert count + 1 == len(lispread_logger.handlers)

    logconfig.configure_logger(level="TRACE")
    assert logconfig.TRACE == lispread_logger.level
    assert count + 1 == len(lispread_logger.handlers)
    assert logconfig._installed_handler in lispread_logger.handlers


def test_init_runs_once(monkeypatch):
    calls = []
    monkeypatch.setattr(lispread_main, "_is_initialized", False)
    monkeypatch.setattr(logconfig, "configure_logger", lambda: calls.append(True))

    lispread_main.init()
    lispread_main.init()
    assert 1 == len(calls)

    lispread_main.init(force_reload=True)
    assert 2 == len(calls)
