import logging

import pytest
from pydantic import ValidationError

from datatap.logging import LoggingSettings, LogLevel, configure_logger, get_logger
from datatap.logging.logger import StructuredFormatter


def datatap_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "_datatap_handler", False)]


def test_get_logger_returns_stdlib_logger():
    logger = get_logger(
        "datatap.tests.factory", settings=LoggingSettings(level="DEBUG", console_enabled=True)
    )
    assert isinstance(logger, logging.Logger)
    assert logger.level == logging.DEBUG
    handlers = datatap_handlers(logger)
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, StructuredFormatter)


def test_level_override():
    logger = get_logger("datatap.tests.override", level=LogLevel.ERROR)
    assert logger.level == logging.ERROR


def test_reconfigure_replaces_only_own_handlers(tmp_path):
    logger = logging.getLogger("datatap.tests.reconfigure")
    own = logging.NullHandler()
    logger.addHandler(own)

    configure_logger(logger, LoggingSettings(console_enabled=True))
    configure_logger(logger, LoggingSettings(file_path=str(tmp_path / "datatap.log")))

    handlers = datatap_handlers(logger)
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.FileHandler)
    assert own in logger.handlers

    for handler in handlers:
        logger.removeHandler(handler)
        handler.close()
    logger.removeHandler(own)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("DATATAP_LOGGING_LEVEL", "warning")
    monkeypatch.setenv("DATATAP_LOGGING_JSON_FORMAT", "true")
    settings = LoggingSettings.load()
    assert settings.level == "WARNING"
    assert settings.json_format is True


def test_settings_accept_log_level_enum():
    assert LoggingSettings(level=LogLevel.CRITICAL).level == "CRITICAL"


def test_settings_reject_unknown_level():
    with pytest.raises(ValidationError):
        LoggingSettings(level="LOUD")


def test_log_level_conversion():
    assert LogLevel.parse("debug") is LogLevel.DEBUG
    assert LogLevel.WARNING.to_stdlib_level() == logging.WARNING
    with pytest.raises(ValueError):
        LogLevel.parse("verbose")


def test_log_level_from_stdlib_number():
    assert LogLevel.parse(logging.ERROR) is LogLevel.ERROR
    assert LoggingSettings(level="10").level is LogLevel.DEBUG


def test_library_loggers_install_no_handler_by_default():
    logger = get_logger("datatap.tests.quiet", settings=LoggingSettings())

    assert datatap_handlers(logger) == []
    assert logger.propagate
