import logging

import pytest

from logging_config import NAMESPACES, level_from_name, setup_logging


@pytest.fixture
def restore_loggers():
    yield
    for name in NAMESPACES:
        lg = logging.getLogger(name)
        for handler in lg.handlers:
            handler.close()
        lg.handlers.clear()
        lg.propagate = True
        lg.setLevel(logging.NOTSET)


@pytest.mark.parametrize(
    "name, level",
    [("debug", logging.DEBUG), (" WARNING ", logging.WARNING), (logging.ERROR, logging.ERROR), ("chatty", logging.INFO)],
)
def test_level_from_name(name, level):
    assert level_from_name(name) == level


def test_setup_logging_writes_package_loggers_to_file(tmp_path, restore_loggers):
    log_file = tmp_path / "constellation.log"
    setup_logging(logging.DEBUG, str(log_file))
    setup_logging(logging.DEBUG, str(log_file))

    lg = logging.getLogger("disk.storage")
    lg.debug("draft written")
    for handler in logging.getLogger("disk").handlers:
        handler.flush()

    assert len(logging.getLogger("disk").handlers) == 2
    text = log_file.read_text(encoding="utf-8")
    assert "disk.storage - DEBUG - draft written" in text


def test_console_entry_module_logger_is_configured(restore_loggers):
    # the console script imports main.py as "main", not "__main__"
    assert "main" in NAMESPACES
    setup_logging(logging.INFO)
    lg = logging.getLogger("main")
    assert lg.handlers
    assert lg.level == logging.INFO
