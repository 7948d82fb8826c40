import logging
import sys

import pytest

from common.core_utils import SymbolFormatter, setup_logging


@pytest.fixture
def root_logger():
    """The real root logger, with its handlers and level restored afterwards."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def test_setup_logging_with_file_and_console(root_logger, tmp_path):
    log_file_path = tmp_path / "logs" / "setup.log"

    setup_logging(log_file=str(log_file_path))

    file_handler, stream_handler = root_logger.handlers
    assert isinstance(file_handler, logging.FileHandler)
    assert file_handler.baseFilename == str(log_file_path)
    assert type(stream_handler) is logging.StreamHandler
    assert stream_handler.stream is sys.stdout
    assert file_handler.formatter is stream_handler.formatter
    assert isinstance(file_handler.formatter, SymbolFormatter)
    assert root_logger.level == logging.INFO
    assert log_file_path.parent.is_dir()


def test_setup_logging_console_only(root_logger):
    setup_logging()

    assert [type(handler) for handler in root_logger.handlers] == [
        logging.StreamHandler
    ]


def test_setup_logging_unusable_log_file_falls_back_to_console(
    root_logger, tmp_path, capsys
):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("")

    setup_logging(log_file=str(blocker / "setup.log"))

    assert [type(handler) for handler in root_logger.handlers] == [
        logging.StreamHandler
    ]
    assert "Could not create file handler" in capsys.readouterr().err


def test_setup_logging_prefix(root_logger):
    setup_logging(log_level=logging.DEBUG, log_prefix="[DOTFILES]")

    fmt = root_logger.handlers[0].formatter._fmt
    assert fmt.startswith("[DOTFILES] %(asctime)s")
    assert root_logger.level == logging.DEBUG


def test_setup_logging_blank_prefix_is_ignored(root_logger):
    setup_logging(log_prefix="   ")

    assert root_logger.handlers[0].formatter._fmt.startswith("%(asctime)s")


def test_setup_logging_replaces_existing_handlers(root_logger):
    old_handler = logging.NullHandler()
    root_logger.addHandler(old_handler)

    setup_logging()
    setup_logging()

    assert old_handler not in root_logger.handlers
    assert len(root_logger.handlers) == 1


@pytest.mark.parametrize(
    "level, symbol",
    [
        (logging.DEBUG, "D"),
        (logging.INFO, "I"),
        (logging.WARNING, "W"),
        (logging.ERROR, "E"),
        (logging.CRITICAL, "C"),
    ],
)
def test_symbol_formatter(level, symbol):
    formatter = SymbolFormatter(
        fmt="%(symbol)s %(message)s",
        symbols={"debug": "D", "info": "I", "warning": "W", "error": "E", "critical": "C"},
    )
    record = logging.LogRecord("t", level, __file__, 1, "msg", None, None)

    assert formatter.format(record) == f"{symbol} msg"
