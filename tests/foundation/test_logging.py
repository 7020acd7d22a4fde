from __future__ import annotations

import contextlib
import logging

import pytest

from moevo.foundation.logging import configure_moevo_logging


@pytest.fixture
def moevo_logger():
    logger = logging.getLogger("moevo")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.handlers = []
    yield logger
    logger.handlers, logger.level, logger.propagate = saved


@contextlib.contextmanager
def _bare_root(*handlers: logging.Handler):
    # pytest attaches its capture handlers to the root logger while a test runs
    root = logging.getLogger()
    saved = list(root.handlers)
    root.handlers = list(handlers)
    try:
        yield root
    finally:
        root.handlers = saved


def test_configure_attaches_single_handler(moevo_logger):
    with _bare_root():
        configure_moevo_logging(level="DEBUG")
        assert len(moevo_logger.handlers) == 1
        assert moevo_logger.level == logging.DEBUG
        assert moevo_logger.propagate is False

        configure_moevo_logging(level="INFO")
        assert len(moevo_logger.handlers) == 1


def test_configure_accepts_numeric_level(moevo_logger):
    with _bare_root():
        configure_moevo_logging(level=logging.WARNING, verbose_names=True)
    assert moevo_logger.level == logging.WARNING


def test_configure_respects_existing_root_handlers(moevo_logger):
    with _bare_root(logging.NullHandler()):
        configure_moevo_logging()
    assert moevo_logger.handlers == []


@pytest.mark.parametrize("root_handlers", [(), (logging.NullHandler(),)])
def test_unknown_level_name_raises(moevo_logger, root_handlers):
    with _bare_root(*root_handlers):
        with pytest.raises(ValueError, match="LOUD"):
            configure_moevo_logging(level="LOUD")
    assert moevo_logger.handlers == []
