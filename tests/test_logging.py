"""Tests for logging setup."""

import logging

from webfinger_app.logging import setup_logging


def test_setup_logging_levels():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug")
        assert logging.getLogger("webfinger_app").level == logging.DEBUG
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
        assert len(root.handlers) == 1
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("webfinger_app").setLevel(logging.NOTSET)
