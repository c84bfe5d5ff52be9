import logging

import pytest

from pathmap.utils.logging_utils import setup_logging


def test_setup_logging_accepts_level_names():
    setup_logging("debug")
    setup_logging("WARNING")
    setup_logging(logging.INFO)


def test_setup_logging_rejects_unknown_name():
    with pytest.raises(ValueError, match="chatty"):
        setup_logging("chatty")
