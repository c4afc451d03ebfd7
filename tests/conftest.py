import logging

import pytest


@pytest.fixture(autouse=True)
def reset_root_logging():
    """Drop handlers setup_logging() bound to a test's captured stdout"""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
