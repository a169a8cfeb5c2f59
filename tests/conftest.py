"""
Shared fixtures
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging replaces the root handlers; put them back after each test"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
