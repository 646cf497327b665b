import logging

import pytest

from selectorkit.utils import logger as logger_mod
from selectorkit.utils.config import get_settings


@pytest.fixture
def fresh_logging(monkeypatch):
    """Let a test run configure_logging() from scratch, then put the root logger back."""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    monkeypatch.setattr(logger_mod, "_configured", False)
    get_settings.cache_clear()
    yield
    for h in list(root.handlers):
        if h not in saved_handlers:
            root.removeHandler(h)
            h.close()
    for h in saved_handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(saved_level)
    get_settings.cache_clear()
