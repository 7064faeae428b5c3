import logging

import pytest


@pytest.fixture(autouse=True)
def _isolate_root_logging():
    # The API lifespan calls setup_logging(), which mutates global logging state;
    # restore it so caplog-based tests are not order-dependent.
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
