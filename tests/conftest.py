from __future__ import annotations

import logging

import pytest

from qrcodeine.logging import ROOT_LOGGER


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger(ROOT_LOGGER)
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
