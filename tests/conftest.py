# tests/conftest.py

import logging

import pytest


@pytest.fixture(autouse=True)
def debug_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="barco_projector")
    return caplog
