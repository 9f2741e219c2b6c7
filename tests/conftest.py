"""
Re-useable fixtures etc. for tests

See https://docs.pytest.org/en/7.1.x/reference/fixtures.html#conftest-py-sharing-fixtures-across-multiple-files
"""

import datetime as dt

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def enable_logging():
    # Make sure the log messages get formatted, even though nobody reads them
    logger.enable("casesummary")
    yield
    logger.disable("casesummary")


@pytest.fixture
def fixed_now():
    # 21:00 in Japan
    return dt.datetime(2020, 2, 20, 12, 0, tzinfo=dt.timezone.utc)
