"""
Shared fixtures for ff-query tests.

The driver is always mocked: unit tests only look at the SQL and parameters
the builder hands over.
"""

from unittest.mock import AsyncMock

import pytest
from ff_query import Driver, QueryBuilder


@pytest.fixture
def driver():
    """Driver mock that records execute() calls and returns no rows."""
    mock = AsyncMock(spec=Driver)
    mock.execute.return_value = []
    return mock


@pytest.fixture
def db(driver):
    """Builder bound to the mocked driver."""
    return QueryBuilder(driver=driver)


@pytest.fixture
def strict_db(driver):
    """Builder that rejects queries without a table."""
    return QueryBuilder(driver=driver, strict=True)
