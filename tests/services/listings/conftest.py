"""Listings test fixtures and utilities."""

from unittest.mock import AsyncMock

import asyncpg
import pytest

from stockroom.lib.common.config import Settings
from stockroom.services.listings.core import Listings


COUNT_MARKER = 'AS total_records'


class MockRecord:
    """Mock asyncpg record that supports both dictionary and attribute access."""

    def __init__(self, **kwargs):
        self._data = kwargs
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __getitem__(self, key):
        return self._data[key]

    def get(self, key, default=None):
        return self._data.get(key, default)

    def __contains__(self, key):
        return key in self._data

    def keys(self):
        """Support dict() conversion."""
        return self._data.keys()

    def __iter__(self):
        """Support dict() conversion."""
        return iter(self._data)

    def items(self):
        """Support dict() conversion."""
        return self._data.items()

    def values(self):
        """Support dict() conversion."""
        return self._data.values()


class RecordingExecutor:
    """Stand-in for ``execute(sql, params)`` that records calls.

    Count statements (selecting ``AS total_records``) answer with ``total``;
    every other statement answers with ``rows``, even one that aggregates.
    """

    def __init__(self, rows=None, total=0, error=None):
        self.rows = rows or []
        self.total = total
        self.error = error
        self.calls = []

    async def __call__(self, sql, params):
        self.calls.append((sql, list(params)))
        if self.error is not None:
            raise self.error
        if COUNT_MARKER in sql:
            return [MockRecord(total_records=self.total)]
        return self.rows

    def call_for(self, marker):
        """Return the first recorded ``(sql, params)`` whose SQL contains ``marker``."""
        for sql, params in self.calls:
            if marker in sql:
                return sql, params
        raise AssertionError(f"No query containing {marker!r} was executed")

    @property
    def data_call(self):
        for sql, params in self.calls:
            if COUNT_MARKER not in sql:
                return sql, params
        raise AssertionError("No data query was executed")


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def mock_asyncpg_pool() -> AsyncMock:
    """Mock asyncpg pool."""
    pool = AsyncMock(spec=asyncpg.Pool)
    pool._closed = False
    pool.fetch = AsyncMock(return_value=[])
    pool.close = AsyncMock()
    return pool


@pytest.fixture
def listings_settings() -> Settings:
    return Settings(dsn=None, default_page_limit=20, max_page_limit=100, slow_query_threshold_ms=1000)


@pytest.fixture
def listings_with_mocks(mock_asyncpg_pool, listings_settings) -> Listings:
    """Listings wired to a mock pool."""
    return Listings(pool=mock_asyncpg_pool, settings=listings_settings)
