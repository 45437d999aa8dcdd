"""
Test configuration and fixtures for flick2influx tests.
Contains shared fixtures and test utilities.
"""

from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytz

from flick2influx.models.flick import PriceComponent, PriceForecast, PricePoint, PriceValue
from flick2influx.models.options import RunOptions

NZ = pytz.timezone("Pacific/Auckland")


def make_client() -> AsyncMock:
    """
    Create a mock Flick client usable with 'async with'.
    """
    client = AsyncMock()
    client.__aenter__.return_value = client
    client.__aexit__.return_value = False
    return client


def make_price(starts_at: datetime, total: str, components=()) -> PricePoint:
    return PricePoint(
        starts_at=starts_at,
        price=PriceValue(value=Decimal(total)),
        components=[
            PriceComponent(charge_setter=setter, charge_method=method, value=Decimal(value))
            for setter, method, value in components
        ],
    )


@pytest.fixture
def make_options():
    """
    Factory for RunOptions with sensible defaults.
    """
    def _make(**overrides) -> RunOptions:
        values = {
            "username": "user@example.com",
            "password": "secret",
            "influx_uri": "http://localhost:8086",
            "influx_database": "power",
            "mode": "price",
        }
        values.update(overrides)
        return RunOptions(**values)
    return _make


@pytest.fixture
def mock_writer():
    """
    Create a mock metrics writer for testing.
    """
    writer = MagicMock()
    writer.failed_points = 0
    return writer


@pytest.fixture
def mock_android_client():
    return make_client()


@pytest.fixture
def mock_web_client():
    return make_client()


@pytest.fixture
def now() -> datetime:
    """Fixed run time: 2024-03-10 08:00 in Auckland."""
    return NZ.localize(datetime(2024, 3, 10, 8, 0, 0))


@pytest.fixture
def sample_forecast() -> PriceForecast:
    """
    Forecast listed out of order: the earliest entry is second.
    """
    return PriceForecast(prices=[
        make_price(datetime(2024, 3, 10, 8, 30, tzinfo=pytz.UTC), "4.0", [("A", "X", "2.0")]),
        make_price(datetime(2024, 3, 10, 8, 0, tzinfo=pytz.UTC), "3.5", [("A", "X", "1.5"), ("B", "Y", "2.0")]),
        make_price(datetime(2024, 3, 10, 9, 0, tzinfo=pytz.UTC), "5.0", [("A", "X", "3.0")]),
    ])
