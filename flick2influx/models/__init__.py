"""
Data models package for flick2influx.
Contains Pydantic models for Flick API responses and run options.
"""

from .flick import (
    AuthorizedDataContexts,
    DetailedUsageInterval,
    PriceComponent,
    PriceForecast,
    PricePoint,
    PriceValue,
    UsageBucket,
    UserInfo,
)
from .options import RunMode, RunOptions

__all__ = [
    "AuthorizedDataContexts",
    "DetailedUsageInterval",
    "PriceComponent",
    "PriceForecast",
    "PricePoint",
    "PriceValue",
    "UsageBucket",
    "UserInfo",
    "RunMode",
    "RunOptions",
]
