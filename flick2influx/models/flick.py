"""
Pydantic models for Flick Electric API responses.
Prices and usage quantities are kept as Decimal for exact currency arithmetic.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class AuthorizedDataContexts(BaseModel):
    """Data the user is allowed to query."""
    supply_nodes: List[str] = Field(
        default_factory=list,
        description="Supply node references, e.g. '/network/nz/supply_nodes/<id>'"
    )


class UserInfo(BaseModel):
    """Subset of the mobile API user info we rely on."""
    authorized_data_contexts: AuthorizedDataContexts = Field(default_factory=AuthorizedDataContexts)


class PriceComponent(BaseModel):
    """
    One itemized contributor to a predicted price.
    
    Example:
    {"charge_setter": "network", "charge_method": "kwh", "value": "6.190"}
    """
    charge_setter: str = Field(description="Who sets this charge (network, retailer, ...)")
    charge_method: str = Field(description="How the charge is applied (kwh, spot_price, ...)")
    value: Decimal = Field(description="Component price (c/kWh)")


class PriceValue(BaseModel):
    """Aggregate price of a forecast entry."""
    value: Decimal = Field(description="Total price (c/kWh)")
    unit_code: Optional[str] = Field(default=None, description="Currency unit, e.g. 'cents'")
    per: Optional[str] = Field(default=None, description="Quantity unit, e.g. 'kwh'")


class PricePoint(BaseModel):
    """A single predicted price interval."""
    starts_at: datetime
    ends_at: Optional[datetime] = None
    price: PriceValue
    components: List[PriceComponent] = Field(default_factory=list)


class PriceForecast(BaseModel):
    """Price forecast for one supply node, in the order Flick returned it."""
    prices: List[PricePoint] = Field(default_factory=list)


class UsageBucket(BaseModel):
    """Consumed units for one reporting interval (typically half-hourly)."""
    started_at: datetime
    ended_at: Optional[datetime] = None
    value: Decimal = Field(description="Consumed units (kWh)")
    status: Optional[str] = Field(default=None, description="Meter read status, e.g. 'final'")


class DetailedUsageInterval(BaseModel):
    """Consumed units and the price paid for one interval within a day."""
    started_at: datetime
    price: Decimal = Field(description="Price paid per unit")
    units: Decimal = Field(description="Consumed units (kWh)")
    
    @property
    def total_cost(self) -> Decimal:
        return self.units * self.price
