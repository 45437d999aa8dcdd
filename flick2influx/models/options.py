"""
Run options resolved from the command line.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RunMode(str, Enum):
    """
    Operating modes, matched case-insensitively against --mode.
    """
    PRICE = "price"                     # Current predicted price
    USAGE_SIMPLE = "usage-simple"       # Usage without pricing
    USAGE_DETAILED = "usage-detailed"   # Usage with the price paid per interval


class RunOptions(BaseModel):
    """
    Immutable options for a single run.
    """
    username: str = Field(description="Flick Electric username")
    password: str = Field(repr=False, description="Flick Electric password")
    influx_uri: str = Field(description="URI of the InfluxDB server")
    influx_database: str = Field(description="Database to record stats in")
    influx_username: Optional[str] = Field(default=None, description="InfluxDB username")
    influx_password: Optional[str] = Field(default=None, repr=False, description="InfluxDB password")
    mode: str = Field(description="Raw --mode value, resolved at dispatch")
    look_back_days: Optional[int] = Field(
        default=None,
        description="For the usage modes, how many days before today to record"
    )
    
    class Config:
        frozen = True
