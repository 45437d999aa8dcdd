"""
Recording routines - one per operating mode.
Pulls data from the Flick clients and pushes points to the metrics writer.
"""

from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from flick2influx.exceptions import ConfigurationError, NoPriceDataError, NoSupplyNodeError
from flick2influx.logging_config import get_logger
from flick2influx.models.flick import PriceForecast, PricePoint
from flick2influx.models.options import RunMode, RunOptions
from flick2influx.services.flick_client import FlickAndroidClient, FlickWebClient
from flick2influx.utils.time_utils import look_back_dates, look_back_window, to_utc

logger = get_logger(__name__)

COMPONENTS_SERIES = "PredictedPrice.Components"
TOTAL_SERIES = "PredictedPrice.Total"
USAGE_SERIES = "PowerUsage"
DETAILED_USAGE_SERIES = "DetailedPowerUsage"

Record = Tuple[datetime, Dict[str, Any]]


@dataclass(frozen=True)
class DayResult:
    """Outcome of fetching one day of detailed usage: prepared records or the error."""
    day: date
    records: List[Record] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def resolve_mode(raw: str) -> RunMode:
    """Match --mode case-insensitively against the known modes."""
    try:
        return RunMode(raw.lower())
    except ValueError:
        valid = ", ".join(f'"{mode.value}"' for mode in RunMode)
        raise ConfigurationError(f'Unrecognized mode "{raw}". A valid --mode of either {valid} must be specified')


def require_look_back(options: RunOptions, mode: RunMode) -> int:
    """Get the look-back for the usage modes, which must be a positive day count."""
    if options.look_back_days is None or options.look_back_days <= 0:
        raise ConfigurationError(f"If --mode is set to {mode.value}, --look-back-days must be specified and positive")
    return options.look_back_days


def select_current_price(forecast: PriceForecast) -> PricePoint:
    """The current price is the earliest forecast entry; ties keep the first one listed."""
    if not forecast.prices:
        raise NoPriceDataError("Price forecast contains no prices")
    return min(forecast.prices, key=lambda price: to_utc(price.starts_at))


def price_component_fields(price: PricePoint) -> Dict[str, Decimal]:
    """One field per component, named '{setter}_{method}'."""
    return {
        f"{component.charge_setter}_{component.charge_method}": component.value
        for component in price.components
    }


class Recorder:
    """Runs the recording routine selected by the run options."""

    def __init__(self, options: RunOptions, writer, android_client: FlickAndroidClient = None,
                 web_client: FlickWebClient = None):
        self.options = options
        self.writer = writer
        self.android_client = android_client or FlickAndroidClient(options.username, options.password)
        self.web_client = web_client or FlickWebClient(options.username, options.password)
        self._web_signed_in = False

    async def run(self, now: datetime = None) -> None:
        """
        Dispatch to the routine for the configured mode.

        Mode and look-back are validated before any request is made.
        """
        mode = resolve_mode(self.options.mode)
        logger.info("Starting recording", mode=mode.value)

        if mode is RunMode.PRICE:
            await self.record_current_price()
        elif mode is RunMode.USAGE_SIMPLE:
            await self.record_simple_usage(require_look_back(self.options, mode), now)
        else:
            await self.record_detailed_usage(require_look_back(self.options, mode), now)

    async def record_current_price(self) -> None:
        """Record the components and total of the current predicted price."""
        async with self.android_client:
            user_info = await self.android_client.get_user_info()
            supply_nodes = user_info.authorized_data_contexts.supply_nodes
            if not supply_nodes:
                raise NoSupplyNodeError("Account has no authorized supply node")

            forecast = await self.android_client.get_price_forecast(supply_nodes[0])

        current = select_current_price(forecast)
        timestamp = to_utc(current.starts_at)

        self.writer.write(COMPONENTS_SERIES, price_component_fields(current), timestamp)
        self.writer.write(TOTAL_SERIES, {"total": current.price.value}, timestamp)

        logger.info("Recorded current price",
                   starts_at=timestamp.isoformat(),
                   total=str(current.price.value),
                   components=len(current.components))
        print("Finished recording current power price")

    async def record_simple_usage(self, look_back_days: int, now: datetime = None) -> int:
        """Record usage buckets for the last look_back_days days. Returns the bucket count."""
        start, end = look_back_window(look_back_days, now)

        async with self.web_client:
            buckets = await self.web_client.get_power_usage(start, end)

        for bucket in buckets:
            self.writer.write(USAGE_SERIES, {"usage": bucket.value}, to_utc(bucket.started_at))

        logger.info("Recorded power usage", start=start.isoformat(), end=end.isoformat(), count=len(buckets))
        print(f"Finished recording {len(buckets)} power usage buckets")
        return len(buckets)

    async def record_detailed_usage(self, look_back_days: int, now: datetime = None) -> None:
        """
        Record detailed usage one day at a time, oldest day first.

        A failing day is logged and skipped; it never stops the remaining days.
        Signing in is part of fetching a day: until it succeeds it is retried
        for each day, and a failed attempt skips only that day.
        """
        async with AsyncExitStack() as session:
            for day in look_back_dates(look_back_days, now):
                result = await self._fetch_day(day, session)

                if not result.ok:
                    logger.warning("Skipping day of detailed usage", day=day.isoformat(), error=str(result.error))
                    continue

                for timestamp, fields in result.records:
                    self.writer.write(DETAILED_USAGE_SERIES, fields, timestamp)

                logger.debug("Recorded detailed usage", day=day.isoformat(), count=len(result.records))
                print(f"Recorded {len(result.records)} detailed usage intervals for {day.isoformat()}")

    async def _fetch_day(self, day: date, session: AsyncExitStack) -> DayResult:
        """Sign in if needed, then fetch and prepare one day, capturing any failure in the result."""
        try:
            if not self._web_signed_in:
                await session.enter_async_context(self.web_client)
                self._web_signed_in = True
            intervals = await self.web_client.fetch_detailed_usage_for_day(day)
            records = [
                (to_utc(interval.started_at), {
                    "price": interval.price,
                    "units": interval.units,
                    "total_cost": interval.total_cost,
                })
                for interval in intervals
            ]
        except Exception as e:
            return DayResult(day=day, error=e)
        return DayResult(day=day, records=records)
