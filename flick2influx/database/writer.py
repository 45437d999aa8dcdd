"""
Metrics writer for InfluxDB using influxdb-client.
Points are buffered in memory and written in batches when the writer is closed.

InfluxDB 1.x is reached through its 2.x compatibility API: the token is
"username:password" and the bucket is "database/retention_policy".
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS

from flick2influx.config import settings
from flick2influx.logging_config import get_logger
from flick2influx.utils.time_utils import to_utc

logger = get_logger(__name__)


class MetricsWriter:
    """Buffered writer for one InfluxDB database."""
    
    def __init__(self, uri: str, database: str, username: Optional[str] = None,
                 password: Optional[str] = None, batch_size: Optional[int] = None):
        if batch_size is None:
            batch_size = settings.influx_batch_size
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        token = f"{username}:{password or ''}" if username else None
        self.client = InfluxDBClient(url=uri, token=token, org=settings.influx_org)
        self.write_api = self.client.write_api(write_options=SYNCHRONOUS)
        self.bucket = database
        if settings.influx_retention_policy:
            self.bucket = f"{database}/{settings.influx_retention_policy}"
        self.batch_size = batch_size
        self.failed_points = 0
        self._points: List[Point] = []
        self._closed = False
    
    def write(self, series: str, fields: Dict[str, Any], timestamp: datetime) -> None:
        """Buffer one point for series at timestamp (normalized to UTC)."""
        if self._closed:
            raise RuntimeError("MetricsWriter is closed")
        if not fields:
            logger.warning("Skipping point without fields", series=series, timestamp=timestamp.isoformat())
            return
        self._points.append(build_point(series, fields, timestamp))
    
    @property
    def pending(self) -> int:
        """Number of points waiting to be flushed."""
        return len(self._points)
    
    def flush(self) -> None:
        """Write buffered points in batches. Failed batches are reported and counted, not raised."""
        points, self._points = self._points, []
        for start in range(0, len(points), self.batch_size):
            batch = points[start:start + self.batch_size]
            try:
                self.write_api.write(bucket=self.bucket, org=settings.influx_org, record=batch)
                logger.debug("Wrote points to InfluxDB", bucket=self.bucket, count=len(batch))
            except Exception as e:
                self.failed_points += len(batch)
                self._on_error(f"Failed to write {len(batch)} points to {self.bucket}", e)
    
    def close(self) -> None:
        """Flush remaining points and close the InfluxDB client."""
        if self._closed:
            return
        self._closed = True
        try:
            self.flush()
        finally:
            self.write_api.close()
            self.client.close()
    
    def _on_error(self, message: str, error: Exception) -> None:
        logger.error("Error when recording influx stats", message=message, error=str(error))


def build_point(series: str, fields: Dict[str, Any], timestamp: datetime) -> Point:
    """Build a point, converting Decimal values to float for the line protocol."""
    point = Point(series).time(to_utc(timestamp), WritePrecision.S)
    for name, value in fields.items():
        if isinstance(value, Decimal):
            value = float(value)
        point = point.field(name, value)
    return point
