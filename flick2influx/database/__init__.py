"""
Database package for flick2influx.
Contains the buffered InfluxDB metrics writer.
"""

from .writer import MetricsWriter

__all__ = [
    "MetricsWriter",
]
