"""
flick2influx - Flick Electric pricing and usage exporter for InfluxDB

Pulls the current predicted price and historic power usage from the Flick
Electric APIs and records them as time-series points.

Main components:
- Flick API clients for the mobile (token) and web (cookie session) APIs
- Recorder with one routine per operating mode
- Buffered InfluxDB metrics writer
- Domain exceptions for clear error handling
"""

__version__ = "1.0.0"
