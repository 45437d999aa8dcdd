"""
Domain exceptions for flick2influx.
Provides clear, typed exceptions for configuration and data errors.
"""


class Flick2InfluxError(Exception):
    """Base exception for all flick2influx errors."""
    pass


class ConfigurationError(Flick2InfluxError):
    """Raised when the run options are invalid. Always raised before any network I/O."""
    pass


class AuthenticationError(Flick2InfluxError):
    """Raised when Flick rejects the account credentials or session."""
    pass


class DataFetchError(Flick2InfluxError):
    """Raised when fetching or parsing Flick data fails."""
    pass


class NoSupplyNodeError(Flick2InfluxError):
    """Raised when the account has no authorized supply node."""
    pass


class NoPriceDataError(Flick2InfluxError):
    """Raised when the price forecast contains no prices."""
    pass
