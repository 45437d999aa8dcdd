"""
Application configuration management using Pydantic Settings.
Handles environment variables and default values shared by every run.
Per-run options (credentials, InfluxDB target, mode) come from the command line.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """
    
    # Flick Electric API Configuration
    flick_api_base_url: str = Field(
        default="https://api.flick.energy/",
        description="Base URL for the Flick mobile API (token auth)"
    )
    flick_web_base_url: str = Field(
        default="https://myflick.flickelectric.co.nz/",
        description="Base URL for the Flick customer website (cookie session)"
    )
    flick_client_id: str = Field(default="", description="OAuth client id of the Flick mobile app")
    flick_client_secret: str = Field(default="", description="OAuth client secret of the Flick mobile app")
    request_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    source_timezone: str = Field(
        default="Pacific/Auckland",
        description="Timezone assumed for timestamps Flick returns without an offset"
    )
    
    # InfluxDB Configuration
    influx_org: str = Field(default="-", description="Organization (ignored by InfluxDB 1.x)")
    influx_retention_policy: str = Field(default="", description="Retention policy, blank for the default")
    influx_batch_size: int = Field(default=5000, gt=0, description="Points per write request when flushing")
    
    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json/text)")
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
