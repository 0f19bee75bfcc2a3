"""Configuration using pydantic-settings."""

from pydantic_settings import BaseSettings

GEONAMES_DUMP_URL = "http://download.geonames.org/export/dump/"


class SyncSettings(BaseSettings):
    """GeoNames sync configuration."""

    base_url: str = GEONAMES_DUMP_URL
    timeout: float = 60.0
    user_agent: str = "geosync/0.1 (+https://github.com/geosync)"
    max_connections: int = 10
    max_keepalive_connections: int = 5
    chunk_size: int = 64 * 1024
    strict_parsing: bool = False
    # Reference date is computed once per client unless this is disabled
    pin_reference_date: bool = True

    model_config = {"env_prefix": "GEOSYNC_"}


settings = SyncSettings()
