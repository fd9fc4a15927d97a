"""Library configuration."""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings loaded from environment variables (SNAPLINE_*) and .env.

    Priority: environment variables > .env > defaults
    """

    model_config = SettingsConfigDict(
        env_prefix="SNAPLINE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Grid snapping
    grid_spacing: int = 10  # distance between grid dots
    grid_snapping_active: bool = True  # snapping enabled unless configured off

    # Path normalization
    path_cache_size: int = 1000  # max cached normalized paths

    # Intersection
    polyline_step: float = 5.0  # curve length per polyline segment
    crop_merge_distance: float = 1.0  # two hits closer than this count as one

    # Logging
    log_json: bool = False
    log_level: str = "INFO"
    log_file: str | None = None  # rotating file with every record
    error_log_file: str | None = None  # rotating file with ERROR and above


settings = Settings()
