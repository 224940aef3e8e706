"""Application settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables (``HEXMAP_`` prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="HEXMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (console or json)")

    # Map Configuration
    default_map_width: int = Field(default=20, gt=0, description="Default map width in cells")
    default_map_height: int = Field(default=15, gt=0, description="Default map height in cells")
    max_map_width: int = Field(default=500, gt=0, description="Max allowed map width")
    max_map_height: int = Field(default=500, gt=0, description="Max allowed map height")
    chunk_size_x: int = Field(default=5, gt=0, description="Map width granularity in cells")
    chunk_size_z: int = Field(default=5, gt=0, description="Map height granularity in cells")

    # Output Configuration
    maps_dir: str = Field(default="./maps", description="Directory for saved map files")


settings = Settings()
