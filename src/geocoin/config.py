"""Runtime configuration for Geocoin."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven world and runtime settings."""

    model_config = SettingsConfigDict(env_prefix="GEOCOIN_", env_file=".env", extra="ignore")

    app_name: str = "geocoin"
    log_level: str = "INFO"

    origin_lat: float = 36.51451
    origin_lng: float = -119.55476
    cell_size: float = Field(default=1e-4, gt=0, description="Cell edge length in degrees.")
    step_size: float = Field(default=1e-4, gt=0, description="Manual movement step in degrees.")
    neighborhood_radius: int = Field(default=8, ge=0)
    spawn_rate: float = Field(default=0.1, ge=0.0, le=1.0)
    max_coins_per_cache: int = Field(default=5, ge=1)
    max_coin_value: int = Field(default=10, ge=1)
    world_seed: str = Field(default="", description="Optional salt mixed into every grid hash.")

    save_path: str = Field(
        default="~/.geocoin/world.json",
        description="Location of the persisted world record.",
    )
    feed_interval_seconds: float = Field(default=1.0, ge=0.0)


settings = Settings()
