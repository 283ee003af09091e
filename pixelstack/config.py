"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    pixelstack_log_level: str = "info"

    # Channel ceiling for new layered images and generated patterns
    default_max_val: int = 255

    # Format used by save/save_all when the caller gives none
    default_format: str = "ppm"

    # Mosaic
    mosaic_seed: int | None = None
    mosaic_chunk_pixels: int = 65536

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
