"""Environment-based configuration for BreedLens."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from BREEDLENS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BREEDLENS_",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080

    # Authentication (None = disabled)
    api_key: str | None = None

    # ML device
    device: Literal["cpu", "cuda", "openvino"] = "cpu"

    # Model selection, same knobs as the MobileNet loader: {version, alpha}
    mobilenet_version: int = Field(default=2, ge=1, le=2)
    mobilenet_alpha: float = Field(default=1.0, gt=0.0)
    models_dir: str = "models"

    # ONNX Runtime threading
    intra_op_threads: int = Field(default=0, ge=0)
    inter_op_threads: int = Field(default=1, ge=1)

    # Concurrency
    max_concurrent: int = Field(default=2, ge=1)

    # Input limits
    max_image_pixels: int = Field(default=16_777_216, ge=1)
    max_file_size: int = Field(default=20_971_520, ge=1)

    # Classification
    top_k: int = Field(default=3, ge=1)

    # History (None = unbounded)
    history_limit: int | None = Field(default=None, ge=1)


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
