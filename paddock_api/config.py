"""
Application configuration using Pydantic settings.
"""
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Upload Limits
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum size in bytes of a raw GeoJSON upload body"
    )
    batch_history_limit: int = Field(
        default=50,
        description="Maximum number of upload batches returned by the history endpoint"
    )

    # Area Calculation
    acres_to_hectares: float = Field(
        default=0.404686,
        description="Conversion factor from declared acres to hectares"
    )
    geodesic_ellipsoid: str = Field(
        default="WGS84",
        description="Ellipsoid used for geodesic polygon area"
    )
    calculated_area_source: Literal["geometry", "declared"] = Field(
        default="geometry",
        description=(
            "Source of calculated_area_hectares: 'geometry' computes geodesic area, "
            "'declared' mirrors the declared hectares (legacy behaviour)"
        )
    )

    # Project Visualisation
    default_project_color: str = Field(
        default="#3B82F6",
        description="Color given to new projects before palette assignment"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Application Settings
    app_name: str = Field(
        default="Paddock GeoJSON API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
    )


# Global settings instance
settings = Settings()
