"""mapsketch configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from mapsketch.store.features import CapacityLimits


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Capacity limits per feature type
    MAX_POLYGONS: PositiveInt = 10  # counts polygons, rectangles and circles
    MAX_RECTANGLES: PositiveInt = 5
    MAX_CIRCLES: PositiveInt = 5
    MAX_LINESTRINGS: PositiveInt = 20  # line strings may overlap

    # Geometry
    MIN_TRIM_AREA: PositiveFloat = 0.0001  # native units (degrees^2 for lon/lat)
    CIRCLE_STEPS: int = Field(default=64, ge=3)  # circle ring vertices

    # Export
    EXPORT_INDENT: int = 2

    def capacity_limits(self) -> CapacityLimits:
        """Build the initial per-type capacity limits.

        Returns:
            A CapacityLimits populated from the MAX_* settings.
        """
        from mapsketch.store.features import CapacityLimits  # noqa: PLC0415

        return CapacityLimits(
            polygon=self.MAX_POLYGONS,
            rectangle=self.MAX_RECTANGLES,
            circle=self.MAX_CIRCLES,
            linestring=self.MAX_LINESTRINGS,
        )


# Singleton instance for import convenience
settings = Settings()
