import logging
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from .models import StudConfig


class Settings(BaseSettings):
    """Generation defaults, overridable through JIGSAW_* environment variables."""

    # Stud shape
    STUD_WIDTH_FACTOR: float = Field(default=1 / 3, gt=0, lt=1)
    STUD_DEPTH_FACTOR: float = Field(default=1 / 6, gt=0)
    STUD_RISE1: float = Field(default=0.5, ge=0, le=1)
    STUD_RISE2: float = Field(default=0.7, ge=0, le=1)
    STUD_BLEND: float = Field(default=0.2, ge=0, le=1)
    CORNER_JOG: float = Field(default=0.0, ge=0)

    # Drawable region margin around the computed bounds
    FILL_BLEED: float = Field(default=0.0, ge=0)

    # Phase 2 (per-piece geometry) thread count
    WORKERS: int = Field(default=1, ge=1)

    # Polygon sampling density for renderers
    POINTS_PER_CURVE: int = Field(default=20, ge=2)

    LOG_LEVEL: str = "INFO"

    class Config:
        """Pydantic configuration class."""

        case_sensitive = True
        env_prefix = "JIGSAW_"
        env_file = ".env"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the log level and reject unknown names."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL {v!r}")
        return level

    @model_validator(mode="after")
    def validate_stud(self) -> "Settings":
        """Make sure the stud fields form a valid StudConfig."""
        self.stud_config()
        return self

    def stud_config(self) -> StudConfig:
        """Build the stud shape described by these settings."""
        return StudConfig(
            width_factor=self.STUD_WIDTH_FACTOR,
            depth_factor=self.STUD_DEPTH_FACTOR,
            rise1=self.STUD_RISE1,
            rise2=self.STUD_RISE2,
            blend=self.STUD_BLEND,
            corner_jog=self.CORNER_JOG,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
