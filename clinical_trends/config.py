"""Engine configuration using pydantic-settings."""

import warnings
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Every value here is a default: operations that use one also accept an
    explicit keyword override.
    """

    model_config = SettingsConfigDict(
        env_prefix="CLINICAL_TRENDS_",
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Status classification: borderline band as a fraction of range width
    borderline_tolerance: float = Field(default=0.10, ge=0)

    # Chart bounds
    min_span_floor: float = Field(default=10.0, ge=0)
    min_span_ratio: float = Field(default=0.2, ge=0)
    y_padding_ratio: float = Field(default=0.1, ge=0)

    # Overview sparklines
    sparkline_points: int = Field(default=10, ge=2)

    def model_post_init(self, __context) -> None:
        """Warn about settings that switch off behaviour."""
        if self.borderline_tolerance == 0:
            warnings.warn(
                "CLINICAL_TRENDS_BORDERLINE_TOLERANCE is 0; borderline classification is disabled.",
                UserWarning,
                stacklevel=2,
            )


settings = Settings()
