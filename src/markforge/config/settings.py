"""Configuration settings for Markforge."""

import math
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class GeometryConfig(BaseModel):
    """Configuration for path sampling and emission.

    Sample budgets are per-curve-segment scales: cubic segments receive
    ``budget // 10`` samples and quadratic segments ``budget // 15``, reduced
    for short segments by ``min_sample_spacing``.
    """

    sample_budget: int = Field(
        default=120,
        ge=20,
        le=2000,
        description="Sample budget for Boolean operations",
    )
    metrics_sample_budget: int = Field(
        default=60,
        ge=20,
        le=2000,
        description="Sample budget for area metrics",
    )
    compression_sample_budget: int = Field(
        default=80,
        ge=20,
        le=2000,
        description="Sample budget for horizontal compression round trips",
    )
    min_sample_spacing: float = Field(
        default=0.5,
        gt=0.0,
        le=10.0,
        description="Approximate distance between curve samples on short segments",
    )
    precision: int = Field(
        default=4,
        ge=1,
        le=8,
        description="Decimal places kept when emitting path data",
    )


class CustomizerConfig(BaseModel):
    """Configuration for the wordmark customizer retry policy."""

    visibility_threshold: float = Field(
        default=6.0,
        ge=0.0,
        le=100.0,
        description="Retry when device visibility falls below this value",
    )
    font_risk_threshold: float = Field(
        default=95.0,
        ge=0.0,
        le=100.0,
        description="Retry when default-font risk exceeds this value",
    )
    max_attempts: int = Field(
        default=2,
        ge=1,
        le=2,
        description="Total passes including the intensified retry",
    )
    cut_intensify: float = Field(
        default=1.2,
        ge=1.0,
        le=2.0,
        description="Magnitude multiplier for notch and seam cuts on retry",
    )
    bridge_intensify: float = Field(
        default=1.15,
        ge=1.0,
        le=2.0,
        description="Thickness multiplier for ligature bridges on retry",
    )
    silhouette_threshold: float = Field(
        default=0.02,
        ge=0.0,
        le=1.0,
        description="Area delta ratio at which the silhouette counts as changed",
    )
    legibility_loss_threshold: float = Field(
        default=0.35,
        ge=0.0,
        le=1.0,
        description="Area loss ratio beyond which legibility is penalized",
    )


class MotifConfig(BaseModel):
    """Configuration for the motif mark generator."""

    variant_count: int = Field(
        default=6,
        ge=1,
        le=6,
        description="Number of seed-derived variants",
    )
    monogram_font_family: str = Field(
        default="Inter",
        description="Font family used for monogram initials",
    )
    monogram_font_weight: int = Field(
        default=700,
        ge=100,
        le=900,
        description="Font weight used for monogram initials",
    )
    monogram_font_size: float = Field(
        default=64.0,
        gt=0.0,
        description="Font size at which monogram initials are outlined",
    )


class EvaluatorConfig(BaseModel):
    """Weights for the wordmark variant evaluator."""

    legibility_weight: float = Field(default=0.35, ge=0.0, le=1.0)
    weight_weight: float = Field(default=0.20, ge=0.0, le=1.0)
    distinctiveness_weight: float = Field(default=0.25, ge=0.0, le=1.0)
    spacing_weight: float = Field(default=0.20, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _weights_sum_to_one(self) -> "EvaluatorConfig":
        total = (
            self.legibility_weight
            + self.weight_weight
            + self.distinctiveness_weight
            + self.spacing_weight
        )
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ValueError(f"Evaluator weights must sum to 1.0, got {total:.3f}")
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class MarkforgeSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    customizer: CustomizerConfig = Field(default_factory=CustomizerConfig)
    motif: MotifConfig = Field(default_factory=MotifConfig)
    evaluator: EvaluatorConfig = Field(default_factory=EvaluatorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> MarkforgeSettings:
    """Get default application settings."""
    return MarkforgeSettings()
