"""Pydantic models for configuration validation."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from clusterstudy.exceptions import InvalidParameterError
from clusterstudy.metrics import MetricKind

_HEX_COLOUR = re.compile(r"^#[0-9a-fA-F]{6}$")


def _metric_label(v: Any) -> str:
    try:
        return MetricKind.parse(v).label
    except InvalidParameterError as e:
        raise ValueError(str(e)) from None


class RegionConfig(BaseModel):
    """Drawing region of the exercise generator."""

    x_min: float = 50.0
    x_max: float = 430.0
    y_min: float = 50.0
    y_max: float = 270.0

    @model_validator(mode='after')
    def validate_bounds(self) -> 'RegionConfig':
        """Ensure the region is non-empty."""
        if not (self.x_min < self.x_max and self.y_min < self.y_max):
            raise ValueError('Region bounds must satisfy x_min < x_max and y_min < y_max')
        return self


class GeneratorConfig(BaseModel):
    """Exercise point generator configuration."""

    n_points: int = Field(10, gt=0)
    n_clusters: int = Field(3, gt=0)
    seed: int = Field(20250423, ge=0)
    pull_factor: float = Field(0.6, ge=0, le=1)
    bootstrap_iterations: int = Field(8, gt=0)
    region: RegionConfig = Field(default_factory=RegionConfig)

    @field_validator('n_clusters')
    @classmethod
    def validate_clusters(cls, v: int, info) -> int:
        """Ensure n_clusters <= n_points."""
        if 'n_points' in info.data:
            if v > info.data['n_points']:
                raise ValueError('n_clusters must be <= n_points')
        return v


class KMeansConfig(BaseModel):
    """K-Means configuration."""

    k: int = Field(2, gt=0)
    metric: str = "L2"
    max_iter: int = Field(50, gt=0)
    seed: Optional[int] = Field(0, ge=0)

    @field_validator('metric', mode='before')
    @classmethod
    def normalize_metric(cls, v: Any) -> str:
        """Store the canonical metric label (L1, L2 or L∞)."""
        return _metric_label(v)


class DBSCANConfig(BaseModel):
    """DBSCAN configuration."""

    eps: float = Field(0.8, gt=0)
    min_pts: int = Field(4, ge=1)
    metric: str = "L2"

    @field_validator('metric', mode='before')
    @classmethod
    def normalize_metric(cls, v: Any) -> str:
        """Store the canonical metric label (L1, L2 or L∞)."""
        return _metric_label(v)


class ExerciseConfig(BaseModel):
    """Colouring exercise configuration."""

    palette: Dict[str, str] = Field(default_factory=lambda: {
        "red": "#e74c3c",
        "yellow": "#f1c40f",
        "green": "#2e7d32",
    })

    @field_validator('palette')
    @classmethod
    def validate_palette(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Ensure colours are distinct #rrggbb values."""
        if not v:
            raise ValueError('palette must contain at least one colour')
        for name, colour in v.items():
            if not _HEX_COLOUR.match(colour):
                raise ValueError(f'palette colour {name}={colour!r} is not #rrggbb')
        if len({c.lower() for c in v.values()}) != len(v):
            raise ValueError('palette colours must be distinct')
        return v


class QuizConfig(BaseModel):
    """Distance quiz configuration."""

    tolerance: float = Field(1e-2, ge=0)


class PlaygroundConfig(BaseModel):
    """Clustering playground configuration."""

    default_dataset: Literal["dataset1", "dataset2"] = "dataset1"
    max_runs: int = Field(3, gt=0)
    seed: Optional[int] = Field(None, ge=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_format: bool = False
    log_file: Optional[Path] = None


class ExperimentConfig(BaseModel):
    """Run bookkeeping."""

    name: str = "clusterstudy"
    config_hash: Optional[str] = None
    notes: str = ""


class Config(BaseModel):
    """Complete configuration model."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    project_name: str = "clusterstudy"
    # Fallback for sections that set no seed of their own
    seed: Optional[int] = Field(20250423, ge=0)

    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    kmeans: KMeansConfig = Field(default_factory=KMeansConfig)
    dbscan: DBSCANConfig = Field(default_factory=DBSCANConfig)
    exercise: ExerciseConfig = Field(default_factory=ExerciseConfig)
    quiz: QuizConfig = Field(default_factory=QuizConfig)
    playground: PlaygroundConfig = Field(default_factory=PlaygroundConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    experiment: ExperimentConfig = Field(default_factory=ExperimentConfig)

    # Hydra config (stored but not validated)
    hydra: Optional[Dict[str, Any]] = None
