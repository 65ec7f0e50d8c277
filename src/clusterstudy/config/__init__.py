"""Configuration management with Pydantic validation."""

from __future__ import annotations

from clusterstudy.config.loader import ConfigLoader, load_config
from clusterstudy.config.models import (
    Config,
    DBSCANConfig,
    ExerciseConfig,
    GeneratorConfig,
    KMeansConfig,
    LoggingConfig,
    PlaygroundConfig,
    QuizConfig,
)
from clusterstudy.config.utils import compute_config_hash, get_config_diff, save_config_with_hash

__all__ = [
    "Config",
    "GeneratorConfig",
    "KMeansConfig",
    "DBSCANConfig",
    "ExerciseConfig",
    "QuizConfig",
    "PlaygroundConfig",
    "LoggingConfig",
    "ConfigLoader",
    "load_config",
    "compute_config_hash",
    "get_config_diff",
    "save_config_with_hash",
]
