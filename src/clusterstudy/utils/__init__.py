"""Utility functions for clusterstudy."""

from __future__ import annotations

from clusterstudy.utils.logging import JSONFormatter, setup_logger
from clusterstudy.utils.rng import Mulberry32, RandomSource

__all__ = [
    "JSONFormatter",
    "Mulberry32",
    "RandomSource",
    "setup_logger",
]
