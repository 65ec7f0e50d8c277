"""Distance metrics for the clustering core."""

from __future__ import annotations

from clusterstudy.metrics.distance import MetricKind, distance, pairwise_distances

__all__ = [
    "MetricKind",
    "distance",
    "pairwise_distances",
]
