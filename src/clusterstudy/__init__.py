"""clusterstudy: distance metrics and clustering for interactive lessons.

A small toolkit behind a three-level clustering course:
- L1, L2 and L∞ distances between 2D points
- K-Means partitioning and DBSCAN density clustering under any of them
- A seeded generator of exercise points with hidden clusters
- A validator for learner colour assignments
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
from clusterstudy.clustering import (
    ClusteringResult,
    DBSCANClusterer,
    KMeansClusterer,
    density_cluster,
    partition,
)
from clusterstudy.exceptions import (
    ClusterStudyError,
    IncompleteAssignmentError,
    InvalidParameterError,
    RunLimitError,
)
from clusterstudy.exercise import ValidationResult, validate
from clusterstudy.metrics import MetricKind, distance, pairwise_distances
from clusterstudy.points import NOISE, GeneratedPoint, LabeledPoint, Point, group_by_cluster
from clusterstudy.synthetic import generate
from clusterstudy.utils import setup_logger

__all__ = [
    # Version info
    "__version__",
    # Points
    "NOISE",
    "Point",
    "LabeledPoint",
    "GeneratedPoint",
    "group_by_cluster",
    # Metrics
    "MetricKind",
    "distance",
    "pairwise_distances",
    # Clustering
    "ClusteringResult",
    "KMeansClusterer",
    "DBSCANClusterer",
    "partition",
    "density_cluster",
    # Generation and validation
    "generate",
    "validate",
    "ValidationResult",
    # Errors
    "ClusterStudyError",
    "InvalidParameterError",
    "IncompleteAssignmentError",
    "RunLimitError",
    # Utilities
    "setup_logger",
]
