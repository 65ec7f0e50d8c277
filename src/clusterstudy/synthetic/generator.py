"""Deterministic exercise point generator.

Produces a reproducible scatter with hidden ground-truth clusters:
1. Draw raw points uniformly inside the drawing region
2. Bootstrap K-Means on them (8 rounds, same seeded source)
3. Pull each point toward its bootstrap centroid and clamp to the region
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from numpy.typing import NDArray

from clusterstudy.clustering.kmeans import KMeansClusterer
from clusterstudy.exceptions import InvalidParameterError
from clusterstudy.metrics import MetricKind
from clusterstudy.points import GeneratedPoint
from clusterstudy.utils.rng import Mulberry32

logger = logging.getLogger(__name__)

DEFAULT_SEED = 20250423
DEFAULT_N_POINTS = 10
DEFAULT_N_CLUSTERS = 3
BOOTSTRAP_ITERATIONS = 8
PULL_FACTOR = 0.6


@dataclass(frozen=True)
class Region:
    """Axis-aligned drawing region."""
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def __post_init__(self):
        if not (self.x_min < self.x_max and self.y_min < self.y_max):
            raise InvalidParameterError(f"Empty region: {self}")

    def clamp(self, X: NDArray[np.float64]) -> NDArray[np.float64]:
        """Clamp an (N, 2) array into the region."""
        return np.column_stack([
            np.clip(X[:, 0], self.x_min, self.x_max),
            np.clip(X[:, 1], self.y_min, self.y_max),
        ])


# Keeps points off the chart axes
DRAW_REGION = Region(x_min=50.0, x_max=430.0, y_min=50.0, y_max=270.0)


class PointGenerator:
    """Seeded generator of exercise points.

    Attributes:
        region: Region points are drawn in and clamped to
        pull_factor: Fraction of the way each point moves toward its centroid
        bootstrap_iterations: Lloyd rounds of the bootstrap clustering
    """

    def __init__(
        self,
        region: Region = DRAW_REGION,
        pull_factor: float = PULL_FACTOR,
        bootstrap_iterations: int = BOOTSTRAP_ITERATIONS,
    ):
        if not 0.0 <= pull_factor <= 1.0:
            raise InvalidParameterError(f"pull_factor must be in [0, 1], got {pull_factor}")
        if bootstrap_iterations < 1:
            raise InvalidParameterError(
                f"bootstrap_iterations must be >= 1, got {bootstrap_iterations}"
            )
        self.region = region
        self.pull_factor = pull_factor
        self.bootstrap_iterations = bootstrap_iterations

    @classmethod
    def from_config(cls, config) -> "PointGenerator":
        """Build from a GeneratorConfig."""
        return cls(
            region=Region(
                x_min=config.region.x_min,
                x_max=config.region.x_max,
                y_min=config.region.y_min,
                y_max=config.region.y_max,
            ),
            pull_factor=config.pull_factor,
            bootstrap_iterations=config.bootstrap_iterations,
        )

    def generate(
        self,
        n: int = DEFAULT_N_POINTS,
        k: int = DEFAULT_N_CLUSTERS,
        seed: int = DEFAULT_SEED,
    ) -> List[GeneratedPoint]:
        """Generate n points in k hidden clusters.

        Args:
            n: Number of points
            k: Number of hidden clusters, 1 <= k <= n
            seed: Seed of the Mulberry32 source

        Returns:
            Points with ids 0..n-1, no colour and no evaluation
        """
        if n < 1:
            raise InvalidParameterError(f"n must be >= 1, got {n}")
        if not 1 <= k <= n:
            raise InvalidParameterError(f"k must be in [1, {n}], got {k}")

        rng = Mulberry32(seed)
        raw = self._draw_raw(n, rng)

        # Bootstrap grouping shares the seeded source so the whole run is reproducible
        bootstrap = KMeansClusterer(
            k=k,
            metric=MetricKind.EUCLIDEAN,
            max_iter=self.bootstrap_iterations,
            seed=seed,
            rng=rng,
        )
        result = bootstrap.fit(raw)
        cluster_ids = bootstrap.predict(raw)

        targets = result.centroids[cluster_ids]
        pulled = self.region.clamp(raw + self.pull_factor * (targets - raw))

        points = [
            GeneratedPoint(id=i, x=float(x), y=float(y), cluster_id=int(c))
            for i, ((x, y), c) in enumerate(zip(pulled, cluster_ids))
        ]

        sizes = np.bincount(cluster_ids, minlength=k).tolist()
        logger.info(f"Generated {n} points in {k} clusters (seed={seed}, sizes={sizes})")
        return points

    def _draw_raw(self, n: int, rng: Mulberry32) -> NDArray[np.float64]:
        r = self.region
        raw = np.empty((n, 2), dtype=np.float64)
        for i in range(n):
            raw[i, 0] = rng.random() * (r.x_max - r.x_min) + r.x_min
            raw[i, 1] = rng.random() * (r.y_max - r.y_min) + r.y_min
        return raw


def generate(
    n: int = DEFAULT_N_POINTS,
    k: int = DEFAULT_N_CLUSTERS,
    seed: int = DEFAULT_SEED,
    generator: Optional[PointGenerator] = None,
) -> List[GeneratedPoint]:
    """Generate a reproducible exercise scatter.

    Args:
        n: Number of points
        k: Number of hidden clusters
        seed: Seed of the pseudo-random source
        generator: Generator settings; defaults to the standard drawing region

    Returns:
        Points carrying hidden cluster ids
    """
    return (generator or PointGenerator()).generate(n=n, k=k, seed=seed)
