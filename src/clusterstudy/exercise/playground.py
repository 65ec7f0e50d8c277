"""Clustering playground.

Runs K-Means or DBSCAN on a built-in dataset and keeps the results so
several parameter choices can be compared side by side. Each dataset
holds a limited number of saved runs.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from clusterstudy.clustering.dbscan import DBSCANClusterer
from clusterstudy.clustering.interface import ClusteringResult
from clusterstudy.clustering.kmeans import KMeansClusterer, sample_initial_centroids
from clusterstudy.exceptions import InvalidParameterError, RunLimitError
from clusterstudy.metrics import MetricKind
from clusterstudy.points import LabeledPoint, Point, group_by_cluster
from clusterstudy.synthetic.datasets import Dataset, get_dataset

logger = logging.getLogger(__name__)

MAX_RUNS_PER_DATASET = 3
MIN_EPS = 1e-4
N_COLOURS = 7
N_OFFSETS = 9
JITTER_STEP = 0.18


def jitter(point: Point, offset_index: int, step: float = JITTER_STEP) -> Point:
    """Shift a point onto a 3x3 grid of offsets so overlapping runs stay visible."""
    dx = (offset_index % 3) - 1
    dy = (offset_index // 3) - 1
    return Point(point.x + dx * step, point.y + dy * step)


@dataclass
class SavedRun:
    """One saved clustering run.

    Attributes:
        id: Unique run id
        dataset: Dataset key the run belongs to
        method: "KMeans" or "DBSCAN"
        params_desc: Human-readable parameters, e.g. "k=2"
        metric: Metric label
        points: Labeled points in dataset order
        visible: Whether the run is shown
        colour_seed: Palette offset for the run's clusters
        offset_index: Position on the 3x3 jitter grid
        silhouette_score: Silhouette of the run (0.0 when undefined)
    """
    id: str
    dataset: str
    method: str
    params_desc: str
    metric: str
    points: List[LabeledPoint]
    visible: bool = True
    colour_seed: int = 0
    offset_index: int = 0
    silhouette_score: float = 0.0

    @property
    def label(self) -> str:
        return f"{self.method} ({self.params_desc}, {self.metric})"

    def clusters(self) -> Dict[int, List[Point]]:
        return group_by_cluster(self.points)

    def display_points(self) -> List[LabeledPoint]:
        """Points shifted by this run's jitter offset."""
        out = []
        for p in self.points:
            q = jitter(p, self.offset_index)
            out.append(LabeledPoint(q.x, q.y, p.cluster))
        return out


@dataclass
class CentroidCache:
    """Single-slot cache of initial centroids keyed by (dataset, k)."""
    key: Optional[Tuple[str, int]] = None
    centroids: Optional[NDArray[np.float64]] = field(default=None, repr=False)

    def get(self, key: Tuple[str, int]) -> Optional[NDArray[np.float64]]:
        if self.key == key and self.centroids is not None:
            return self.centroids.copy()
        return None

    def put(self, key: Tuple[str, int], centroids: NDArray[np.float64]) -> None:
        self.key = key
        self.centroids = centroids.copy()

    def clear(self) -> None:
        self.key = None
        self.centroids = None


class Playground:
    """Interactive comparison of clustering runs on built-in datasets.

    Args:
        dataset: Key of the initially active dataset
        seed: Seed for initial-centroid sampling
        max_runs: Saved runs allowed per dataset
    """

    def __init__(
        self,
        dataset: str = "dataset1",
        seed: Optional[int] = None,
        max_runs: int = MAX_RUNS_PER_DATASET,
    ):
        if max_runs < 1:
            raise InvalidParameterError(f"max_runs must be >= 1, got {max_runs}")
        self._dataset: Dataset = get_dataset(dataset)
        self.seed = seed
        self.max_runs = max_runs
        self._rng = random.Random(seed)
        self.cache = CentroidCache()
        self.runs: List[SavedRun] = []

    @classmethod
    def from_config(cls, config, fallback_seed: Optional[int] = None) -> "Playground":
        """Build from a PlaygroundConfig.

        Args:
            config: PlaygroundConfig
            fallback_seed: Used when the playground section sets no seed
        """
        seed = config.seed if config.seed is not None else fallback_seed
        return cls(dataset=config.default_dataset, seed=seed, max_runs=config.max_runs)

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    def select_dataset(self, key: str) -> Dataset:
        """Switch the active dataset; the centroid cache is cleared."""
        self._dataset = get_dataset(key)
        self.cache.clear()
        logger.info(f"Active dataset: {key} ({self._dataset.name})")
        return self._dataset

    def runs_for(self, dataset: Optional[str] = None) -> List[SavedRun]:
        key = dataset or self._dataset.key
        return [r for r in self.runs if r.dataset == key]

    def visible_runs(self) -> List[SavedRun]:
        """Visible runs of the active dataset."""
        return [r for r in self.runs_for() if r.visible]

    def _check_capacity(self) -> None:
        if len(self.runs_for()) >= self.max_runs:
            logger.warning(f"Run limit reached for dataset {self._dataset.key}")
            raise RunLimitError(self._dataset.key, self.max_runs)

    def run_kmeans(
        self,
        k: int = 2,
        metric: Union[MetricKind, str] = MetricKind.EUCLIDEAN,
    ) -> SavedRun:
        """Run K-Means on the active dataset and save the result.

        Initial centroids are sampled once per (dataset, k) and reused until
        the dataset or k changes, so metrics can be compared from the same
        starting point.
        """
        self._check_capacity()
        k = max(1, int(k))
        X = self._dataset.points

        cache_key = (self._dataset.key, k)
        centroids = self.cache.get(cache_key)
        if centroids is None:
            centroids = sample_initial_centroids(X, k, self._rng)
            self.cache.put(cache_key, centroids)
            logger.debug(f"Sampled new initial centroids for {cache_key}")

        clusterer = KMeansClusterer(k=k, metric=metric, seed=self.seed, initial_centroids=centroids)
        result = clusterer.fit(X)
        return self._save("KMeans", f"k={k}", result)

    def run_dbscan(
        self,
        eps: float = 0.8,
        min_pts: int = 4,
        metric: Union[MetricKind, str] = MetricKind.EUCLIDEAN,
    ) -> SavedRun:
        """Run DBSCAN on the active dataset and save the result."""
        self._check_capacity()
        eps = max(MIN_EPS, float(eps))
        min_pts = max(1, int(min_pts))

        clusterer = DBSCANClusterer(eps=eps, min_pts=min_pts, metric=metric)
        result = clusterer.fit(self._dataset.points)
        return self._save("DBSCAN", f"eps={eps:g}, minPts={min_pts}", result)

    def _save(self, method: str, params_desc: str, result: ClusteringResult) -> SavedRun:
        index = len(self.runs)
        run = SavedRun(
            id=uuid.uuid4().hex,
            dataset=self._dataset.key,
            method=method,
            params_desc=params_desc,
            metric=result.metric,
            points=result.labeled_points(),
            colour_seed=index % N_COLOURS,
            offset_index=index % N_OFFSETS,
            silhouette_score=result.silhouette_score,
        )
        self.runs.append(run)
        logger.info(f"Saved run {run.label}: {result.n_clusters} clusters, {result.n_noise} noise")
        return run

    def _find(self, run_id: str) -> SavedRun:
        for run in self.runs:
            if run.id == run_id:
                return run
        raise KeyError(run_id)

    def toggle_visibility(self, run_id: str) -> bool:
        """Flip a run's visibility.

        Returns:
            The new visibility

        Raises:
            KeyError: If no run has this id
        """
        run = self._find(run_id)
        run.visible = not run.visible
        return run.visible

    def delete_run(self, run_id: str) -> None:
        """Remove a run; unknown ids are ignored."""
        self.runs = [r for r in self.runs if r.id != run_id]
