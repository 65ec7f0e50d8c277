"""Clustering interface with strategy pattern.

Every clusterer consumes a 2D point set and returns a fresh
ClusteringResult; no state from a previous run leaks into the next.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from sklearn.metrics import silhouette_score

from clusterstudy.metrics import MetricKind
from clusterstudy.points import NOISE, LabeledPoint, PointsLike, as_point_array, label_points

logger = logging.getLogger(__name__)


@dataclass
class ClusteringResult:
    """Result of a clustering run with its provenance.

    Attributes:
        points: Input coordinates (N x 2)
        labels: Cluster label for each point, NOISE (-1) for noise
        centroids: Final centroids (K x 2), None for density clustering
        n_clusters: Number of distinct non-noise labels
        n_noise: Number of points labeled as noise
        n_iter: Iterations performed (Lloyd rounds, or 1 for single pass)
        silhouette_score: Mean silhouette coefficient over non-noise points
        metric: Label of the distance metric used
        parameters: Algorithm parameters used for the run
        seed: Seed of the random source, if one was used
    """
    points: NDArray[np.float64]
    labels: NDArray[np.int32]
    centroids: Optional[NDArray[np.float64]]
    n_clusters: int
    n_noise: int
    n_iter: int
    silhouette_score: float
    metric: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    seed: Optional[int] = None

    def labeled_points(self) -> List[LabeledPoint]:
        """Fresh list of LabeledPoint in input order."""
        return label_points(self.points, self.labels)

    def to_json(self, path: Optional[Union[str, Path]] = None) -> str:
        """Export result to JSON.

        Args:
            path: Optional path to save JSON file

        Returns:
            JSON string representation
        """
        data = {
            "points": self.points.tolist(),
            "labels": self.labels.tolist(),
            "centroids": self.centroids.tolist() if self.centroids is not None else None,
            "n_clusters": int(self.n_clusters),
            "n_noise": int(self.n_noise),
            "n_iter": int(self.n_iter),
            "silhouette_score": float(self.silhouette_score),
            "metric": self.metric,
            "parameters": {k: (v.tolist() if isinstance(v, np.ndarray) else
                              v.item() if isinstance(v, (np.floating, np.integer)) else v)
                           for k, v in self.parameters.items()},
            "seed": int(self.seed) if self.seed is not None else None,
        }

        json_str = json.dumps(data, indent=2)

        if path is not None:
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json_str)
            logger.info(f"Saved clustering result to {path}")

        return json_str

    @classmethod
    def from_json(cls, source: Union[str, Path]) -> ClusteringResult:
        """Load result from a JSON string or a path to a JSON file."""
        if isinstance(source, Path) or (isinstance(source, str) and not source.lstrip().startswith("{")):
            source = Path(source).read_text()

        data = json.loads(source)

        centroids = data.get("centroids")
        return cls(
            points=np.array(data["points"], dtype=np.float64).reshape(-1, 2),
            labels=np.array(data["labels"], dtype=np.int32),
            centroids=np.array(centroids, dtype=np.float64) if centroids is not None else None,
            n_clusters=data["n_clusters"],
            n_noise=data["n_noise"],
            n_iter=data["n_iter"],
            silhouette_score=data["silhouette_score"],
            metric=data["metric"],
            parameters=data.get("parameters", {}),
            seed=data.get("seed"),
        )


class Clusterer(ABC):
    """Abstract base class for 2D clustering algorithms.

    Subclasses implement :meth:`_cluster`; :meth:`fit` handles input
    conversion, scoring, logging and result bookkeeping.
    """

    def __init__(
        self,
        metric: Union[MetricKind, str] = MetricKind.EUCLIDEAN,
        seed: Optional[int] = None,
    ):
        """Initialize clusterer.

        Args:
            metric: Distance metric used for every comparison
            seed: Seed for the random source, where the algorithm uses one
        """
        self.metric = MetricKind.parse(metric)
        self.seed = seed
        self.fitted_ = False
        self.result_: Optional[ClusteringResult] = None

        logger.debug(
            f"Initialized {self.__class__.__name__} with metric={self.metric.label}, seed={seed}"
        )

    @abstractmethod
    def _cluster(
        self,
        X: NDArray[np.float64],
    ) -> Tuple[NDArray[np.int32], Optional[NDArray[np.float64]], int, Dict[str, Any]]:
        """Cluster a validated point array.

        Args:
            X: Point matrix (N x 2)

        Returns:
            Tuple of (labels, centroids, n_iter, extra_params)
        """
        pass

    @property
    def parameters(self) -> Dict[str, Any]:
        """Parameters recorded with every result."""
        return {"algorithm": self.__class__.__name__, "metric": self.metric.label}

    def fit(self, points: PointsLike) -> ClusteringResult:
        """Cluster a point set.

        Args:
            points: Points as an (N, 2) array or a sequence of Point-like values

        Returns:
            ClusteringResult for this run
        """
        X = as_point_array(points)
        logger.info(f"Fitting {self.__class__.__name__} on {len(X)} points ({self.metric.label})")

        labels, centroids, n_iter, extra = self._cluster(X)
        labels = np.asarray(labels, dtype=np.int32)

        non_noise = labels[labels != NOISE]
        n_clusters = int(len(np.unique(non_noise)))
        n_noise = int(np.sum(labels == NOISE))
        sil_score = self._silhouette(X, labels)

        self.result_ = ClusteringResult(
            points=X,
            labels=labels,
            centroids=centroids,
            n_clusters=n_clusters,
            n_noise=n_noise,
            n_iter=n_iter,
            silhouette_score=sil_score,
            metric=self.metric.label,
            parameters={**self.parameters, **extra},
            seed=self.seed,
        )
        self.fitted_ = True

        logger.info(
            f"Clustering complete: {n_clusters} clusters, {n_noise} noise, "
            f"silhouette={sil_score:.3f}, iterations={n_iter}"
        )

        return self.result_

    def fit_predict(self, points: PointsLike) -> List[LabeledPoint]:
        """Cluster a point set and return labeled points in input order."""
        return self.fit(points).labeled_points()

    def _silhouette(self, X: NDArray[np.float64], labels: NDArray[np.int32]) -> float:
        """Silhouette over non-noise points; 0.0 when it is undefined."""
        mask = labels != NOISE
        n_labels = len(np.unique(labels[mask]))
        if n_labels < 2 or n_labels >= int(mask.sum()):
            return 0.0
        return float(silhouette_score(X[mask], labels[mask], metric=self.metric.sklearn_name))
