"""K-Means partitioning with a selectable distance metric.

Implements Lloyd's algorithm with:
- Caller-supplied or randomly sampled initial centroids
- Nearest-centroid assignment under L1, L2 or L∞
- Early stop once no label changes
- Empty clusters keep their previous centroid
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist

from clusterstudy.clustering.interface import Clusterer
from clusterstudy.contracts import KMeansContract
from clusterstudy.exceptions import InvalidParameterError
from clusterstudy.metrics import MetricKind
from clusterstudy.points import LabeledPoint, PointLike, PointsLike, as_point_array
from clusterstudy.utils.rng import RandomSource

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITER = 50


def sample_initial_centroids(
    X: NDArray[np.float64],
    k: int,
    rng: RandomSource,
) -> NDArray[np.float64]:
    """Pick k distinct points as starting centroids.

    Uses a partial Fisher-Yates shuffle of the point indices, so it always
    terminates and every k-subset is equally likely.

    Args:
        X: Point matrix (N x 2)
        k: Number of centroids, 0 < k <= N
        rng: Random source

    Returns:
        Copy of the selected points (k x 2)
    """
    n = len(X)
    if not 0 < k <= n:
        raise InvalidParameterError(f"Cannot sample {k} distinct centroids from {n} points")

    indices = list(range(n))
    for i in range(k):
        j = i + min(int(rng.random() * (n - i)), n - i - 1)
        indices[i], indices[j] = indices[j], indices[i]

    return X[indices[:k]].copy()


def lloyd(
    X: NDArray[np.float64],
    centroids: NDArray[np.float64],
    metric: MetricKind,
    max_iter: int,
) -> Tuple[NDArray[np.int32], NDArray[np.float64], int, bool]:
    """Run Lloyd iterations from the given centroids.

    Args:
        X: Point matrix (N x 2)
        centroids: Starting centroids (K x 2); not modified
        metric: Distance metric for the assignment step
        max_iter: Maximum number of rounds

    Returns:
        Tuple of (labels, final centroids, rounds run, converged)
    """
    centroids = centroids.copy()
    k = len(centroids)
    labels = np.zeros(len(X), dtype=np.int32)
    converged = False
    n_iter = 0

    for n_iter in range(1, max_iter + 1):
        # Assignment; argmin returns the first minimum, so ties go to the lowest index
        distances = cdist(X, centroids, metric=metric.scipy_name)
        new_labels = np.argmin(distances, axis=1).astype(np.int32)

        n_changed = int(np.sum(new_labels != labels))
        labels = new_labels
        if n_changed == 0:
            converged = True
            break

        # Update; an empty cluster keeps its previous centroid
        for j in range(k):
            members = X[labels == j]
            if len(members):
                centroids[j] = members.mean(axis=0)

        logger.debug(f"  iter={n_iter}: {n_changed} labels changed")

    return labels, centroids, n_iter, converged


class KMeansClusterer(Clusterer):
    """K-Means clustering with a selectable metric.

    Initial centroids come from :meth:`set_initial_centroids` when their
    count matches k, otherwise k distinct input points are sampled from
    the clusterer's random source.
    """

    def __init__(
        self,
        k: int,
        metric: Union[MetricKind, str] = MetricKind.EUCLIDEAN,
        max_iter: int = DEFAULT_MAX_ITER,
        seed: Optional[int] = None,
        rng: Optional[RandomSource] = None,
        initial_centroids: Optional[PointsLike] = None,
    ):
        """Initialize K-Means clusterer.

        Args:
            k: Number of clusters; k <= 0 labels every point 0
            metric: Distance metric for assignment
            max_iter: Maximum Lloyd rounds
            seed: Seed for the default random source
            rng: Random source used for centroid sampling (overrides seed)
            initial_centroids: Optional starting centroids (k x 2)
        """
        super().__init__(metric=metric, seed=seed)
        self.k = k
        self.max_iter = max_iter
        self._rng: RandomSource = rng if rng is not None else random.Random(seed)

        self.initial_centroids_: Optional[NDArray[np.float64]] = None
        # Centroids the last run actually started from
        self.seed_centroids_: Optional[NDArray[np.float64]] = None

        if initial_centroids is not None:
            self.set_initial_centroids(initial_centroids)

        logger.info(f"KMeansClusterer: k={k}, metric={self.metric.label}, max_iter={max_iter}")

    @property
    def parameters(self) -> Dict[str, Any]:
        return {**super().parameters, "k": self.k, "max_iter": self.max_iter}

    def set_initial_centroids(self, centroids: Optional[PointsLike]) -> None:
        """Set initial centroids for reproducible re-runs.

        Args:
            centroids: Initial centroid positions (K x 2) or None to clear
        """
        if centroids is not None:
            self.initial_centroids_ = as_point_array(centroids, name="initial_centroids")
            logger.info(f"Set {len(self.initial_centroids_)} initial centroids")
        else:
            self.initial_centroids_ = None
            logger.info("Cleared initial centroids")

    def _cluster(
        self,
        X: NDArray[np.float64],
    ) -> Tuple[NDArray[np.int32], Optional[NDArray[np.float64]], int, Dict[str, Any]]:
        n = len(X)

        if self.k <= 0 or n == 0:
            if self.k <= 0:
                logger.warning(f"k={self.k} <= 0: labeling all {n} points as cluster 0")
            self.seed_centroids_ = None
            return np.zeros(n, dtype=np.int32), None, 0, {"init_method": "none", "converged": True}

        use_given = self.initial_centroids_ is not None and len(self.initial_centroids_) == self.k
        if self.initial_centroids_ is not None and not use_given:
            logger.warning(
                f"Ignoring {len(self.initial_centroids_)} initial centroids for k={self.k}"
            )

        try:
            KMeansContract.validate(
                n, self.k, self.max_iter, self.initial_centroids_ if use_given else None
            )
        except InvalidParameterError as e:
            logger.error(f"Invalid K-Means parameters: {e}")
            raise

        if use_given:
            seeds = self.initial_centroids_.copy()
            init_method = "provided"
        else:
            seeds = sample_initial_centroids(X, self.k, self._rng)
            init_method = "random"
        self.seed_centroids_ = seeds.copy()

        labels, centroids, n_iter, converged = lloyd(X, seeds, self.metric, self.max_iter)

        if not converged:
            logger.debug(f"K-Means stopped at max_iter={self.max_iter} before converging")

        extra = {
            "init_method": init_method,
            "converged": converged,
            "initial_centroids": seeds.tolist(),
        }
        return labels, centroids, n_iter, extra

    def predict(self, points: PointsLike) -> NDArray[np.int32]:
        """Assign points to the nearest fitted centroid.

        Args:
            points: Points to assign

        Returns:
            Cluster labels
        """
        if not self.fitted_ or self.result_ is None:
            raise RuntimeError("Clusterer must be fitted before prediction")

        X = as_point_array(points)
        if self.result_.centroids is None:
            return np.zeros(len(X), dtype=np.int32)

        distances = cdist(X, self.result_.centroids, metric=self.metric.scipy_name)
        return np.argmin(distances, axis=1).astype(np.int32)


def partition(
    points: PointsLike,
    k: int,
    metric: Union[MetricKind, str] = MetricKind.EUCLIDEAN,
    initial_centroids: Optional[Sequence[PointLike]] = None,
    max_iter: int = DEFAULT_MAX_ITER,
    rng: Optional[RandomSource] = None,
) -> List[LabeledPoint]:
    """Partition points into k groups by iterative centroid refinement.

    Args:
        points: Points to cluster
        k: Number of clusters; k <= 0 labels every point 0
        metric: Distance metric
        initial_centroids: Starting centroids, used when exactly k are given
        max_iter: Maximum Lloyd rounds
        rng: Random source for centroid sampling

    Returns:
        Fresh list of labeled points in input order
    """
    clusterer = KMeansClusterer(
        k=k,
        metric=metric,
        max_iter=max_iter,
        rng=rng,
        initial_centroids=initial_centroids,
    )
    return clusterer.fit_predict(points)
