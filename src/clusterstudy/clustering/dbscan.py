"""Density-based clustering (DBSCAN) with a selectable distance metric.

Points with at least ``min_pts`` neighbors within ``eps`` (the point itself
included) are core points. Clusters grow breadth-first from core points;
points reachable from no core point stay noise.

Cluster ids are handed out in the order core points are discovered while
scanning the input, and neighbors are visited in input order, so the
output is fully determined by the input order.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist

from clusterstudy.clustering.interface import Clusterer
from clusterstudy.contracts import DBSCANContract
from clusterstudy.exceptions import InvalidParameterError
from clusterstudy.metrics import MetricKind
from clusterstudy.points import NOISE, LabeledPoint, PointsLike

logger = logging.getLogger(__name__)

# Internal label for points not yet visited
_UNVISITED = -99


class DBSCANClusterer(Clusterer):
    """DBSCAN clustering.

    Args:
        eps: Neighborhood radius (inclusive), > 0
        min_pts: Minimum neighborhood size for a core point, >= 1
        metric: Distance metric for neighborhood queries
    """

    def __init__(
        self,
        eps: float,
        min_pts: int,
        metric: Union[MetricKind, str] = MetricKind.EUCLIDEAN,
    ):
        super().__init__(metric=metric)
        try:
            DBSCANContract.validate(eps, min_pts)
        except InvalidParameterError as e:
            logger.error(f"Invalid DBSCAN parameters: {e}")
            raise
        self.eps = float(eps)
        self.min_pts = int(min_pts)

        # Core-point mask of the last run
        self.core_mask_: Optional[NDArray[np.bool_]] = None

        logger.info(f"DBSCANClusterer: eps={eps}, min_pts={min_pts}, metric={self.metric.label}")

    @property
    def parameters(self) -> Dict[str, Any]:
        return {**super().parameters, "eps": self.eps, "min_pts": self.min_pts}

    def _region_query(self, X: NDArray[np.float64], idx: int) -> List[int]:
        """Indices of all points within eps of X[idx], in input order."""
        distances = cdist(X[idx:idx + 1], X, metric=self.metric.scipy_name)[0]
        return np.flatnonzero(distances <= self.eps).tolist()

    def _cluster(
        self,
        X: NDArray[np.float64],
    ) -> Tuple[NDArray[np.int32], Optional[NDArray[np.float64]], int, Dict[str, Any]]:
        n = len(X)
        labels = np.full(n, _UNVISITED, dtype=np.int32)
        core = np.zeros(n, dtype=bool)
        cluster_id = 0

        for i in range(n):
            if labels[i] != _UNVISITED:
                continue

            neighbors = self._region_query(X, i)
            if len(neighbors) < self.min_pts:
                # Not terminal: a later core point may claim it as a border point
                labels[i] = NOISE
                continue

            core[i] = True
            labels[i] = cluster_id
            # Pending membership is a linear scan of the queue (quadratic overall)
            queue = deque(j for j in neighbors if j != i)

            while queue:
                current = queue.popleft()
                if labels[current] == NOISE:
                    labels[current] = cluster_id
                if labels[current] != _UNVISITED:
                    continue

                labels[current] = cluster_id
                current_neighbors = self._region_query(X, current)
                if len(current_neighbors) >= self.min_pts:
                    core[current] = True
                    pending = [
                        j for j in current_neighbors
                        if labels[j] == _UNVISITED and j not in queue
                    ]
                    queue.extend(pending)

            logger.debug(f"  cluster {cluster_id}: {int(np.sum(labels == cluster_id))} points")
            cluster_id += 1

        self.core_mask_ = core
        n_core = int(core.sum())
        n_noise = int(np.sum(labels == NOISE))

        extra = {
            "n_core": n_core,
            "n_border": n - n_core - n_noise,
        }
        return labels, None, 1, extra


def density_cluster(
    points: PointsLike,
    eps: float,
    min_pts: int,
    metric: Union[MetricKind, str] = MetricKind.EUCLIDEAN,
) -> List[LabeledPoint]:
    """Group points into density-connected clusters.

    Args:
        points: Points to cluster
        eps: Neighborhood radius (inclusive), > 0
        min_pts: Minimum neighborhood size for a core point, >= 1
        metric: Distance metric

    Returns:
        Fresh list of labeled points in input order; noise is labeled -1
    """
    return DBSCANClusterer(eps=eps, min_pts=min_pts, metric=metric).fit_predict(points)
