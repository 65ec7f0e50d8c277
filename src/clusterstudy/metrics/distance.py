"""Distance metrics for 2D points.

Three norms are supported:
- L1 (Manhattan): sum of absolute coordinate differences
- L2 (Euclidean): straight-line length
- L∞ (Chebyshev): largest absolute coordinate difference
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Dict, Union

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist

from clusterstudy.exceptions import InvalidParameterError
from clusterstudy.points import PointLike, PointsLike, as_point_array

logger = logging.getLogger(__name__)


class MetricKind(str, Enum):
    """Supported distance norms, valued by their UI label."""

    MANHATTAN = "L1"
    EUCLIDEAN = "L2"
    CHEBYSHEV = "L∞"

    @property
    def label(self) -> str:
        return self.value

    @property
    def scipy_name(self) -> str:
        """Metric name understood by scipy's cdist."""
        return _SCIPY_NAMES[self]

    @property
    def sklearn_name(self) -> str:
        """Metric name understood by scikit-learn's pairwise metrics."""
        return _SKLEARN_NAMES[self]

    @classmethod
    def parse(cls, value: Union[str, "MetricKind"]) -> "MetricKind":
        """Resolve a label, name or alias to a MetricKind.

        Accepts "L1"/"manhattan", "L2"/"euclidean", "L∞"/"Linf"/"chebyshev"
        in any letter case.

        Raises:
            InvalidParameterError: If the name is not recognised
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        try:
            return _ALIASES[key]
        except KeyError:
            raise InvalidParameterError(
                f"Unknown metric '{value}'. Expected one of: "
                f"{', '.join(m.label for m in cls)}"
            ) from None


_SCIPY_NAMES: Dict[MetricKind, str] = {
    MetricKind.MANHATTAN: "cityblock",
    MetricKind.EUCLIDEAN: "euclidean",
    MetricKind.CHEBYSHEV: "chebyshev",
}

_SKLEARN_NAMES: Dict[MetricKind, str] = {
    MetricKind.MANHATTAN: "manhattan",
    MetricKind.EUCLIDEAN: "euclidean",
    MetricKind.CHEBYSHEV: "chebyshev",
}

_ALIASES: Dict[str, MetricKind] = {
    "l1": MetricKind.MANHATTAN,
    "manhattan": MetricKind.MANHATTAN,
    "cityblock": MetricKind.MANHATTAN,
    "l2": MetricKind.EUCLIDEAN,
    "euclidean": MetricKind.EUCLIDEAN,
    "l∞": MetricKind.CHEBYSHEV,
    "linf": MetricKind.CHEBYSHEV,
    "chebyshev": MetricKind.CHEBYSHEV,
}


def distance(
    a: PointLike,
    b: PointLike,
    kind: Union[MetricKind, str] = MetricKind.EUCLIDEAN,
) -> float:
    """Distance between two points under the selected norm.

    Args:
        a: First point (Point or (x, y))
        b: Second point (Point or (x, y))
        kind: Metric to use

    Returns:
        Non-negative distance, zero exactly when a == b
    """
    kind = MetricKind.parse(kind)
    (ax, ay), (bx, by) = as_point_array([a, b], name="distance operands")
    dx = ax - bx
    dy = ay - by

    if kind is MetricKind.MANHATTAN:
        return float(abs(dx) + abs(dy))
    if kind is MetricKind.EUCLIDEAN:
        return float(math.hypot(dx, dy))
    return float(max(abs(dx), abs(dy)))


def pairwise_distances(
    a: PointsLike,
    b: PointsLike,
    kind: Union[MetricKind, str] = MetricKind.EUCLIDEAN,
) -> NDArray[np.float64]:
    """Distance matrix between two point sets.

    Args:
        a: N points
        b: M points
        kind: Metric to use

    Returns:
        Matrix (N x M) with entry [i, j] = distance(a[i], b[j])
    """
    kind = MetricKind.parse(kind)
    xa = as_point_array(a, name="a")
    xb = as_point_array(b, name="b")
    if len(xa) == 0 or len(xb) == 0:
        return np.zeros((len(xa), len(xb)), dtype=np.float64)
    return cdist(xa, xb, metric=kind.scipy_name)
