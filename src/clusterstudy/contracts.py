"""Input contracts for the clustering core.

Every public operation checks its inputs against these contracts before
doing any work, so out-of-domain input fails fast with a descriptive
error instead of looping or dividing by zero.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

import numpy as np
from numpy.typing import NDArray

from clusterstudy.exceptions import InvalidParameterError

logger = logging.getLogger(__name__)


# =============================================================================
# POINT SET CONTRACT
# =============================================================================

class PointSetContract:
    """Point sets are (N, 2) float arrays of finite coordinates."""

    DIMENSIONS: int = 2
    DTYPE = np.float64

    @staticmethod
    def validate(points: NDArray[np.float64], name: str = "points") -> None:
        """Validate a point array.

        Args:
            points: Candidate point array
            name: Name used in error messages

        Raises:
            InvalidParameterError: If the array is not (N, 2) or not finite
        """
        if points.ndim != 2 or points.shape[1] != PointSetContract.DIMENSIONS:
            raise InvalidParameterError(
                f"{name} must have shape (N, 2), got {points.shape}"
            )
        if not np.isfinite(points).all():
            raise InvalidParameterError(f"{name} contains NaN or Inf coordinates")


# =============================================================================
# ALGORITHM PARAMETER CONTRACTS
# =============================================================================

class KMeansContract:
    """Parameter contract for centroid-based partitioning."""

    @staticmethod
    def validate(
        n_points: int,
        k: int,
        max_iter: int,
        initial_centroids: Optional[NDArray[np.float64]] = None,
    ) -> None:
        """Validate partitioning parameters for k > 0.

        Args:
            n_points: Number of input points
            k: Requested number of clusters
            max_iter: Maximum Lloyd iterations
            initial_centroids: Caller-supplied centroids, if usable

        Raises:
            InvalidParameterError: On out-of-domain parameters
        """
        _require_int("k", k)
        _require_int("max_iter", max_iter)
        if max_iter < 1:
            raise InvalidParameterError(f"max_iter must be >= 1, got {max_iter}")
        if initial_centroids is None and k > n_points:
            raise InvalidParameterError(
                f"Cannot seed {k} centroids from {n_points} points; "
                f"k must not exceed the number of points"
            )


class DBSCANContract:
    """Parameter contract for density-based clustering."""

    @staticmethod
    def validate(eps: float, min_pts: int) -> None:
        """Validate density parameters.

        Args:
            eps: Neighborhood radius
            min_pts: Minimum neighborhood size for a core point

        Raises:
            InvalidParameterError: On out-of-domain parameters
        """
        if not isinstance(eps, (int, float, np.floating, np.integer)) or isinstance(eps, bool):
            raise InvalidParameterError(f"eps must be a number, got {eps!r}")
        if not math.isfinite(eps) or eps <= 0:
            raise InvalidParameterError(f"eps must be a finite value > 0, got {eps}")
        _require_int("min_pts", min_pts)
        if min_pts < 1:
            raise InvalidParameterError(f"min_pts must be >= 1, got {min_pts}")


def _require_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
