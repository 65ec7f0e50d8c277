"""Point value types shared by the clustering core and the lesson hosts."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from clusterstudy.contracts import PointSetContract
from clusterstudy.exceptions import InvalidParameterError

# Label reserved for points that belong to no cluster
NOISE: int = -1


@dataclass(frozen=True)
class Point:
    """Immutable 2D point."""
    x: float
    y: float

    def as_tuple(self) -> tuple:
        return (self.x, self.y)


@dataclass(frozen=True)
class LabeledPoint(Point):
    """Point with the cluster label a clustering pass assigned to it.

    Attributes:
        cluster: Cluster index, or NOISE (-1) for unclustered points
    """
    cluster: int

    @property
    def is_noise(self) -> bool:
        return self.cluster == NOISE


@dataclass
class GeneratedPoint:
    """Exercise point with a hidden ground-truth cluster.

    Attributes:
        id: Position of the point in the generated sequence
        x: Horizontal coordinate (drawing space)
        y: Vertical coordinate (drawing space)
        cluster_id: Hidden ground-truth cluster index
        assigned_colour: Colour chosen by the learner, None until chosen
        is_correct: Result of the last validation, None when not evaluated
    """
    id: int
    x: float
    y: float
    cluster_id: int
    assigned_colour: Optional[str] = None
    is_correct: Optional[bool] = None

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


PointLike = Union[Point, GeneratedPoint, Sequence[float]]
PointsLike = Union[NDArray[np.floating], Iterable[PointLike]]


def as_point_array(points: PointsLike, name: str = "points") -> NDArray[np.float64]:
    """Convert any supported point collection to a validated (N, 2) array.

    Args:
        points: numpy array, or iterable of Point-like objects / (x, y) pairs
        name: Name used in error messages

    Returns:
        New float64 array of shape (N, 2); the input is never aliased
    """
    if isinstance(points, np.ndarray):
        arr = np.array(points, dtype=np.float64, copy=True)
        if arr.size == 0:
            arr = arr.reshape(0, 2)
    else:
        rows = [_coords(p) for p in points]
        arr = np.array(rows, dtype=np.float64).reshape(len(rows), -1) if rows \
            else np.empty((0, 2), dtype=np.float64)

    PointSetContract.validate(arr, name=name)
    return arr


def to_points(arr: NDArray[np.floating]) -> List[Point]:
    """Convert an (N, 2) array back to Point objects."""
    return [Point(float(x), float(y)) for x, y in arr]


def label_points(
    arr: NDArray[np.floating],
    labels: Union[NDArray[np.integer], Sequence[int]],
) -> List[LabeledPoint]:
    """Pair coordinates with labels into a fresh list of LabeledPoint."""
    return [
        LabeledPoint(float(x), float(y), int(label))
        for (x, y), label in zip(arr, labels)
    ]


def group_by_cluster(points: Iterable[LabeledPoint]) -> Dict[int, List[Point]]:
    """Split labeled points into per-cluster lists.

    Clusters appear in the order their first point is met; noise is kept
    under the NOISE key like any other label.
    """
    groups: Dict[int, List[Point]] = OrderedDict()
    for p in points:
        groups.setdefault(p.cluster, []).append(Point(p.x, p.y))
    return groups


def _coords(p: Any) -> tuple:
    if isinstance(p, (Point, GeneratedPoint)):
        return (p.x, p.y)
    if hasattr(p, "x") and hasattr(p, "y"):
        return (p.x, p.y)
    try:
        x, y = p
    except (TypeError, ValueError):
        raise InvalidParameterError(f"Cannot interpret {p!r} as a 2D point") from None
    return (x, y)
