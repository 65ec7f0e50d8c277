"""Built-in toy datasets for the clustering playground."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
from numpy.typing import NDArray

from clusterstudy.exceptions import InvalidParameterError


def circle_points(cx: float, cy: float, r: float, n: int) -> NDArray[np.float64]:
    """n points spaced uniformly on a circle, starting at angle 0.

    Returns:
        Array (n x 2)
    """
    angles = np.array([2 * math.pi * i / n for i in range(n)], dtype=np.float64)
    return np.column_stack([cx + r * np.cos(angles), cy + r * np.sin(angles)])


@dataclass(frozen=True)
class Dataset:
    """Named point set with the ring each point was drawn from.

    Attributes:
        key: Registry key
        name: Display name
        description: One-line description
        points: Coordinates (N x 2)
        labels: Index of the source circle for each point
    """
    key: str
    name: str
    description: str
    points: NDArray[np.float64]
    labels: NDArray[np.int32]

    def __len__(self) -> int:
        return len(self.points)


def _from_circles(key: str, name: str, description: str,
                  circles: List[Tuple[float, float, float, int]]) -> Dataset:
    parts = [circle_points(cx, cy, r, n) for cx, cy, r, n in circles]
    labels = np.concatenate([np.full(len(p), i, dtype=np.int32) for i, p in enumerate(parts)])
    points = np.vstack(parts)
    points.setflags(write=False)
    labels.setflags(write=False)
    return Dataset(key=key, name=name, description=description, points=points, labels=labels)


DATASETS: Dict[str, Dataset] = {
    "dataset1": _from_circles(
        "dataset1",
        "Gaussian Blobs",
        "Two well-separated blobs that illustrate simple, convex clusters.",
        [(1.0, 1.0, 1.2, 60), (5.0, 5.0, 1.2, 60)],
    ),
    "dataset2": _from_circles(
        "dataset2",
        "Concentric Circles",
        "Concentric rings sharing a centre but differing in radius (non-linear structure).",
        [(0.0, 0.0, 1.5, 120), (0.0, 0.0, 3.0, 120)],
    ),
}


def get_dataset(key: str) -> Dataset:
    """Look up a built-in dataset.

    Raises:
        InvalidParameterError: If the key is unknown
    """
    try:
        return DATASETS[key]
    except KeyError:
        raise InvalidParameterError(
            f"Unknown dataset '{key}'. Available: {', '.join(DATASETS)}"
        ) from None


def list_datasets() -> List[Dataset]:
    return list(DATASETS.values())
