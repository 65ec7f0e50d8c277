"""Synthetic point sources: the seeded exercise generator and toy datasets."""

from __future__ import annotations

from clusterstudy.synthetic.datasets import DATASETS, Dataset, circle_points, get_dataset, list_datasets
from clusterstudy.synthetic.generator import DRAW_REGION, PointGenerator, Region, generate

__all__ = [
    "DATASETS",
    "DRAW_REGION",
    "Dataset",
    "PointGenerator",
    "Region",
    "circle_points",
    "generate",
    "get_dataset",
    "list_datasets",
]
