"""Clustering with strategy pattern.

Two interchangeable strategies share the Clusterer interface:
centroid-based partitioning (K-Means) and density-based grouping (DBSCAN).
"""

from __future__ import annotations

from clusterstudy.clustering.dbscan import DBSCANClusterer, density_cluster
from clusterstudy.clustering.interface import Clusterer, ClusteringResult
from clusterstudy.clustering.kmeans import KMeansClusterer, partition, sample_initial_centroids

__all__ = [
    "Clusterer",
    "ClusteringResult",
    "KMeansClusterer",
    "DBSCANClusterer",
    "partition",
    "density_cluster",
    "sample_initial_centroids",
]
