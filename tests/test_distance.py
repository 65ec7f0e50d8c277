#!/usr/bin/env python3
"""Tests for L1, L2 and L∞ distances.

Tests verify:
1. Concrete quiz distances
2. Symmetry and identity
3. Ordering L∞ <= L2 <= L1
4. Metric name parsing
5. Pairwise matrices against the scalar distance
"""

from __future__ import annotations

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import math

import numpy as np
import pytest

from clusterstudy import InvalidParameterError, MetricKind, Point, distance, pairwise_distances


class TestDistance:
    """Scalar distance between two points."""

    def test_concrete_values(self):
        """Quiz pairs have integer answers."""
        assert distance((2, 5), (6, 1), MetricKind.MANHATTAN) == 8.0
        assert distance((3, 3), (7, 6), MetricKind.EUCLIDEAN) == 5.0
        assert distance((0, 2), (4, 5), MetricKind.CHEBYSHEV) == 4.0

    def test_worked_example(self):
        p1, p2 = Point(1, 2), Point(4, 6)
        assert distance(p1, p2, "L1") == 7.0
        assert distance(p1, p2, "L2") == 5.0
        assert distance(p1, p2, "L∞") == 4.0

    def test_default_is_euclidean(self):
        assert distance((0, 0), (3, 4)) == 5.0

    @pytest.mark.parametrize("kind", list(MetricKind))
    def test_symmetry_and_identity(self, kind):
        rng = np.random.default_rng(0)
        for a, b in rng.uniform(-100, 100, size=(50, 2, 2)):
            assert distance(a, b, kind) == pytest.approx(distance(b, a, kind))
            assert distance(a, a, kind) == 0.0
            assert distance(a, b, kind) > 0.0

    def test_metric_ordering(self):
        """Chebyshev <= Euclidean <= Manhattan for every pair."""
        rng = np.random.default_rng(1)
        for a, b in rng.uniform(-10, 10, size=(100, 2, 2)):
            linf = distance(a, b, MetricKind.CHEBYSHEV)
            l2 = distance(a, b, MetricKind.EUCLIDEAN)
            l1 = distance(a, b, MetricKind.MANHATTAN)
            assert linf <= l2 + 1e-12
            assert l2 <= l1 + 1e-12

    def test_non_finite_rejected(self):
        with pytest.raises(InvalidParameterError):
            distance((0, math.nan), (1, 1))
        with pytest.raises(InvalidParameterError):
            distance((0, 0), (math.inf, 1), "L1")


class TestMetricKind:
    """Metric name resolution."""

    @pytest.mark.parametrize("name,expected", [
        ("L1", MetricKind.MANHATTAN),
        ("manhattan", MetricKind.MANHATTAN),
        ("cityblock", MetricKind.MANHATTAN),
        ("l2", MetricKind.EUCLIDEAN),
        ("Euclidean", MetricKind.EUCLIDEAN),
        ("L∞", MetricKind.CHEBYSHEV),
        ("Linf", MetricKind.CHEBYSHEV),
        ("CHEBYSHEV", MetricKind.CHEBYSHEV),
        (MetricKind.EUCLIDEAN, MetricKind.EUCLIDEAN),
    ])
    def test_parse(self, name, expected):
        assert MetricKind.parse(name) is expected

    def test_unknown_metric(self):
        with pytest.raises(InvalidParameterError, match="Unknown metric"):
            MetricKind.parse("cosine")

    def test_library_names(self):
        assert MetricKind.MANHATTAN.scipy_name == "cityblock"
        assert MetricKind.MANHATTAN.sklearn_name == "manhattan"
        assert MetricKind.CHEBYSHEV.scipy_name == "chebyshev"
        assert MetricKind.CHEBYSHEV.label == "L∞"


class TestPairwiseDistances:
    """Distance matrices."""

    @pytest.mark.parametrize("kind", list(MetricKind))
    def test_matches_scalar(self, kind):
        rng = np.random.default_rng(2)
        A = rng.uniform(0, 10, size=(6, 2))
        B = rng.uniform(0, 10, size=(4, 2))

        D = pairwise_distances(A, B, kind)

        assert D.shape == (6, 4)
        for i in range(6):
            for j in range(4):
                assert D[i, j] == pytest.approx(distance(A[i], B[j], kind))

    def test_empty(self):
        D = pairwise_distances([], [(0, 0)])
        assert D.shape == (0, 1)
