#!/usr/bin/env python3
"""Tests for the colour assignment validator."""

from __future__ import annotations

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dataclasses import replace
from typing import List, Optional, Sequence

import pytest

from clusterstudy import GeneratedPoint, IncompleteAssignmentError, generate, validate
from clusterstudy.exercise import score_assignment

RED, YELLOW, GREEN = "#e74c3c", "#f1c40f", "#2e7d32"

# Hidden clusters of sizes 3, 3 and 4
CLUSTER_IDS = [0, 0, 0, 1, 1, 1, 2, 2, 2, 2]


def make_points(colours: Sequence[Optional[str]], cluster_ids: Sequence[int] = CLUSTER_IDS) -> List[GeneratedPoint]:
    return [
        GeneratedPoint(id=i, x=float(i), y=float(i), cluster_id=c, assigned_colour=col)
        for i, (c, col) in enumerate(zip(cluster_ids, colours))
    ]


def colour_by_cluster(mapping) -> List[str]:
    return [mapping[c] for c in CLUSTER_IDS]


class TestValidate:
    """One-to-one correspondence between colours and hidden clusters."""

    def test_bijection_succeeds(self):
        points = make_points(colour_by_cluster({0: RED, 1: YELLOW, 2: GREEN}))
        result = validate(points)

        assert result.success
        assert result.correct_count == 10
        assert all(p.is_correct for p in result.updated)
        assert result.summary() == "All points correctly grouped!"

    @pytest.mark.parametrize("mapping", [
        {0: GREEN, 1: RED, 2: YELLOW},
        {0: YELLOW, 1: GREEN, 2: RED},
        {0: RED, 1: GREEN, 2: YELLOW},
    ])
    def test_any_colour_permutation_succeeds(self, mapping):
        assert validate(make_points(colour_by_cluster(mapping))).success

    def test_shared_colour_fails_both_clusters(self):
        points = make_points(colour_by_cluster({0: RED, 1: RED, 2: GREEN}))
        result = validate(points)

        assert not result.success
        assert result.correct_count == 4
        assert result.incorrect_ids == [0, 1, 2, 3, 4, 5]

    def test_single_wrong_point(self):
        colours = colour_by_cluster({0: RED, 1: YELLOW, 2: GREEN})
        colours[0] = YELLOW
        result = validate(make_points(colours))

        # Cluster 0 is inconsistent, cluster 1 shares yellow with it
        assert result.correct_count == 4
        assert [p.is_correct for p in result.updated[6:]] == [True] * 4
        assert result.summary() == "4/10 points correctly grouped. Keep adjusting."

    def test_incomplete_raises(self):
        colours = colour_by_cluster({0: RED, 1: YELLOW, 2: GREEN})
        colours[3] = None
        colours[8] = None

        with pytest.raises(IncompleteAssignmentError) as exc_info:
            validate(make_points(colours))

        assert exc_info.value.missing_ids == [3, 8]

    def test_input_not_modified(self):
        points = make_points(colour_by_cluster({0: RED, 1: YELLOW, 2: GREEN}))
        result = validate(points)

        assert all(p.is_correct is None for p in points)
        assert all(u is not p for u, p in zip(result.updated, points))

    def test_generated_points(self):
        points = generate(10, 3, 20250423)
        palette = [RED, YELLOW, GREEN]
        coloured = [replace(p, assigned_colour=palette[p.cluster_id]) for p in points]

        result = validate(coloured)
        assert result.success
        assert result.total == 10

    def test_empty(self):
        result = validate([])
        assert result.success
        assert result.correct_count == 0


class TestScoreAssignment:
    """Scoring without the completeness precondition."""

    def test_uncoloured_is_incorrect(self):
        colours = colour_by_cluster({0: RED, 1: YELLOW, 2: GREEN})
        colours[9] = None
        result = score_assignment(make_points(colours))

        assert result.updated[9].is_correct is False
        # The rest of cluster 2 is inconsistent with the missing colour
        assert result.correct_count == 6
