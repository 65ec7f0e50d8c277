"""Assignment validator for the colouring exercise.

A point is correct when its colour is the one colour used by its whole
hidden cluster, and no other cluster uses that colour. In other words
the learner's colours must be in one-to-one correspondence with the
hidden cluster ids.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Set

from clusterstudy.exceptions import IncompleteAssignmentError
from clusterstudy.points import GeneratedPoint

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Container for validation results.

    Attributes:
        updated: Copies of the input points with ``is_correct`` set
        correct_count: Number of correct points
    """
    updated: List[GeneratedPoint]
    correct_count: int

    @property
    def total(self) -> int:
        return len(self.updated)

    @property
    def success(self) -> bool:
        return self.correct_count == self.total

    @property
    def incorrect_ids(self) -> List[int]:
        return [p.id for p in self.updated if not p.is_correct]

    def summary(self) -> str:
        if self.success:
            return "All points correctly grouped!"
        return f"{self.correct_count}/{self.total} points correctly grouped. Keep adjusting."


def score_assignment(points: Sequence[GeneratedPoint]) -> ValidationResult:
    """Score every point without checking that all points are coloured.

    Uncoloured points are always incorrect.

    Args:
        points: Exercise points; not modified

    Returns:
        ValidationResult with fresh point copies
    """
    colours_by_cluster: Dict[int, Set[Optional[str]]] = defaultdict(set)
    clusters_by_colour: Dict[str, Set[int]] = defaultdict(set)
    for p in points:
        colours_by_cluster[p.cluster_id].add(p.assigned_colour)
        if p.assigned_colour is not None:
            clusters_by_colour[p.assigned_colour].add(p.cluster_id)

    updated = []
    for p in points:
        if p.assigned_colour is None:
            correct = False
        else:
            same_cluster_consistent = colours_by_cluster[p.cluster_id] == {p.assigned_colour}
            no_other_cluster_shares = clusters_by_colour[p.assigned_colour] == {p.cluster_id}
            correct = same_cluster_consistent and no_other_cluster_shares
        updated.append(replace(p, is_correct=correct))

    correct_count = sum(1 for p in updated if p.is_correct)
    logger.debug(f"Scored assignment: {correct_count}/{len(updated)} correct")
    return ValidationResult(updated=updated, correct_count=correct_count)


def validate(points: Sequence[GeneratedPoint]) -> ValidationResult:
    """Validate a complete colour assignment.

    Args:
        points: Exercise points, every one coloured

    Returns:
        ValidationResult; ``success`` is True when every point is correct

    Raises:
        IncompleteAssignmentError: If any point has no colour yet
    """
    missing = [p.id for p in points if p.assigned_colour is None]
    if missing:
        logger.warning(f"Validation requested with {len(missing)} uncoloured point(s)")
        raise IncompleteAssignmentError(missing)

    result = score_assignment(points)
    logger.info(f"Validation: {result.correct_count}/{result.total} correct")
    return result
