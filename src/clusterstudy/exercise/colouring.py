"""Colouring exercise session.

The learner picks a colour from the palette, paints points with it, and
asks for a check. A check succeeds once every hidden cluster has its own
colour and every point carries the colour of its cluster.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from clusterstudy.exceptions import IncompleteAssignmentError, InvalidParameterError
from clusterstudy.exercise.validator import validate
from clusterstudy.points import GeneratedPoint
from clusterstudy.synthetic.generator import (
    DEFAULT_N_CLUSTERS,
    DEFAULT_N_POINTS,
    DEFAULT_SEED,
    PointGenerator,
    generate,
)

logger = logging.getLogger(__name__)

PALETTE: Dict[str, str] = {
    "red": "#e74c3c",
    "yellow": "#f1c40f",
    "green": "#2e7d32",
}


class OutcomeStatus(str, Enum):
    INCOMPLETE = "incomplete"
    PARTIAL = "partial"
    SUCCESS = "success"


@dataclass(frozen=True)
class ExerciseOutcome:
    """Result of a confirm request.

    Attributes:
        status: incomplete (uncoloured points remain), partial or success
        correct_count: Number of correct points (0 when incomplete)
        total: Number of points in the exercise
        message: Feedback for the learner
    """
    status: OutcomeStatus
    correct_count: int
    total: int
    message: str

    @property
    def success(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS


class ColouringExercise:
    """Stateful colouring session over a fixed point set.

    Args:
        points: Exercise points; defaults to the standard seeded scatter
        palette: Mapping of colour name to hex value
        on_complete: Called once with the outcome when a check succeeds
    """

    def __init__(
        self,
        points: Optional[Sequence[GeneratedPoint]] = None,
        palette: Optional[Dict[str, str]] = None,
        on_complete: Optional[Callable[[ExerciseOutcome], None]] = None,
    ):
        if points is None:
            points = generate(DEFAULT_N_POINTS, DEFAULT_N_CLUSTERS, DEFAULT_SEED)
        self._points: List[GeneratedPoint] = [
            replace(p, assigned_colour=None, is_correct=None) for p in points
        ]
        self._index = {p.id: i for i, p in enumerate(self._points)}
        self.palette = dict(palette if palette is not None else PALETTE)
        self.on_complete = on_complete

        self.selected_colour: Optional[str] = None
        self.last_outcome: Optional[ExerciseOutcome] = None
        self.completed = False

    @classmethod
    def from_config(
        cls,
        config,
        generator=None,
        on_complete: Optional[Callable[[ExerciseOutcome], None]] = None,
    ) -> "ColouringExercise":
        """Build from an ExerciseConfig.

        Args:
            config: ExerciseConfig providing the palette
            generator: Optional GeneratorConfig for the exercise points
            on_complete: Completion callback
        """
        points = None
        if generator is not None:
            points = PointGenerator.from_config(generator).generate(
                generator.n_points, generator.n_clusters, generator.seed
            )
        return cls(points=points, palette=config.palette, on_complete=on_complete)

    @property
    def points(self) -> List[GeneratedPoint]:
        """Copies of the current points."""
        return [replace(p) for p in self._points]

    @property
    def uncoloured_ids(self) -> List[int]:
        return [p.id for p in self._points if p.assigned_colour is None]

    def select_colour(self, colour: str) -> None:
        """Select a palette colour by name or hex value."""
        if colour in self.palette:
            colour = self.palette[colour]
        if colour not in self.palette.values():
            raise InvalidParameterError(
                f"Colour {colour!r} is not in the palette ({', '.join(self.palette)})"
            )
        self.selected_colour = colour

    def colour_point(self, point_id: int) -> bool:
        """Paint a point with the selected colour.

        Returns:
            False when no colour is selected (nothing changes), True otherwise
        """
        if self.selected_colour is None:
            logger.debug(f"Ignoring click on point {point_id}: no colour selected")
            return False
        try:
            i = self._index[point_id]
        except KeyError:
            raise InvalidParameterError(f"Unknown point id {point_id}") from None

        # Any change invalidates the previous evaluation of this point
        self._points[i] = replace(
            self._points[i], assigned_colour=self.selected_colour, is_correct=None
        )
        return True

    def reset(self) -> None:
        """Clear the selection, every colour and every evaluation."""
        self.selected_colour = None
        self.last_outcome = None
        self._points = [replace(p, assigned_colour=None, is_correct=None) for p in self._points]
        logger.info("Exercise reset")

    def confirm(self) -> ExerciseOutcome:
        """Check the current assignment."""
        total = len(self._points)
        try:
            result = validate(self._points)
        except IncompleteAssignmentError as e:
            outcome = ExerciseOutcome(
                status=OutcomeStatus.INCOMPLETE,
                correct_count=0,
                total=total,
                message=f"Please colour every point first! ({len(e.missing_ids)} left)",
            )
            self.last_outcome = outcome
            return outcome

        self._points = result.updated
        status = OutcomeStatus.SUCCESS if result.success else OutcomeStatus.PARTIAL
        outcome = ExerciseOutcome(
            status=status,
            correct_count=result.correct_count,
            total=total,
            message=result.summary(),
        )
        self.last_outcome = outcome

        if outcome.success and not self.completed:
            self.completed = True
            logger.info("Colouring exercise completed")
            if self.on_complete is not None:
                self.on_complete(outcome)

        return outcome
