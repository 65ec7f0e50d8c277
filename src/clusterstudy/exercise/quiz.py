"""Distance quiz: one practice question per metric, unlocked in order."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from clusterstudy.exceptions import InvalidParameterError
from clusterstudy.metrics import MetricKind, distance
from clusterstudy.points import Point

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-2

QUIZ_ORDER: List[MetricKind] = [MetricKind.MANHATTAN, MetricKind.EUCLIDEAN, MetricKind.CHEBYSHEV]

QUIZ_PAIRS: Dict[MetricKind, tuple] = {
    MetricKind.MANHATTAN: (Point(2, 5), Point(6, 1)),
    MetricKind.EUCLIDEAN: (Point(3, 3), Point(7, 6)),
    MetricKind.CHEBYSHEV: (Point(0, 2), Point(4, 5)),
}

# Worked example shown before the questions
EXAMPLE_P1 = Point(1, 2)
EXAMPLE_P2 = Point(4, 6)


def worked_example() -> Dict[MetricKind, float]:
    """Distances between the worked-example points under every metric."""
    return {kind: distance(EXAMPLE_P1, EXAMPLE_P2, kind) for kind in QUIZ_ORDER}


@dataclass(frozen=True)
class QuizProgress:
    attempted: bool
    success: bool
    correct_count: int
    total: int

    def summary(self) -> str:
        if self.success:
            return "All metrics correctly answered!"
        return f"{self.correct_count}/{self.total} metrics correct. Keep going."


class DistanceQuiz:
    """Practice questions for the L1, L2 and L∞ metrics.

    Args:
        tolerance: Absolute tolerance for accepting an answer
        on_complete: Called once when every metric has been answered correctly
    """

    def __init__(
        self,
        tolerance: float = DEFAULT_TOLERANCE,
        on_complete: Optional[Callable[[QuizProgress], None]] = None,
    ):
        if tolerance < 0:
            raise InvalidParameterError(f"tolerance must be >= 0, got {tolerance}")
        self.tolerance = tolerance
        self.on_complete = on_complete
        self.unlocked: List[MetricKind] = [QUIZ_ORDER[0]]
        self.correct: Dict[MetricKind, bool] = {kind: False for kind in QUIZ_ORDER}
        self.attempted: Dict[MetricKind, bool] = {kind: False for kind in QUIZ_ORDER}
        self._completed = False

    @classmethod
    def from_config(
        cls,
        config,
        on_complete: Optional[Callable[[QuizProgress], None]] = None,
    ) -> "DistanceQuiz":
        """Build from a QuizConfig."""
        return cls(tolerance=config.tolerance, on_complete=on_complete)

    @staticmethod
    def question(kind: Union[MetricKind, str]) -> str:
        kind = MetricKind.parse(kind)
        a, b = QUIZ_PAIRS[kind]
        return (
            f"Compute the {kind.label} distance between "
            f"Q1 = ({a.x:g},{a.y:g}) and Q2 = ({b.x:g},{b.y:g})."
        )

    @staticmethod
    def expected(kind: Union[MetricKind, str]) -> float:
        kind = MetricKind.parse(kind)
        a, b = QUIZ_PAIRS[kind]
        return distance(a, b, kind)

    def is_unlocked(self, kind: Union[MetricKind, str]) -> bool:
        return MetricKind.parse(kind) in self.unlocked

    def answer(self, kind: Union[MetricKind, str], value: Union[str, float]) -> Optional[bool]:
        """Submit an answer for one metric.

        Args:
            kind: Metric the answer is for
            value: Answer as a number or as text

        Returns:
            True or False for a graded answer, None when the value cannot be
            read as a number (the attempt is ignored)

        Raises:
            InvalidParameterError: If the metric is still locked
        """
        kind = MetricKind.parse(kind)
        if kind not in self.unlocked:
            raise InvalidParameterError(
                f"The {kind.label} question is locked; answer the previous metric first"
            )
        if self.correct[kind]:
            return True

        try:
            user_value = float(value)
        except (TypeError, ValueError):
            logger.debug(f"Ignoring unparseable answer {value!r} for {kind.label}")
            return None
        if math.isnan(user_value):
            return None

        ok = abs(user_value - self.expected(kind)) <= self.tolerance
        self.correct[kind] = ok
        self.attempted[kind] = True
        logger.info(f"Quiz {kind.label}: answer={user_value} {'correct' if ok else 'incorrect'}")

        if ok:
            position = QUIZ_ORDER.index(kind)
            if position + 1 < len(QUIZ_ORDER) and QUIZ_ORDER[position + 1] not in self.unlocked:
                self.unlocked.append(QUIZ_ORDER[position + 1])

        progress = self.progress()
        if progress.success and not self._completed:
            self._completed = True
            if self.on_complete is not None:
                self.on_complete(progress)
        return ok

    def progress(self) -> QuizProgress:
        count = sum(self.correct.values())
        return QuizProgress(
            attempted=any(self.attempted.values()),
            success=count == len(QUIZ_ORDER),
            correct_count=count,
            total=len(QUIZ_ORDER),
        )
