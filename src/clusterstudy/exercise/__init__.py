"""Lesson hosts: colouring exercise, distance quiz and clustering playground."""

from __future__ import annotations

from clusterstudy.exercise.colouring import PALETTE, ColouringExercise, ExerciseOutcome, OutcomeStatus
from clusterstudy.exercise.playground import CentroidCache, Playground, SavedRun, jitter
from clusterstudy.exercise.quiz import QUIZ_PAIRS, DistanceQuiz, QuizProgress, worked_example
from clusterstudy.exercise.validator import ValidationResult, score_assignment, validate

__all__ = [
    "PALETTE",
    "QUIZ_PAIRS",
    "CentroidCache",
    "ColouringExercise",
    "DistanceQuiz",
    "ExerciseOutcome",
    "OutcomeStatus",
    "Playground",
    "QuizProgress",
    "SavedRun",
    "ValidationResult",
    "jitter",
    "score_assignment",
    "validate",
    "worked_example",
]
