#!/usr/bin/env python3
"""Tests for the lesson hosts: colouring exercise, distance quiz and playground.

Tests verify:
1. Colour selection, painting, reset and confirm outcomes
2. Quiz grading, tolerance and unlock order
3. Playground run bookkeeping, centroid cache and run limit
"""

from __future__ import annotations

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from typing import List

import numpy as np
import pytest

from clusterstudy import GeneratedPoint, InvalidParameterError, MetricKind, RunLimitError
from clusterstudy.config import load_config
from clusterstudy.exercise import (
    PALETTE,
    ColouringExercise,
    DistanceQuiz,
    OutcomeStatus,
    Playground,
    jitter,
    worked_example,
)
from clusterstudy.points import Point

CLUSTER_IDS = [0, 0, 0, 1, 1, 1, 2, 2, 2, 2]


def blank_points() -> List[GeneratedPoint]:
    return [GeneratedPoint(id=i, x=float(i), y=0.0, cluster_id=c) for i, c in enumerate(CLUSTER_IDS)]


def paint(exercise: ColouringExercise, mapping) -> None:
    for p in exercise.points:
        exercise.select_colour(mapping[p.cluster_id])
        exercise.colour_point(p.id)


class TestColouringExercise:
    """Colouring session state machine."""

    def test_default_points(self):
        exercise = ColouringExercise()
        assert len(exercise.points) == 10
        assert exercise.uncoloured_ids == list(range(10))

    def test_click_without_colour_is_ignored(self):
        exercise = ColouringExercise(blank_points())
        assert exercise.colour_point(0) is False
        assert exercise.points[0].assigned_colour is None

    def test_select_colour(self):
        exercise = ColouringExercise(blank_points())
        exercise.select_colour("red")
        assert exercise.selected_colour == PALETTE["red"]
        exercise.select_colour("#2e7d32")
        assert exercise.selected_colour == PALETTE["green"]

        with pytest.raises(InvalidParameterError):
            exercise.select_colour("#000000")

    def test_unknown_point(self):
        exercise = ColouringExercise(blank_points())
        exercise.select_colour("red")
        with pytest.raises(InvalidParameterError):
            exercise.colour_point(42)

    def test_confirm_incomplete(self):
        exercise = ColouringExercise(blank_points())
        exercise.select_colour("red")
        exercise.colour_point(0)

        outcome = exercise.confirm()

        assert outcome.status is OutcomeStatus.INCOMPLETE
        assert outcome.message.startswith("Please colour every point first!")
        assert outcome.total == 10

    def test_confirm_success_fires_callback_once(self):
        calls = []
        exercise = ColouringExercise(blank_points(), on_complete=calls.append)
        paint(exercise, {0: "red", 1: "yellow", 2: "green"})

        outcome = exercise.confirm()
        exercise.confirm()

        assert outcome.status is OutcomeStatus.SUCCESS
        assert outcome.success
        assert outcome.correct_count == 10
        assert len(calls) == 1
        assert all(p.is_correct for p in exercise.points)

    def test_confirm_partial(self):
        exercise = ColouringExercise(blank_points())
        paint(exercise, {0: "red", 1: "red", 2: "green"})

        outcome = exercise.confirm()

        assert outcome.status is OutcomeStatus.PARTIAL
        assert outcome.correct_count == 4
        assert "4/10" in outcome.message

    def test_recolouring_clears_evaluation(self):
        exercise = ColouringExercise(blank_points())
        paint(exercise, {0: "red", 1: "yellow", 2: "green"})
        exercise.confirm()

        exercise.select_colour("yellow")
        exercise.colour_point(0)

        assert exercise.points[0].is_correct is None
        assert exercise.points[1].is_correct is True

    def test_reset_keeps_geometry(self):
        exercise = ColouringExercise(blank_points())
        paint(exercise, {0: "red", 1: "yellow", 2: "green"})
        exercise.confirm()
        before = [(p.x, p.y, p.cluster_id) for p in exercise.points]

        exercise.reset()

        assert exercise.selected_colour is None
        assert exercise.last_outcome is None
        assert all(p.assigned_colour is None and p.is_correct is None for p in exercise.points)
        assert [(p.x, p.y, p.cluster_id) for p in exercise.points] == before

    def test_points_are_copies(self):
        source = blank_points()
        exercise = ColouringExercise(source)
        exercise.select_colour("red")
        exercise.colour_point(0)

        assert source[0].assigned_colour is None
        exercise.points[1].assigned_colour = "#000000"
        assert exercise.points[1].assigned_colour is None


class TestDistanceQuiz:
    """Per-metric practice questions."""

    def test_expected_answers(self):
        assert DistanceQuiz.expected("L1") == 8.0
        assert DistanceQuiz.expected("L2") == 5.0
        assert DistanceQuiz.expected("L∞") == 4.0

    def test_question_text(self):
        assert DistanceQuiz.question(MetricKind.MANHATTAN) == \
            "Compute the L1 distance between Q1 = (2,5) and Q2 = (6,1)."

    def test_unlock_order(self):
        quiz = DistanceQuiz()
        assert quiz.unlocked == [MetricKind.MANHATTAN]

        with pytest.raises(InvalidParameterError, match="locked"):
            quiz.answer("L2", 5)

        assert quiz.answer("L1", 7) is False
        assert not quiz.is_unlocked("L2")

        assert quiz.answer("L1", "8") is True
        assert quiz.is_unlocked("L2")
        assert not quiz.is_unlocked("L∞")

        assert quiz.answer("L2", 5.0) is True
        assert quiz.is_unlocked("L∞")

    def test_tolerance(self):
        quiz = DistanceQuiz()
        assert quiz.answer("L1", 8.02) is False
        assert quiz.answer("L1", 8.005) is True

        strict = DistanceQuiz(tolerance=0.0)
        assert strict.answer("L1", 8.005) is False

    @pytest.mark.parametrize("value", ["", "abc", None, "nan"])
    def test_unparseable_answer_ignored(self, value):
        quiz = DistanceQuiz()
        assert quiz.answer("L1", value) is None
        assert quiz.progress().attempted is False

    def test_progress_and_completion(self):
        completed = []
        quiz = DistanceQuiz(on_complete=completed.append)

        quiz.answer("L1", 8)
        progress = quiz.progress()
        assert progress.attempted
        assert progress.correct_count == 1
        assert progress.summary() == "1/3 metrics correct. Keep going."

        quiz.answer("L2", 5)
        quiz.answer("L∞", 4)
        quiz.answer("L∞", 4)

        assert quiz.progress().success
        assert len(completed) == 1
        assert completed[0].summary() == "All metrics correctly answered!"

    def test_worked_example(self):
        example = worked_example()
        assert example[MetricKind.MANHATTAN] == 7.0
        assert example[MetricKind.EUCLIDEAN] == 5.0
        assert example[MetricKind.CHEBYSHEV] == 4.0

    def test_negative_tolerance(self):
        with pytest.raises(InvalidParameterError):
            DistanceQuiz(tolerance=-1)


class TestPlayground:
    """Saved clustering runs on built-in datasets."""

    def test_kmeans_run(self):
        playground = Playground(seed=0)
        run = playground.run_kmeans(k=2, metric="L1")

        assert run.dataset == "dataset1"
        assert run.method == "KMeans"
        assert run.params_desc == "k=2"
        assert run.metric == "L1"
        assert run.visible
        assert len(run.points) == 120
        assert {p.cluster for p in run.points} == {0, 1}
        assert run.label == "KMeans (k=2, L1)"

    def test_k_clamped(self):
        run = Playground(seed=0).run_kmeans(k=0)
        assert run.params_desc == "k=1"
        assert {p.cluster for p in run.points} == {0}

    def test_dbscan_run(self):
        run = Playground().run_dbscan(eps=0.8, min_pts=4)

        assert run.method == "DBSCAN"
        assert run.params_desc == "eps=0.8, minPts=4"
        assert {p.cluster for p in run.points} == {0, 1}

    def test_dbscan_clamps(self):
        run = Playground().run_dbscan(eps=0, min_pts=0)
        assert run.params_desc == "eps=0.0001, minPts=1"

    def test_centroid_cache_reused_per_k(self):
        playground = Playground(seed=3)
        playground.run_kmeans(k=2, metric="L1")
        cached = playground.cache.get(("dataset1", 2))
        playground.run_kmeans(k=2, metric="L∞")

        assert cached is not None
        assert np.array_equal(playground.cache.get(("dataset1", 2)), cached)

        playground.run_kmeans(k=3)
        assert playground.cache.get(("dataset1", 2)) is None
        assert playground.cache.get(("dataset1", 3)) is not None

    def test_dataset_switch_clears_cache(self):
        playground = Playground(seed=1)
        playground.run_kmeans(k=2)
        playground.select_dataset("dataset2")

        assert playground.cache.key is None
        assert playground.dataset.name == "Concentric Circles"

    def test_run_limit_per_dataset(self):
        playground = Playground(seed=0)
        for _ in range(3):
            playground.run_kmeans(k=2)

        with pytest.raises(RunLimitError):
            playground.run_dbscan()

        playground.select_dataset("dataset2")
        playground.run_dbscan()
        assert len(playground.runs) == 4

    def test_colour_seed_and_offset(self):
        playground = Playground(seed=0, max_runs=10)
        runs = [playground.run_kmeans(k=2) for _ in range(10)]

        assert [r.colour_seed for r in runs] == [0, 1, 2, 3, 4, 5, 6, 0, 1, 2]
        assert [r.offset_index for r in runs] == [0, 1, 2, 3, 4, 5, 6, 7, 8, 0]
        assert len({r.id for r in runs}) == 10

    def test_toggle_delete_and_visible_runs(self):
        playground = Playground(seed=0)
        a = playground.run_kmeans(k=2)
        b = playground.run_dbscan()

        assert playground.toggle_visibility(a.id) is False
        assert playground.visible_runs() == [b]

        playground.select_dataset("dataset2")
        assert playground.visible_runs() == []

        playground.select_dataset("dataset1")
        playground.delete_run(b.id)
        assert playground.visible_runs() == []
        assert playground.runs == [a]

        with pytest.raises(KeyError):
            playground.toggle_visibility("missing")

    def test_clusters_and_jitter(self):
        run = Playground().run_dbscan()
        clusters = run.clusters()
        assert sorted(clusters) == [0, 1]
        assert sum(len(v) for v in clusters.values()) == 120

        assert jitter(Point(0, 0), 0) == Point(-0.18, -0.18)
        assert jitter(Point(0, 0), 4) == Point(0, 0)
        shifted = run.display_points()
        assert shifted[0].cluster == run.points[0].cluster

    def test_unknown_dataset(self):
        with pytest.raises(InvalidParameterError):
            Playground(dataset="moons")


class TestBuildFromConfig:
    """Sessions pick up their settings from the loaded configuration."""

    def test_palette_reaches_exercise(self):
        config = load_config(overrides=["exercise.palette.red='#c0392b'"])
        exercise = ColouringExercise.from_config(config.exercise)

        exercise.select_colour("red")
        assert exercise.selected_colour == "#c0392b"
        with pytest.raises(InvalidParameterError):
            exercise.select_colour(PALETTE["red"])

    def test_generator_section_builds_points(self):
        config = load_config(overrides=["generator.n_points=12", "generator.n_clusters=4"])
        exercise = ColouringExercise.from_config(config.exercise, generator=config.generator)

        points = exercise.points
        assert [p.id for p in points] == list(range(12))
        assert {p.cluster_id for p in points} <= {0, 1, 2, 3}

    def test_tolerance_reaches_quiz(self):
        config = load_config(overrides=["quiz.tolerance=0.5"])
        quiz = DistanceQuiz.from_config(config.quiz)

        assert quiz.tolerance == 0.5
        assert quiz.answer("L1", 8.3) is True

    def test_playground_settings(self):
        config = load_config(overrides=[
            "playground.max_runs=5",
            "playground.default_dataset=dataset2",
            "playground.seed=7",
        ])
        playground = Playground.from_config(config.playground, fallback_seed=config.seed)

        assert playground.max_runs == 5
        assert playground.dataset.key == "dataset2"
        assert playground.seed == 7
        for _ in range(5):
            playground.run_kmeans(k=2)
        with pytest.raises(RunLimitError):
            playground.run_kmeans(k=2)

    def test_playground_seed_falls_back_to_global(self):
        config = load_config(overrides=["playground.seed=null", "seed=11"])

        a = Playground.from_config(config.playground, fallback_seed=config.seed)
        b = Playground.from_config(config.playground, fallback_seed=config.seed)

        assert a.seed == 11
        labels_a = [p.cluster for p in a.run_kmeans(k=3).points]
        labels_b = [p.cluster for p in b.run_kmeans(k=3).points]
        assert labels_a == labels_b
