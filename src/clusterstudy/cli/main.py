#!/usr/bin/env python3
"""
clusterstudy CLI - Distance Metrics and Clustering Playground
=============================================================

Usage:
    clusterstudy [OPTIONS] COMMAND [ARGS]

Commands:
    distance  - Distance between two points under L1, L2 or L∞
    kmeans    - K-Means on a built-in dataset
    dbscan    - DBSCAN on a built-in dataset
    generate  - Seeded exercise scatter with hidden clusters
    exercise  - Colouring exercise palette and points
    quiz      - Distance quiz with optional answers
    datasets  - List built-in datasets

Exit Codes:
    0  - Success
    1  - General error
    2  - Invalid parameters or configuration
"""

import json
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from clusterstudy import __version__
from clusterstudy.cli.utils import format_point, save_result, setup_logging
from clusterstudy.clustering import ClusteringResult, DBSCANClusterer, KMeansClusterer
from clusterstudy.config import Config, load_config
from clusterstudy.exceptions import ClusterStudyError
from clusterstudy.exercise import ColouringExercise, DistanceQuiz
from clusterstudy.exercise.quiz import QUIZ_ORDER
from clusterstudy.metrics import MetricKind, distance as point_distance
from clusterstudy.points import NOISE, Point
from clusterstudy.synthetic import generate as generate_points
from clusterstudy.synthetic import PointGenerator, get_dataset, list_datasets

app = typer.Typer(
    name="clusterstudy",
    help="Distance metrics and clustering playground",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

EXIT_INVALID = 2


def _fail(message: str) -> None:
    console.print(f"[red]✗ {escape(message)}[/red]")
    raise typer.Exit(code=EXIT_INVALID)


def _config(ctx: typer.Context) -> Config:
    return ctx.obj["config"]


def _seed(ctx: typer.Context, *candidates: Optional[int]) -> Optional[int]:
    """First seed that is set, falling back to the global config seed."""
    for seed in candidates:
        if seed is not None:
            return seed
    return _config(ctx).seed


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[cyan]clusterstudy v{__version__}[/cyan]")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable verbose logging"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file (YAML)",
    ),
):
    """clusterstudy CLI for exploring distance metrics and clustering."""
    try:
        cfg = load_config(config)
    except FileNotFoundError as e:
        _fail(str(e))
    except ValidationError as e:
        _fail(f"Invalid configuration:\n{e}")

    setup_logging(
        level="DEBUG" if verbose else cfg.logging.level,
        json_format=cfg.logging.json_format,
        log_file=cfg.logging.log_file,
    )
    ctx.obj = {"config": cfg}


@app.command()
def distance(
    x1: float = typer.Argument(..., help="x of the first point"),
    y1: float = typer.Argument(..., help="y of the first point"),
    x2: float = typer.Argument(..., help="x of the second point"),
    y2: float = typer.Argument(..., help="y of the second point"),
    metric: str = typer.Option(
        "L2", "--metric", "-m",
        help="L1, L2, L∞ (Linf) or 'all'"
    ),
):
    """
    Distance between two points.

    - L1 (Manhattan): |dx| + |dy|
    - L2 (Euclidean): sqrt(dx² + dy²)
    - L∞ (Chebyshev): max(|dx|, |dy|)
    """
    a, b = Point(x1, y1), Point(x2, y2)
    try:
        kinds = list(MetricKind) if metric.lower() == "all" else [MetricKind.parse(metric)]
    except ClusterStudyError as e:
        _fail(str(e))

    table = Table(title=f"Distance {format_point(a.x, a.y)} → {format_point(b.x, b.y)}")
    table.add_column("Metric", style="cyan")
    table.add_column("Distance", style="green")
    for kind in kinds:
        table.add_row(kind.label, f"{point_distance(a, b, kind):.4f}")
    console.print(table)


def _show_result(title: str, result: ClusteringResult) -> None:
    table = Table(title=title)
    table.add_column("Cluster", style="cyan")
    table.add_column("Points", style="yellow")
    table.add_column("Centroid", style="magenta")

    for label in sorted(set(result.labels.tolist())):
        count = int((result.labels == label).sum())
        name = "noise" if label == NOISE else f"C{label}"
        centroid = "-"
        if result.centroids is not None and label != NOISE:
            cx, cy = result.centroids[label]
            centroid = format_point(cx, cy)
        table.add_row(name, str(count), centroid)

    console.print(table)
    console.print(Panel.fit(
        f"Clusters: {result.n_clusters}\n"
        f"Noise: {result.n_noise}\n"
        f"Iterations: {result.n_iter}\n"
        f"Silhouette: {result.silhouette_score:.3f}",
        title="Summary",
        border_style="green",
    ))


def _save(result: ClusteringResult, output: Optional[Path]) -> None:
    if output is None:
        return
    try:
        save_result(json.loads(result.to_json()), output)
    except ValueError as e:
        _fail(str(e))
    console.print(f"[green]✓ Saved to {output}[/green]")


@app.command()
def kmeans(
    ctx: typer.Context,
    dataset: str = typer.Argument(..., help="Dataset key (see 'datasets')"),
    k: Optional[int] = typer.Option(None, "--k", "-k", help="Number of clusters"),
    metric: Optional[str] = typer.Option(None, "--metric", "-m", help="L1, L2 or L∞"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Seed for centroid sampling"),
    max_iter: Optional[int] = typer.Option(None, "--max-iter", help="Maximum Lloyd rounds"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save result (.json/.yaml)"),
):
    """
    Run K-Means on a built-in dataset.
    """
    cfg = _config(ctx).kmeans
    try:
        data = get_dataset(dataset)
        clusterer = KMeansClusterer(
            k=k if k is not None else cfg.k,
            metric=metric or cfg.metric,
            max_iter=max_iter if max_iter is not None else cfg.max_iter,
            seed=_seed(ctx, seed, cfg.seed),
        )
        result = clusterer.fit(data.points)
    except ClusterStudyError as e:
        _fail(str(e))

    _show_result(f"K-Means on {data.name} ({clusterer.metric.label}, k={clusterer.k})", result)
    _save(result, output)


@app.command()
def dbscan(
    ctx: typer.Context,
    dataset: str = typer.Argument(..., help="Dataset key (see 'datasets')"),
    eps: Optional[float] = typer.Option(None, "--eps", "-e", help="Neighborhood radius"),
    min_pts: Optional[int] = typer.Option(None, "--min-pts", "-p", help="Minimum neighborhood size"),
    metric: Optional[str] = typer.Option(None, "--metric", "-m", help="L1, L2 or L∞"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save result (.json/.yaml)"),
):
    """
    Run DBSCAN on a built-in dataset.
    """
    cfg = _config(ctx).dbscan
    try:
        data = get_dataset(dataset)
        clusterer = DBSCANClusterer(
            eps=eps if eps is not None else cfg.eps,
            min_pts=min_pts if min_pts is not None else cfg.min_pts,
            metric=metric or cfg.metric,
        )
        result = clusterer.fit(data.points)
    except ClusterStudyError as e:
        _fail(str(e))

    _show_result(
        f"DBSCAN on {data.name} ({clusterer.metric.label}, "
        f"eps={clusterer.eps:g}, minPts={clusterer.min_pts})",
        result,
    )
    _save(result, output)


@app.command()
def generate(
    ctx: typer.Context,
    n: Optional[int] = typer.Option(None, "--n", "-n", help="Number of points"),
    k: Optional[int] = typer.Option(None, "--k", "-k", help="Number of hidden clusters"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Generator seed"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save points (.json/.yaml)"),
):
    """
    Generate the seeded exercise scatter.
    """
    cfg = _config(ctx).generator
    try:
        points = generate_points(
            n=n if n is not None else cfg.n_points,
            k=k if k is not None else cfg.n_clusters,
            seed=seed if seed is not None else cfg.seed,
            generator=PointGenerator.from_config(cfg),
        )
    except ClusterStudyError as e:
        _fail(str(e))

    table = Table(title="Generated Points")
    table.add_column("Id", style="cyan")
    table.add_column("Position", style="yellow")
    table.add_column("Cluster", style="magenta")
    for p in points:
        table.add_row(str(p.id), format_point(p.x, p.y), str(p.cluster_id))
    console.print(table)

    if output is not None:
        records = [{"id": p.id, "x": p.x, "y": p.y, "cluster_id": p.cluster_id} for p in points]
        try:
            save_result(records, output)
        except ValueError as e:
            _fail(str(e))
        console.print(f"[green]✓ Saved to {output}[/green]")


@app.command()
def exercise(ctx: typer.Context):
    """
    Show the colouring exercise: palette and points to colour.
    """
    cfg = _config(ctx)
    try:
        session = ColouringExercise.from_config(cfg.exercise, generator=cfg.generator)
    except ClusterStudyError as e:
        _fail(str(e))

    palette = Table(title="Palette")
    palette.add_column("Colour", style="cyan")
    palette.add_column("Hex")
    for name, colour in session.palette.items():
        palette.add_row(name, f"[{colour}]{colour}[/]")
    console.print(palette)

    table = Table(title="Points to Colour")
    table.add_column("Id", style="cyan")
    table.add_column("Position", style="yellow")
    for p in session.points:
        table.add_row(str(p.id), format_point(p.x, p.y))
    console.print(table)


@app.command()
def quiz(
    ctx: typer.Context,
    answers: Optional[List[str]] = typer.Argument(None, help="Answers for L1, L2 and L∞, in order"),
):
    """
    Distance quiz: each metric unlocks once the previous one is answered.
    """
    session = DistanceQuiz.from_config(_config(ctx).quiz)
    answers = answers or []

    table = Table(title=f"Distance Quiz (tolerance {session.tolerance:g})")
    table.add_column("Metric", style="cyan")
    table.add_column("Question")
    table.add_column("Answer", style="yellow")
    table.add_column("Result")
    for i, kind in enumerate(QUIZ_ORDER):
        given = answers[i] if i < len(answers) else None
        if not session.is_unlocked(kind):
            status = "[dim]locked[/dim]"
        elif given is None:
            status = "-"
        else:
            correct = session.answer(kind, given)
            if correct is None:
                status = "[yellow]unreadable[/yellow]"
            else:
                status = "[green]✓[/green]" if correct else "[red]✗[/red]"
        table.add_row(kind.label, DistanceQuiz.question(kind), escape(given or ""), status)
    console.print(table)

    progress = session.progress()
    console.print(Panel.fit(
        progress.summary(),
        title="Progress",
        border_style="green" if progress.success else "yellow",
    ))


@app.command()
def datasets():
    """
    List built-in datasets.
    """
    table = Table(title="Datasets")
    table.add_column("Key", style="cyan")
    table.add_column("Name", style="yellow")
    table.add_column("Points", style="green")
    table.add_column("Description", style="dim")
    for ds in list_datasets():
        table.add_row(ds.key, ds.name, str(len(ds)), ds.description)
    console.print(table)


if __name__ == "__main__":
    app()
