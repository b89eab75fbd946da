#!/usr/bin/env python3
"""tleplot command-line interface.

Usage::

    tleplot plot3d CATNR 25544
    tleplot -t 2 plot2d GROUP stations
    tleplot track --file data/stations.tle --output tracks.csv
"""
from __future__ import annotations

import sys
import logging
from typing import Optional

import click
import requests
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .celestrak import QUERY_TYPES, CelestrakClient
from .tle_parser import Record, load_tle_file
from .propagator import (
    PropagationConfig,
    PropagationReport,
    build_trajectory_table,
    propagate_records,
)

console = Console()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--time", "-t", "hours", type=click.IntRange(min=0), default=None,
              metavar="PROPAGATION_TIME_IN_HOURS",
              help="Propagation window in hours (default: 4)")
@click.pass_context
def main(ctx: click.Context, verbose: bool, hours: Optional[int]):
    """tleplot — propagate TLEs and plot Earth-fixed trajectories."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s — %(message)s")
    ctx.obj = {"hours": hours}


def _query_options(f):
    """Shared source/propagation options for every command."""
    f = click.argument("value", required=False)(f)
    f = click.argument(
        "query", required=False,
        type=click.Choice(QUERY_TYPES, case_sensitive=False),
    )(f)
    f = click.option("--file", "-f", "filepath", type=click.Path(exists=True, dir_okay=False),
                     help="Read TLEs from a local file instead of CelesTrak")(f)
    f = click.option("--strict", is_flag=True,
                     help="Abort on the first object that fails to propagate")(f)
    f = click.option("--workers", "-w", type=click.IntRange(min=1), default=1,
                     help="Propagate objects on N threads")(f)
    return f


@main.command()
@_query_options
@click.option("--save", "-s", "save_path", type=click.Path(dir_okay=False),
              help="Save the plot to a file instead of showing it")
@click.pass_context
def plot3d(ctx, query, value, filepath, strict, workers, save_path):
    """Plot trajectories in 3D around the Earth."""
    from .viz import plot_3d

    report = _run_pipeline(ctx, query, value, filepath, strict, workers)
    fig = plot_3d(report.trajectories)
    _show_or_save(fig, save_path)


@main.command()
@_query_options
@click.option("--save", "-s", "save_path", type=click.Path(dir_okay=False),
              help="Save the plot to a file instead of showing it")
@click.pass_context
def plot2d(ctx, query, value, filepath, strict, workers, save_path):
    """Plot ground tracks on a longitude/latitude map."""
    from .viz import plot_ground_track

    report = _run_pipeline(ctx, query, value, filepath, strict, workers)
    fig = plot_ground_track(report.trajectories)
    _show_or_save(fig, save_path)


@main.command()
@_query_options
@click.option("--output", "-o", type=click.Path(dir_okay=False),
              help="Save per-sample positions to CSV")
@click.pass_context
def track(ctx, query, value, filepath, strict, workers, output):
    """Propagate and summarize trajectories without plotting."""
    report = _run_pipeline(ctx, query, value, filepath, strict, workers)
    _display_report(report)

    if output:
        df = build_trajectory_table(report.trajectories)
        df.to_csv(output, index=False)
        console.print(f"\nResults saved to {output}")


def _run_pipeline(
    ctx: click.Context,
    query: Optional[str],
    value: Optional[str],
    filepath: Optional[str],
    strict: bool,
    workers: int,
) -> PropagationReport:
    """Load records, propagate them and exit cleanly on expected errors."""
    config = PropagationConfig(
        duration_hours=ctx.obj["hours"],
        strict=strict,
        workers=workers,
    )

    try:
        records = _load_records(query, value, filepath)
        if not records:
            console.print("[yellow]No TLEs found.[/yellow]")
            sys.exit(0)
        return propagate_records(records, config, progress=len(records) > 1)
    except (ValueError, requests.RequestException) as e:
        console.print(f"[red]Execution failed with error: {e}[/red]")
        sys.exit(1)


def _load_records(
    query: Optional[str],
    value: Optional[str],
    filepath: Optional[str],
) -> list[Record]:
    if filepath:
        records = load_tle_file(filepath)
        console.print(f"Loaded {len(records)} TLEs from {filepath}")
        return records

    if not query or not value:
        console.print("[red]Error: provide QUERY VALUE or --file[/red]")
        sys.exit(1)

    console.print(f"Fetching TLEs from CelesTrak ({query.upper()}={value})...")
    records = CelestrakClient().get_records(query, value)
    console.print(f"Fetched {len(records)} TLEs")
    return records


def _show_or_save(fig, save_path: Optional[str]):
    import matplotlib.pyplot as plt

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        console.print(f"Plot saved to {save_path}")
    else:
        plt.show()
    plt.close(fig)


def _display_report(report: PropagationReport):
    """Display propagated trajectories and dropped records with rich formatting."""
    n_ok = len(report.trajectories)
    n_failed = len(report.failures)
    console.print(
        Panel(
            f"Trajectories: [bold green]{n_ok}[/bold green]\n"
            f"Dropped objects: [bold]{n_failed}[/bold]",
            title="Propagation Results",
            box=box.ROUNDED,
        )
    )

    if report.trajectories:
        table = Table(title="Trajectories", box=box.SIMPLE_HEAVY)
        table.add_column("Object", style="cyan")
        table.add_column("Samples", justify="right")
        table.add_column("Min radius (km)", justify="right")
        table.add_column("Max radius (km)", justify="right")

        for traj in report.trajectories:
            row = traj.to_dict()
            table.add_row(
                row["object_name"],
                str(row["samples"]),
                f"{row['min_radius_km']:.1f}",
                f"{row['max_radius_km']:.1f}",
            )

        console.print(table)

    if report.failures:
        table = Table(title="Dropped Objects", box=box.SIMPLE_HEAVY)
        table.add_column("#", justify="right")
        table.add_column("Object", style="yellow")
        table.add_column("Reason")

        for failure in report.failures:
            table.add_row(
                str(failure.index),
                failure.record.name or failure.record.line1[:7],
                str(failure.error),
            )

        console.print(table)


if __name__ == "__main__":
    main()
