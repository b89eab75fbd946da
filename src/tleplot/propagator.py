"""Per-object propagation and trajectory aggregation.

Each record is resolved into an orbital state, stepped at a one-minute
cadence over the configured window, rotated into the Earth-fixed frame and
wrapped into a ``Trajectory``. Objects are independent: a record the model
rejects, or one that fails mid-propagation (e.g. decay), is dropped and
logged while the rest of the batch carries on, unless ``strict`` is set.
"""

from __future__ import annotations

import logging
from contextlib import closing
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

import numpy as np
import pandas as pd

from .frames import geocentric_latlon, rotate_to_earth_fixed
from .model import ElementError, OrbitalModel, OrbitalState, resolve
from .tle_parser import Record, parse_tles

logger = logging.getLogger(__name__)

DEFAULT_DURATION_HOURS = 4
"""Propagation window used when no duration is configured."""

DEFAULT_OBJECT_NAME = "Unnamed object"

CADENCE_MINUTES = 1


# Configuration
@dataclass
class PropagationConfig:
    """Settings for one pipeline run.

    Attributes:
        duration_hours: Propagation window (hours). ``None`` means 4 hours.
        strict: Abort on the first per-object failure instead of skipping.
        workers: Thread pool size for per-object work (1 = sequential).
    """
    duration_hours: Optional[int] = None
    strict: bool = False
    workers: int = 1

    def __post_init__(self) -> None:
        if self.duration_hours is not None and self.duration_hours < 0:
            raise ValueError(
                f"duration_hours must be non-negative, got {self.duration_hours}"
            )
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

    @property
    def duration_minutes(self) -> int:
        hours = DEFAULT_DURATION_HOURS if self.duration_hours is None else self.duration_hours
        return hours * 60


class PropagationError(ValueError):
    """The orbital model failed while stepping an object.

    Attributes:
        step: Minute index at which propagation failed.
        diagnostic: Message reported by the model.
    """

    def __init__(self, step: int, diagnostic: str, name: Optional[str] = None) -> None:
        self.step = step
        self.diagnostic = diagnostic
        self.name = name
        label = f" for {name!r}" if name else ""
        super().__init__(f"Propagation failed{label} at minute {step}: {diagnostic}")


# Results
@dataclass(frozen=True, eq=False)
class Trajectory:
    """Earth-fixed position history of one object.

    Attributes:
        object_name: Object name, or ``"Unnamed object"``.
        positions: ``(N, 3)`` Earth-fixed positions (km), one row per minute
            since epoch.
    """
    object_name: str
    positions: np.ndarray

    def __len__(self) -> int:
        return len(self.positions)

    def to_dict(self) -> dict:
        """Flat per-object summary for tables and logs."""
        radius = np.linalg.norm(self.positions, axis=1)
        return {
            "object_name": self.object_name,
            "samples": len(self),
            "min_radius_km": float(radius.min()) if len(self) else float("nan"),
            "max_radius_km": float(radius.max()) if len(self) else float("nan"),
        }


@dataclass
class PropagationFailure:
    """A record dropped from the output, with the reason."""
    index: int
    record: Record
    error: ValueError


@dataclass
class PropagationReport:
    """Outcome of ``propagate_records``."""
    trajectories: list[Trajectory] = field(default_factory=list)
    failures: list[PropagationFailure] = field(default_factory=list)


# Engine
def propagate(state: OrbitalState, duration_minutes: int) -> np.ndarray:
    """Step ``state`` once per minute over ``[0, duration_minutes)``.

    Args:
        state: Resolved orbital state.
        duration_minutes: Number of one-minute samples to produce.

    Returns:
        ``(duration_minutes, 3)`` TEME positions (km).

    Raises:
        PropagationError: The model failed at some step. No partial samples
            are returned.
    """
    if duration_minutes < 0:
        raise ValueError(f"duration_minutes must be non-negative, got {duration_minutes}")

    samples = np.empty((duration_minutes, 3), dtype=float)
    for step in range(duration_minutes):
        minutes = float(step * CADENCE_MINUTES)
        try:
            samples[step] = state.model.propagate(state.constants, minutes)
        except ValueError as exc:
            raise PropagationError(step, str(exc), state.name) from exc

    return samples


def aggregate(record_name: Optional[str], positions: np.ndarray) -> Trajectory:
    """Wrap Earth-fixed positions into a ``Trajectory``, defaulting the name."""
    positions = np.asarray(positions, dtype=float).reshape(-1, 3)
    positions.setflags(write=False)
    return Trajectory(
        object_name=record_name if record_name is not None else DEFAULT_OBJECT_NAME,
        positions=positions,
    )


def propagate_records(
    records: list[Record],
    config: Optional[PropagationConfig] = None,
    model: Optional[OrbitalModel] = None,
    progress: bool = False,
) -> PropagationReport:
    """Resolve, propagate and transform every record.

    Args:
        records: Parsed records, in output order.
        config: Run settings (defaults to a 4-hour, skip-on-error run).
        model: Orbital model (defaults to ``Sgp4Model``).
        progress: Show a tqdm progress bar.

    Returns:
        Trajectories in record order, plus the records that were dropped.

    Raises:
        ElementError, PropagationError: Only when ``config.strict`` is set;
            the first failure in record order is raised.
    """
    from tqdm import tqdm

    config = config or PropagationConfig()
    duration = config.duration_minutes
    report = PropagationReport()

    def work(record: Record) -> Trajectory:
        state = resolve(record, model)
        samples = propagate(state, duration)
        return aggregate(state.name, rotate_to_earth_fixed(samples, state.epoch_jd))

    with closing(_run(work, records, config.workers)) as outcomes:
        for index, (record, outcome) in enumerate(
            tqdm(zip(records, outcomes), total=len(records), desc="Propagating", disable=not progress)
        ):
            try:
                report.trajectories.append(outcome())
            except (ElementError, PropagationError) as exc:
                if config.strict:
                    raise
                logger.warning("Skipping record %d: %s", index, exc)
                report.failures.append(PropagationFailure(index, record, exc))

    logger.info(
        "Propagated %d/%d objects over %d minutes",
        len(report.trajectories), len(records), duration,
    )
    return report


def propagate_tles(
    records: list[Record],
    config: Optional[PropagationConfig] = None,
    model: Optional[OrbitalModel] = None,
) -> list[Trajectory]:
    """Trajectories for ``records``; failed objects are skipped (or raised if strict)."""
    return propagate_records(records, config, model).trajectories


def build_trajectories(
    text: str,
    config: Optional[PropagationConfig] = None,
    model: Optional[OrbitalModel] = None,
) -> list[Trajectory]:
    """Full pipeline: raw TLE text to Earth-fixed trajectories.

    Raises:
        ParseError: The text is structurally malformed.
    """
    return propagate_tles(parse_tles(text), config, model)


def build_trajectory_table(trajectories: list[Trajectory]) -> pd.DataFrame:
    """Flatten trajectories into one row per sample.

    Columns: ``object_name, minute, x_km, y_km, z_km, radius_km, lat_deg,
    lon_deg``.
    """
    frames = []
    for traj in trajectories:
        pos = traj.positions
        lat, lon = geocentric_latlon(pos)
        frames.append(pd.DataFrame({
            "object_name": traj.object_name,
            "minute": np.arange(len(pos)) * CADENCE_MINUTES,
            "x_km": pos[:, 0],
            "y_km": pos[:, 1],
            "z_km": pos[:, 2],
            "radius_km": np.linalg.norm(pos, axis=1),
            "lat_deg": lat,
            "lon_deg": lon,
        }))

    if not frames:
        return pd.DataFrame(columns=[
            "object_name", "minute", "x_km", "y_km", "z_km",
            "radius_km", "lat_deg", "lon_deg",
        ])
    return pd.concat(frames, ignore_index=True)


# ── Private helpers ──


def _run(
    work: Callable[[Record], Trajectory],
    records: list[Record],
    workers: int,
) -> Iterator[Callable[[], Trajectory]]:
    """Yield one zero-argument outcome per record, in record order.

    Calling an outcome returns the trajectory or raises the record's error.
    With more than one worker the records are submitted to a thread pool up
    front and collected through their futures, so completion order does not
    affect output order. Closing the generator early cancels records that
    have not started and waits for the ones already running.
    """
    if workers <= 1:
        for record in records:
            yield lambda record=record: work(record)
        return

    pool = ThreadPoolExecutor(max_workers=workers)
    try:
        futures: list[Future] = [pool.submit(work, record) for record in records]
        for future in futures:
            yield future.result
    finally:
        pool.shutdown(wait=True, cancel_futures=True)
