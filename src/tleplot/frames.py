"""TEME to Earth-fixed frame conversion.

SGP4 produces positions in the True Equator, Mean Equinox (TEME) frame. For
ground-relative plotting they are rotated into an Earth-centered,
Earth-fixed frame about the polar axis by the Earth Rotation Angle (ERA).
Polar motion and the UT1-UTC offset are ignored, so UTC Julian dates are
used directly. The resulting longitude error is below ~0.004 deg.

References:
    - IERS Conventions (2010), eq. 5.15 (Earth Rotation Angle).
    - Vallado, D. et al. (2006). "Revisiting Spacetrack Report #3", AIAA
      2006-6753, TEME to PEF conversion.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

# ── Time constants ──

J2000_JD = 2451545.0
"""Julian date of the J2000.0 epoch."""

ERA_AT_J2000 = 0.7790572732640
"""Earth Rotation Angle at J2000.0 (revolutions)."""

ERA_RATE = 1.00273781191135448
"""Earth rotation rate (revolutions per UT1 day)."""

MINUTES_PER_DAY = 1440.0

TWO_PI = 2.0 * math.pi


def earth_rotation_angle(jd: float) -> float:
    """Earth Rotation Angle (radians, in ``[0, 2π)``) at Julian date ``jd``."""
    turns = (ERA_AT_J2000 + ERA_RATE * (jd - J2000_JD)) % 1.0
    return (TWO_PI * turns) % TWO_PI


def to_earth_fixed(
    sample: Sequence[float],
    epoch_jd: float,
    elapsed_minutes: float,
) -> tuple[float, float, float]:
    """Rotate one TEME position into the Earth-fixed frame.

    The frame is rotated by the ERA about Z, which moves the vector by
    ``-ERA``:

        x' =  x·cos θ + y·sin θ
        y' = -x·sin θ + y·cos θ
        z' =  z

    Args:
        sample: TEME position (km).
        epoch_jd: Element epoch as a Julian date.
        elapsed_minutes: Minutes since epoch of this sample.

    Returns:
        Earth-fixed position (km).
    """
    theta = earth_rotation_angle(epoch_jd + elapsed_minutes / MINUTES_PER_DAY)
    c, s = math.cos(theta), math.sin(theta)
    x, y, z = sample
    return (c * x + s * y, -s * x + c * y, z)


def rotate_to_earth_fixed(samples: np.ndarray, epoch_jd: float) -> np.ndarray:
    """Vectorized ``to_earth_fixed`` over a one-minute cadence.

    Args:
        samples: ``(N, 3)`` TEME positions; row ``i`` is minute ``i``.
        epoch_jd: Element epoch as a Julian date.

    Returns:
        ``(N, 3)`` Earth-fixed positions (km).
    """
    samples = np.asarray(samples, dtype=float).reshape(-1, 3)
    minutes = np.arange(len(samples), dtype=float)
    jd = epoch_jd + minutes / MINUTES_PER_DAY
    theta = TWO_PI * np.mod(ERA_AT_J2000 + ERA_RATE * (jd - J2000_JD), 1.0)
    c, s = np.cos(theta), np.sin(theta)

    out = np.empty_like(samples)
    out[:, 0] = c * samples[:, 0] + s * samples[:, 1]
    out[:, 1] = -s * samples[:, 0] + c * samples[:, 1]
    out[:, 2] = samples[:, 2]
    return out


def geocentric_latlon(positions: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Spherical geocentric latitude/longitude (degrees) of Earth-fixed positions.

    Latitude is in ``[-90, 90]``, longitude in ``(-180, 180]``.
    """
    positions = np.asarray(positions, dtype=float).reshape(-1, 3)
    r = np.linalg.norm(positions, axis=1)
    with np.errstate(invalid="ignore", divide="ignore"):
        lat = np.degrees(np.arcsin(np.clip(positions[:, 2] / r, -1.0, 1.0)))
    lon = np.degrees(np.arctan2(positions[:, 1], positions[:, 0]))
    return lat, lon
