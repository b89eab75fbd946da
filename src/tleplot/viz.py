#!/usr/bin/env python3
"""Visualization of propagated trajectories.

3D view of Earth-fixed orbits around a wireframe Earth, and a 2D ground
track on a longitude/latitude grid. Both return the matplotlib Figure so
they can be shown interactively or saved.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt

from .frames import geocentric_latlon
from .propagator import Trajectory

R_EARTH = 6378.137
"""Earth equatorial radius (km)."""

# Use a clean style
plt.rcParams.update({
    "figure.facecolor": "white",
    "axes.facecolor": "#fafafa",
    "axes.grid": True,
    "grid.alpha": 0.3,
    "font.family": "sans-serif",
    "font.size": 10,
})

# Cycled per trajectory
TRACK_COLORS = [
    "#e74c3c",
    "#2ecc71",
    "#3498db",
    "#f1c40f",
    "#9b59b6",
    "#1abc9c",
    "#2c3e50",
]


def plot_3d(
    trajectories: list[Trajectory],
    title: str = "Earth-Fixed Trajectories",
    save_path: Optional[str | Path] = None,
    figsize: tuple = (10, 10),
) -> plt.Figure:
    """Plot trajectories in 3D around a wireframe Earth.

    Axes are in Earth radii; the X, Y and Z axes of the Earth-fixed frame
    are drawn in red, green and blue.
    """
    fig = plt.figure(figsize=figsize)
    ax = fig.add_subplot(projection="3d")

    # Earth
    u, v = np.mgrid[0:2 * np.pi:36j, 0:np.pi:18j]
    ax.plot_wireframe(
        np.cos(u) * np.sin(v),
        np.sin(u) * np.sin(v),
        np.cos(v),
        color="#95a5a6",
        linewidth=0.3,
    )

    # Frame axes
    for axis, color in zip(np.eye(3) * 2.0, ("#e74c3c", "#2ecc71", "#3498db")):
        ax.plot([0, axis[0]], [0, axis[1]], [0, axis[2]], color=color, linewidth=1.5)

    extent = 2.0
    for i, traj in enumerate(trajectories):
        if not len(traj):
            continue
        pos = traj.positions / R_EARTH
        color = TRACK_COLORS[i % len(TRACK_COLORS)]
        ax.plot(pos[:, 0], pos[:, 1], pos[:, 2], color=color, linewidth=1.2,
                label=traj.object_name)
        ax.scatter(*pos[0], color=color, s=20)
        extent = max(extent, float(np.abs(pos).max()))

    ax.set_xlim(-extent, extent)
    ax.set_ylim(-extent, extent)
    ax.set_zlim(-extent, extent)
    ax.set_box_aspect((1, 1, 1))
    ax.set_xlabel("X (R⊕)")
    ax.set_ylabel("Y (R⊕)")
    ax.set_zlabel("Z (R⊕)")
    ax.set_title(title)
    if trajectories:
        ax.legend(loc="upper right", fontsize=8)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_ground_track(
    trajectories: list[Trajectory],
    title: str = "Ground Tracks",
    save_path: Optional[str | Path] = None,
    figsize: tuple = (14, 7),
) -> plt.Figure:
    """Plot sub-satellite ground tracks on a longitude/latitude grid.

    The start of each track is marked. Tracks are broken where they cross
    the antimeridian so no line is drawn across the map.
    """
    fig, ax = plt.subplots(figsize=figsize)

    for i, traj in enumerate(trajectories):
        if not len(traj):
            continue
        color = TRACK_COLORS[i % len(TRACK_COLORS)]
        lat, lon = geocentric_latlon(traj.positions)

        # NaN-break at antimeridian wraps
        wraps = np.where(np.abs(np.diff(lon)) > 180.0)[0] + 1
        lon_plot = np.insert(lon, wraps, np.nan)
        lat_plot = np.insert(lat, wraps, np.nan)

        ax.plot(lon_plot, lat_plot, color=color, linewidth=1.2, label=traj.object_name)
        ax.scatter(lon[0], lat[0], color=color, s=30, zorder=3)

    ax.set_xlim(-180, 180)
    ax.set_ylim(-90, 90)
    ax.set_xticks(np.arange(-180, 181, 30))
    ax.set_yticks(np.arange(-90, 91, 30))
    ax.set_aspect("equal")
    ax.set_xlabel("Longitude (°)")
    ax.set_ylabel("Latitude (°)")
    ax.set_title(title)
    if trajectories:
        ax.legend(loc="lower left", fontsize=8)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig
