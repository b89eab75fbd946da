#!/usr/bin/env python3
"""
tleplot Example: Ground tracks for the CelesTrak "stations" group.

Fetches current TLEs from CelesTrak (no account needed) and propagates
every object on a small thread pool. Set TLEPLOT_CACHE_DIR to avoid
re-downloading while experimenting.
"""
import sys
sys.path.insert(0, "src")

from pathlib import Path

from tleplot.celestrak import CelestrakClient
from tleplot.propagator import PropagationConfig, propagate_records
from tleplot.viz import plot_ground_track


def main():
    client = CelestrakClient()

    print("Fetching stations group from CelesTrak...")
    records = client.get_records("GROUP", "stations")
    print(f"Fetched {len(records)} TLEs")

    config = PropagationConfig(duration_hours=3, workers=4)
    report = propagate_records(records, config, progress=True)

    print(f"\nPropagated {len(report.trajectories)} objects, dropped {len(report.failures)}")

    Path("data").mkdir(exist_ok=True)
    plot_ground_track(
        report.trajectories,
        title="Space Stations — 3 h Ground Tracks",
        save_path="data/stations_ground_track.png",
    )
    print("Plot saved to data/stations_ground_track.png")


if __name__ == "__main__":
    main()
