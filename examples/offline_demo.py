"""
Example: Earth-fixed trajectories from embedded TLEs.

This example doesn't need network access. It propagates two element sets
(one named, one bare 2-line) plus a deliberately malformed record, shows
that the bad record is dropped, and saves both plots.
"""

import sys
sys.path.insert(0, "src")

from pathlib import Path

from tleplot.tle_parser import parse_tles
from tleplot.propagator import (
    PropagationConfig,
    build_trajectory_table,
    propagate_records,
)

TLE_TEXT = """\
ISS (ZARYA)
1 25544U 98067A   25260.12361477  .00008550  00000-0  15572-3 0  9997
2 25544  51.6329 211.3907 0004353 348.5756  11.5133 15.50345634529426
1 20580U 90037B   24001.50000000  .00000764  00000-0  34340-4 0  9998
2 20580  28.4700 100.2000 0002500 300.0000  60.0000 15.09000000400000
BROKEN
1 99999U 00000A   24001.50000000  .00000000  00000-0  00000-0 0  0000
2 99999  28.4700 100.2000 1.500000 300.0000  60.0000  0.00000000000000
"""


def main():
    print("=" * 65)
    print("  tleplot — Offline Trajectory Demo")
    print("=" * 65)

    records = parse_tles(TLE_TEXT)
    print(f"\nParsed {len(records)} records")

    report = propagate_records(records, PropagationConfig(duration_hours=2))

    print(f"\n{'OBJECT':20s} {'SAMPLES':>8} {'MIN R (km)':>11} {'MAX R (km)':>11}")
    print("-" * 55)
    for traj in report.trajectories:
        row = traj.to_dict()
        print(
            f"{row['object_name']:20s} "
            f"{row['samples']:>8} "
            f"{row['min_radius_km']:>11.1f} "
            f"{row['max_radius_km']:>11.1f}"
        )

    for failure in report.failures:
        print(f"\nDropped record {failure.index}: {failure.error}")

    out_dir = Path("data")
    out_dir.mkdir(exist_ok=True)

    df = build_trajectory_table(report.trajectories)
    df.to_csv(out_dir / "demo_tracks.csv", index=False)
    print(f"\nSamples saved to {out_dir / 'demo_tracks.csv'}")

    from tleplot.viz import plot_3d, plot_ground_track
    import matplotlib
    matplotlib.use("Agg")  # Non-interactive backend

    plot_3d(report.trajectories, save_path=out_dir / "demo_orbits.png")
    print(f"Plot saved to {out_dir / 'demo_orbits.png'}")

    plot_ground_track(report.trajectories, save_path=out_dir / "demo_ground_track.png")
    print(f"Plot saved to {out_dir / 'demo_ground_track.png'}")


if __name__ == "__main__":
    main()
