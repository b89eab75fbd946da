"""tleplot: Two-Line Element to Earth-fixed trajectory pipeline.

Parse NORAD Two-Line Element sets, propagate each object with SGP4 at a
fixed one-minute cadence, and rotate the results into an Earth-fixed frame
for plotting and analysis.

Modules:
    tle_parser:  Split raw TLE text into name/line1/line2 records.
    model:       Orbital model interface and the SGP4-backed default.
    propagator:  Per-object propagation and trajectory aggregation.
    frames:      TEME to Earth-fixed rotation and sub-point helpers.
    celestrak:   CelesTrak GP query client.
    viz:         3D orbit and ground-track plots.
    cli:         Command-line interface.

Example:
    >>> from tleplot.propagator import build_trajectories, PropagationConfig
    >>>
    >>> text = open("stations.tle").read()
    >>> for traj in build_trajectories(text, PropagationConfig(duration_hours=2)):
    ...     print(traj.object_name, len(traj))
"""

__version__ = "0.1.0"
