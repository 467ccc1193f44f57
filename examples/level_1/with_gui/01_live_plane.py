"""
Level 1 — Live Plane (GUI)
============================
Open the animated heightfield, driven by a simulated magnetometer.
Every few seconds a "magnet" sweeps past and the plane erupts.

Just run this script — the GUI window opens automatically!
Close the window or press Ctrl+C to stop.
"""

from magplane import MagPlane, SyntheticSource
from magplane.gui import live_plane

plane = MagPlane(source=SyntheticSource(seed=1))
live_plane(plane)
