"""
Level 3 — Tilt from an Orientation Sensor
===========================================
Add a second sensor (gravity vector) that tilts the plane.

What you'll learn:
    - Using two sample sources at once
    - How the orientation channel takes over the tilt target
"""

from magplane import MagPlane, SyntheticSource
from magplane.gui import live_plane

plane = MagPlane(
    source=SyntheticSource(seed=5),
    orientation_source=SyntheticSource(channel="orientation", seed=6),
)
live_plane(plane)
