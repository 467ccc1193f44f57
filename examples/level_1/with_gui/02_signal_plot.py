"""
Level 1 — Live Signal Plot (GUI)
==================================
Plot magnitude, baseline and delta while the plane runs.
The red dashed lines mark the spike threshold.

Close the window or press Ctrl+C to stop.
"""

from magplane import MagPlane, SyntheticSource, ThreadClock
from magplane.gui import live_signal_plot

plane = MagPlane(source=SyntheticSource(seed=2), clock=ThreadClock())
live_signal_plot(plane)
