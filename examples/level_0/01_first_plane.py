"""
Level 0 — Your First Plane
============================
Run the whole pipeline on a simulated magnetometer.
No hardware, no window — just numbers.

What you'll learn:
    - Creating a MagPlane with a sample source and a frame clock
    - Waiting for the baseline to warm up
    - Reading magnitude and delta
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", ".."))

import time
from magplane import MagPlane, SyntheticSource, ThreadClock

plane = MagPlane(source=SyntheticSource(seed=1), clock=ThreadClock())

# Start listening to the sensor and ticking at 60 Hz
plane.start()

# Print the readout twice a second for 10 seconds
print("\nLive readings (10 seconds):")
for i in range(20):
    mag_text, delta_text = plane.readout()
    print(f"  [{i+1:2d}] {mag_text}   {delta_text}   pulses: {plane.pulse_count}")
    time.sleep(0.5)

plane.stop()
print(f"\nRendered {plane.tick_count} frames. Done!")
