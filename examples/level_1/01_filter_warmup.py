"""
Level 1 — Watch the Filter Warm Up
====================================
Push samples by hand and watch the baseline appear.

What you'll learn:
    - Why delta is "--" for the first samples
    - How the baseline is the average of the warmup samples
    - How a sudden change shows up as a delta
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", ".."))

from magplane import SensorFilter, format_readout

filt = SensorFilter()

print("Steady field (warmup):")
for i in range(25):
    reading = filt.update(20.0, -15.0, 40.0)
    mag_text, delta_text = format_readout(reading)
    print(f"  [{i+1:2d}] {mag_text}   {delta_text}   ready={reading.ready}")

print("\nA magnet approaches:")
for i in range(15):
    reading = filt.update(60.0, -15.0, 48.0)
    mag_text, delta_text = format_readout(reading)
    print(f"  [{i+1:2d}] {mag_text}   {delta_text}   baseline={reading.baseline:.2f}")
