"""
Level 2 — Tuning the Plane
============================
Change thresholds and smoothing and see what happens.

What you'll learn:
    - spike_threshold: how big a change counts as a spike
    - blend: how quickly the plane sways and tilts
    - min_pulse_interval: spacing out pulses
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", ".."))

from magplane import MagPlane, ManualSource, ManualClock

source = ManualSource()
clock = ManualClock()
plane = MagPlane(source=source, clock=clock)

# ── Tuning ───────────────────────────────────────────
plane.spike_threshold = 10.0   # Only big changes make transient pulses
plane.blend = 0.15             # Snappier sway / tilt / bend

plane.start()

# ── Warm up on a steady field ────────────────────────
for _ in range(20):
    source.push(20.0, -15.0, 40.0)
    clock.advance()

# ── A magnet sweeps past ─────────────────────────────
for step in range(40):
    source.push(20.0 + step * 1.5, -15.0, 40.0)
    clock.advance()
    if step % 5 == 0:
        drive = plane.drive
        print(f"step {step:2d}: delta={plane.delta:6.2f}  {drive}  peak={plane.field.peak():.2f}")

plane.stop()
print(f"\nTotal pulses: {plane.pulse_count}")
