"""
Level 3 — Build the Pipeline Yourself
=======================================
Wire every stage by hand, without MagPlane, and render frames offline.

What you'll learn:
    - The order of the stages on each sample and each tick
    - How the physical field and the display field differ
    - Drawing a RenderFrame with matplotlib
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", ".."))

import matplotlib.pyplot as plt

from magplane import (
    SensorFilter, PulsePlanner, FieldSimulator, VisualStabilizer,
    AnimationState, Camera, PerspectiveProjector, SyntheticSource, build_frame,
)
from magplane.gui import draw_frame

filt = SensorFilter(warmup_samples=30)
planner = PulsePlanner()
field = FieldSimulator(rows=16, cols=20)
stabilizer = VisualStabilizer(field.shape)
anim = AnimationState(blend=0.1)
camera = Camera(width=720, height=1200)
projector = PerspectiveProjector(camera, anim)

source = SyntheticSource(seed=4)

# One sample per tick, 3 seconds of simulated time
for tick, sample in enumerate(source.generate(180)):
    reading = filt.update(*sample.vector)
    drive = planner.plan(reading)
    field.apply(drive.pulses)

    field.step()
    display = stabilizer.update(field.height)
    anim.advance(*drive.targets)

frame = build_frame(display, field.grid_x, field.grid_z, projector, tick=tick)
print(frame)
print(f"physical peak {field.peak():.3f}, displayed peak {abs(display).max():.3f}")

fig, ax = plt.subplots(figsize=(4, 6.7))
draw_frame(ax, frame, camera.width, camera.height)
plt.show()
