"""
Level 1 — Pulses and the Heightfield
======================================
Drop a bump onto the field and watch it spread and fade.

What you'll learn:
    - What a pulse is (a Gaussian bump)
    - How diffusion spreads it out
    - How decay brings the surface back to flat
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", ".."))

from magplane import FieldSimulator

field = FieldSimulator()
field.add_pulse(0.0, 11.0, amplitude=2.0, radius=1.5)
row, col = field.nearest_node(0.0, 11.0)

print(" tick   centre   peak")
for tick in range(0, 121):
    if tick % 10 == 0:
        print(f"  {tick:3d}   {field.height[row, col]:6.3f}   {field.peak():6.3f}")
    field.step()
