"""
Level 3 — Replay a Recorded Session
=====================================
Play a CSV file from the session logger back through the plane.

Usage:
    python 02_replay_session.py my_session.csv
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", ".."))

from magplane import MagPlane, ReplaySource
from magplane.gui import live_plane

if len(sys.argv) < 2:
    print(__doc__)
    sys.exit(1)

source = ReplaySource.from_csv(sys.argv[1], period=0.02, loop=True)
print(f"Replaying {len(source)} samples from {sys.argv[1]}")
live_plane(MagPlane(source=source))
