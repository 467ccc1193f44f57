"""
Level 2 — Session Logging and Review
======================================
Record every sample to a CSV file, then plot it.

What you'll learn:
    - Starting and stopping the session logger
    - What gets recorded (raw, smoothed, baseline, delta, pulses)
    - How to review a session afterwards

The CSV file is saved in the current directory.
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", ".."))

import time
from magplane import MagPlane, SyntheticSource, ThreadClock
from magplane.review import load_session, summarize_session, plot_session

plane = MagPlane(source=SyntheticSource(seed=3), clock=ThreadClock())

# ── Start logging BEFORE starting the plane ──────────
plane.start_logging("my_session.csv")
plane.start()

time.sleep(15)

# ── Stop (also closes the log) ───────────────────────
plane.stop()

# ── Review the data ──────────────────────────────────
df = load_session("my_session.csv")
for key, value in summarize_session(df).items():
    print(f"  {key:15s} {value}")

plot_session("my_session.csv")
