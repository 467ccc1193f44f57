"""
MagPlane — Sensor-Driven Heightfield Visualization
====================================================

from magplane import MagPlane, SyntheticSource, ThreadClock

Quick Start (Level 1):
    with MagPlane(source=SyntheticSource(), clock=ThreadClock()) as plane:
        plane.start()
        time.sleep(3)
        print(plane.readout())

Intermediate (Level 2):
    plane = MagPlane(source=ManualSource(), clock=ManualClock())
    plane.spike_threshold = 8.0
    plane.blend = 0.12

Advanced (Level 3):
    filt = SensorFilter(warmup_samples=50)
    field = FieldSimulator(rows=20, cols=24)
    field.add_pulse(0.0, 11.0, amplitude=1.5, radius=2.0)
"""

from .plane import MagPlane
from .sensors import SensorFilter, FilterReading, OrientationFilter, format_readout
from .pulses import PulsePlanner, PulseRequest, DriveValue
from .field import FieldSimulator
from .stabilizer import VisualStabilizer
from .animation import AnimationState
from .projection import Camera, PerspectiveProjector, Point2D
from .frame import RenderFrame, build_frame
from .sources import (
    SensorSample, SampleSource, ManualSource, ReplaySource, SyntheticSource,
)
from .clock import FrameClock, ManualClock, ThreadClock
from .logger import SessionLogger

__all__ = [
    "MagPlane",
    "SensorFilter", "FilterReading", "OrientationFilter", "format_readout",
    "PulsePlanner", "PulseRequest", "DriveValue",
    "FieldSimulator",
    "VisualStabilizer",
    "AnimationState",
    "Camera", "PerspectiveProjector", "Point2D",
    "RenderFrame", "build_frame",
    "SensorSample", "SampleSource", "ManualSource", "ReplaySource", "SyntheticSource",
    "FrameClock", "ManualClock", "ThreadClock",
    "SessionLogger",
]
__version__ = "0.1.0"
