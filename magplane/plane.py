"""
MagPlane — Sensor-Driven Heightfield Visualization
====================================================
Turn a live magnetometer into a swaying, bumping 3D plane.

Quick Start:
    from magplane import MagPlane, SyntheticSource, ThreadClock

    with MagPlane(source=SyntheticSource(), clock=ThreadClock()) as plane:
        plane.start()
        time.sleep(5)
        print(plane.read_sensors())

The MagPlane class is the "control panel." It connects a sample source and
a frame clock to the pipeline, but keeps every stage visible so you can
learn how filtering, pulses, diffusion and projection fit together:

    sample → SensorFilter → PulsePlanner → FieldSimulator.add_pulse
                                         → animation targets
    tick   → FieldSimulator.step → VisualStabilizer.update
           → AnimationState.advance → RenderFrame
"""

import threading

from .config import defaults
from .sensors import SensorFilter, OrientationFilter, FilterReading, format_readout
from .pulses import PulsePlanner, DriveValue
from .field import FieldSimulator
from .stabilizer import VisualStabilizer
from .animation import AnimationState
from .projection import Camera, PerspectiveProjector
from .frame import build_frame
from .logger import SessionLogger


class MagPlane:
    """
    Main pipeline controller.

    Sample handling and ticks are serialized by one lock, so sources and
    clocks may run on their own threads.

    Args:
        source: Sample source for the field channel.
        orientation_source: Optional sample source for an orientation sensor
            (its X axis drives the plane's tilt).
        clock: Optional frame clock. Without one, call tick() yourself.
        width: Viewport width in pixels.
        height: Viewport height in pixels.
    """

    def __init__(self, source=None, orientation_source=None, clock=None,
                 width=None, height=None):
        self._source = source
        self._orientation_source = orientation_source
        self._clock = clock
        self._running = False
        self._logger_fn = print  # Default output function
        self._lock = threading.Lock()

        # === Pipeline stages ===
        self.filter = SensorFilter()
        self.orientation = OrientationFilter()
        self.planner = PulsePlanner()
        self.field = FieldSimulator()
        self.stabilizer = VisualStabilizer(self.field.shape)
        self.animation = AnimationState()
        self.camera = Camera(width=width, height=height)
        self.projector = PerspectiveProjector(self.camera, self.animation)

        # === Session state ===
        self.enable_csv_logging = defaults.ENABLE_CSV_LOGGING
        self._session_logger = SessionLogger()
        self._reading = FilterReading()
        self._drive = DriveValue()
        self._last_frame = None
        self._tick_count = 0
        self._pulse_count = 0

        # Listeners
        self._frame_listeners = []
        self._reading_listeners = []

    # === Context Manager (with statement) ===

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

    # === Output ===

    def set_logger(self, fn):
        """Set the status output function (default print, None to silence)."""
        self._logger_fn = fn

    def add_frame_listener(self, fn):
        """Call fn(RenderFrame) after every tick."""
        if fn not in self._frame_listeners:
            self._frame_listeners.append(fn)

    def remove_frame_listener(self, fn):
        if fn in self._frame_listeners:
            self._frame_listeners.remove(fn)

    def add_reading_listener(self, fn):
        """Call fn(FilterReading) after every field sample."""
        if fn not in self._reading_listeners:
            self._reading_listeners.append(fn)

    def remove_reading_listener(self, fn):
        if fn in self._reading_listeners:
            self._reading_listeners.remove(fn)

    # === Lifecycle ===

    @property
    def is_running(self):
        return self._running

    @property
    def has_clock(self):
        return self._clock is not None

    def start(self):
        """
        Subscribe to the sample source(s) and start the frame clock.

        Raises:
            RuntimeError: No field sample source was given.
        """
        if self._running:
            if self._logger_fn:
                self._logger_fn("Already running!")
            return
        if self._source is None:
            raise RuntimeError("MagPlane needs a sample source before start()")

        if self.enable_csv_logging:
            with self._lock:
                if not self._session_logger.is_logging:
                    self._session_logger.start(logger=self._logger_fn)

        self._running = True
        self._source.subscribe(self._on_field_sample)
        if self._orientation_source is not None:
            self._orientation_source.subscribe(self._on_orientation_sample)
        if self._clock is not None:
            self._clock.start(self.tick)

        if self._logger_fn:
            self._logger_fn("MagPlane started. Warming up baseline...")

    def stop(self):
        """
        Stop accepting samples and stop ticking.

        Safe to call repeatedly and when never started.
        """
        if not self._running:
            return
        self._running = False
        if self._clock is not None:
            self._clock.stop()
        if self._source is not None:
            self._source.unsubscribe()
        if self._orientation_source is not None:
            self._orientation_source.unsubscribe()
        with self._lock:
            self._session_logger.stop(logger=self._logger_fn)
        if self._logger_fn:
            self._logger_fn("MagPlane stopped.")

    def reset(self):
        """Start a fresh session: new warmup, flat field, centred plane."""
        with self._lock:
            self.filter.reset()
            self.orientation.reset()
            self.planner.reset()
            self.field.reset()
            self.stabilizer.reset()
            self.animation.reset()
            self._reading = FilterReading()
            self._drive = DriveValue()
            self._last_frame = None
            self._tick_count = 0
            self._pulse_count = 0

    def resize(self, width, height):
        """Viewport changed size."""
        with self._lock:
            self.projector.resize(width, height)

    # === Sample handling ===

    def _on_field_sample(self, sample):
        if not self._running:
            return
        with self._lock:
            reading = self.filter.update(sample.x, sample.y, sample.z)
            drive = self.planner.plan(reading)
            self.field.apply(drive.pulses)
            self._reading = reading
            self._drive = drive
            self._pulse_count += len(drive.pulses)
            self._session_logger.log_row(sample, reading, len(drive.pulses))
        for fn in list(self._reading_listeners):
            fn(reading)

    def _on_orientation_sample(self, sample):
        if not self._running:
            return
        with self._lock:
            ox, oy, oz = self.orientation.update(sample.x, sample.y, sample.z)
            tilt = self.planner.orientation_tilt(ox, oy, oz)
            # Pulses of the previous drive are already applied; keep its targets
            self._drive = DriveValue(self._drive.sway, tilt, self._drive.bend)

    # === Frame loop ===

    def tick(self):
        """
        Advance the visualization by one frame.

        Runs, in order: field step, display stabilization, animation
        advance and frame building. Returns the RenderFrame.
        """
        with self._lock:
            self.field.step()
            display = self.stabilizer.update(self.field.height)
            self.animation.advance(*self._drive.targets)
            self._tick_count += 1
            frame = build_frame(display, self.field.grid_x, self.field.grid_z,
                                self.projector, tick=self._tick_count)
            self._last_frame = frame
        for fn in list(self._frame_listeners):
            fn(frame)
        return frame

    # === Readouts ===

    def read_sensors(self):
        """Latest FilterReading (delta is None during warmup)."""
        return self._reading

    def readout(self):
        """(magnitude_text, delta_text) for a text display."""
        return format_readout(self._reading)

    @property
    def magnitude(self):
        return self._reading.magnitude

    @property
    def delta(self):
        """Current delta, or None while warming up."""
        return self._reading.delta

    @property
    def is_ready(self):
        return self._reading.ready

    @property
    def drive(self):
        """DriveValue planned for the most recent field sample."""
        return self._drive

    @property
    def last_frame(self):
        return self._last_frame

    @property
    def tick_count(self):
        return self._tick_count

    @property
    def pulse_count(self):
        """Total pulses injected this session."""
        return self._pulse_count

    # === Tunables ===

    @property
    def spike_threshold(self):
        return self.filter.spike_threshold

    @spike_threshold.setter
    def spike_threshold(self, value):
        self.filter.spike_threshold = value
        self.planner.spike_threshold = value

    @property
    def min_pulse_interval(self):
        return self.planner.min_pulse_interval

    @min_pulse_interval.setter
    def min_pulse_interval(self, value):
        self.planner.min_pulse_interval = value

    @property
    def blend(self):
        return self.animation.blend

    @blend.setter
    def blend(self, value):
        self.animation.blend = value

    # === Session logging ===

    def start_logging(self, filename=None):
        """Record every field sample to a CSV file."""
        # Sample handling writes rows under the same lock
        with self._lock:
            self._session_logger.start(filename, logger=self._logger_fn)

    def stop_logging(self):
        with self._lock:
            self._session_logger.stop(logger=self._logger_fn)

    @property
    def is_logging(self):
        return self._session_logger.is_logging
