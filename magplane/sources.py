"""
MagPlane Sample Sources
========================
Where sensor samples come from.

A sample source delivers SensorSample objects to one callback:
    source.subscribe(callback)   # start delivering
    source.unsubscribe()         # stop delivering

Both calls are safe to repeat. Three sources are included:
    - ManualSource — you push samples yourself (tests, notebooks, bridges)
    - ReplaySource — plays back a list of samples or a recorded CSV session
    - SyntheticSource — a simulated magnetometer with noise and the occasional
      magnet passing by, handy when no hardware is attached
"""

import csv
import math
import threading
import time

import numpy as np

from .config import defaults

FIELD = "field"
ORIENTATION = "orientation"


class SensorSample:
    """
    One 3-axis reading.

    Attributes:
        channel (str): "field" or "orientation".
        x, y, z (float): Axis values.
        timestamp (float): Seconds (source-defined origin).
    """

    __slots__ = ("channel", "x", "y", "z", "timestamp")

    def __init__(self, x, y, z, channel=FIELD, timestamp=None):
        self.channel = channel
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self.timestamp = time.time() if timestamp is None else timestamp

    @property
    def vector(self):
        return self.x, self.y, self.z

    def __repr__(self):
        return (
            f"SensorSample({self.channel}, {self.x:.2f}, {self.y:.2f}, "
            f"{self.z:.2f}, t={self.timestamp:.3f})"
        )


class SampleSource:
    """Base class: keeps the subscriber and handles repeated calls."""

    def __init__(self, logger=None):
        self._callback = None
        self._logger_fn = logger

    @property
    def is_subscribed(self):
        return self._callback is not None

    def subscribe(self, callback):
        """Start delivering samples to callback(sample)."""
        if self._callback is not None:
            if self._logger_fn:
                self._logger_fn(f"{type(self).__name__}: already subscribed.")
            return
        self._callback = callback
        self._on_subscribe()

    def unsubscribe(self):
        """Stop delivering samples. Safe to call when not subscribed."""
        if self._callback is None:
            return
        self._on_unsubscribe()
        self._callback = None

    def _deliver(self, sample):
        callback = self._callback
        if callback is not None:
            callback(sample)

    def _on_subscribe(self):
        pass

    def _on_unsubscribe(self):
        pass


class ManualSource(SampleSource):
    """
    Samples are pushed by the caller and delivered synchronously.

    Usage:
        source = ManualSource()
        plane = MagPlane(source=source)
        plane.start()
        source.push(5.0, 5.0, 5.0)
    """

    def __init__(self, channel=FIELD, logger=None):
        super().__init__(logger)
        self.channel = channel

    def push(self, x, y, z, timestamp=None):
        """Deliver one sample. Ignored while nobody is subscribed."""
        sample = SensorSample(x, y, z, channel=self.channel, timestamp=timestamp)
        self._deliver(sample)
        return sample


class _ThreadedSource(SampleSource):
    """Runs a background thread that emits one sample per period."""

    def __init__(self, period=None, logger=None):
        super().__init__(logger)
        self.period = defaults.SAMPLE_PERIOD if period is None else period
        if self.period <= 0:
            raise ValueError(f"Sample period must be positive, got {self.period}")
        self._running = False
        self._thread = None

    @property
    def is_running(self):
        return self._running

    def _on_subscribe(self):
        self._running = True
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()

    def _on_unsubscribe(self):
        self._running = False
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)

    def _run_loop(self):
        while self._running:
            sample = self._next_sample()
            if sample is None:
                # Finished on its own, so a later subscribe() starts afresh
                self._running = False
                self._thread = None
                self._callback = None
                if self._logger_fn:
                    self._logger_fn(f"{type(self).__name__}: end of samples.")
                break
            self._deliver(sample)
            time.sleep(self.period)

    def _next_sample(self):
        raise NotImplementedError


class ReplaySource(_ThreadedSource):
    """
    Plays back recorded samples at a fixed period.

    Args:
        samples: Iterable of SensorSample or (x, y, z) tuples.
        period: Seconds between samples.
        loop: Start over at the end instead of stopping.
    """

    REQUIRED_COLUMNS = ("Raw X", "Raw Y", "Raw Z")

    def __init__(self, samples, period=None, loop=False, logger=None):
        super().__init__(period, logger)
        self.samples = [
            s if isinstance(s, SensorSample) else SensorSample(*s, timestamp=0.0)
            for s in samples
        ]
        self.loop = loop
        self._index = 0

    @classmethod
    def from_csv(cls, filename, period=None, loop=False, logger=None):
        """
        Replay the raw columns of a SessionLogger CSV file.

        Raises:
            ValueError: The file lacks the Raw X / Raw Y / Raw Z columns.
        """
        with open(filename, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            fields = reader.fieldnames or []
            for col in cls.REQUIRED_COLUMNS:
                if col not in fields:
                    raise ValueError(f"Missing column in {filename}: {col}")
            samples = []
            for row in reader:
                t = float(row["Timestamp (s)"]) if row.get("Timestamp (s)") else 0.0
                samples.append(SensorSample(
                    row["Raw X"], row["Raw Y"], row["Raw Z"], timestamp=t,
                ))
        return cls(samples, period=period, loop=loop, logger=logger)

    def __len__(self):
        return len(self.samples)

    def rewind(self):
        self._index = 0

    def _on_subscribe(self):
        if self._index >= len(self.samples):
            self.rewind()
        super()._on_subscribe()

    def _next_sample(self):
        if self._index >= len(self.samples):
            if not self.loop or not self.samples:
                return None
            self._index = 0
        sample = self.samples[self._index]
        self._index += 1
        return sample


class SyntheticSource(_ThreadedSource):
    """
    A simulated sensor.

    Field channel: a constant ambient field plus Gaussian noise, with a
    magnet sweeping past every `event_every` seconds (a smooth bump on the
    X axis lasting about `event_duration` seconds).

    Orientation channel: a gravity vector rocking slowly left and right.

    Args:
        channel: "field" or "orientation".
        period: Seconds between samples.
        seed: Random seed for reproducible noise.
        ambient: Ambient field vector (μT).
        noise: Standard deviation of per-axis noise.
        event_every: Seconds between magnet sweeps.
        event_duration: Length of one sweep (seconds).
        event_strength: Peak extra field on the X axis (μT).
    """

    def __init__(self, channel=FIELD, period=None, seed=None,
                 ambient=(20.0, -15.0, 40.0), noise=0.8, event_every=6.0,
                 event_duration=1.5, event_strength=35.0, logger=None):
        super().__init__(period, logger)
        if channel not in (FIELD, ORIENTATION):
            raise ValueError(f"Unknown channel: {channel}")
        self.channel = channel
        self.ambient = tuple(float(v) for v in ambient)
        self.noise = noise
        self.event_every = event_every
        self.event_duration = event_duration
        self.event_strength = event_strength
        self._rng = np.random.default_rng(seed)
        self._index = 0

    def sample_at(self, t):
        """Noise-free value of the simulated signal at time t (seconds)."""
        if self.channel == ORIENTATION:
            angle = 0.35 * math.sin(t * 0.4)
            return (defaults.GRAVITY * math.sin(angle), 0.0,
                    defaults.GRAVITY * math.cos(angle))

        ax, ay, az = self.ambient
        phase = t % self.event_every
        centre = self.event_every * 0.5
        width = self.event_duration / 4.0
        bump = self.event_strength * math.exp(-((phase - centre) / width) ** 2)
        return ax + bump, ay, az + 0.2 * bump

    def generate(self, count):
        """Produce the next `count` samples without sleeping."""
        return [self._next_sample() for _ in range(count)]

    def _next_sample(self):
        t = self._index * self.period
        self._index += 1
        x, y, z = self.sample_at(t)
        nx, ny, nz = self._rng.normal(0.0, self.noise, 3) if self.noise > 0 else (0, 0, 0)
        return SensorSample(x + nx, y + ny, z + nz, channel=self.channel, timestamp=t)
