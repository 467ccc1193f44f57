"""
MagPlane Sensor Filter
=======================
Turns noisy 3-axis field samples into a stable magnitude and a
delta-from-baseline that the rest of the pipeline can react to.

The filter has three jobs:
    - Smoothing — a per-axis exponential low-pass filter removes sensor noise
    - Warmup — the first few samples are averaged into a starting baseline
    - Adaptive baseline — the baseline follows slow drift, but slows down and
      finally freezes while the signal is clearly elevated, so a magnet held
      near the sensor is never absorbed into "normal"

Usage:
    filt = SensorFilter()
    reading = filt.update(12.0, -30.5, 41.2)
    if reading.ready:
        print(f"Delta: {reading.delta:.1f}")
"""

import math

from .config import defaults


class FilterReading:
    """
    A snapshot of the filter output after one sample.

    Attributes:
        x (float): Smoothed X axis.
        y (float): Smoothed Y axis.
        z (float): Smoothed Z axis.
        magnitude (float): Euclidean norm of the smoothed vector (always >= 0).
        baseline (float or None): Ambient level, None until warmup completes.
        delta (float or None): magnitude - baseline, None until warmup completes.
        ready (bool): True once the baseline has been established.
        count (int): Number of samples processed so far.
    """

    def __init__(self):
        self.x = 0.0
        self.y = 0.0
        self.z = 0.0
        self.magnitude = 0.0
        self.baseline = None
        self.delta = None
        self.ready = False
        self.count = 0

    def __repr__(self):
        if self.ready:
            return (
                f"FilterReading(mag={self.magnitude:.2f}, "
                f"baseline={self.baseline:.2f}, delta={self.delta:+.2f})"
            )
        return f"FilterReading(mag={self.magnitude:.2f}, warming up {self.count})"


class _LowPass3:
    """Per-axis exponential smoothing. The first sample is taken as-is."""

    def __init__(self, alpha):
        self.alpha = alpha
        self.x = 0.0
        self.y = 0.0
        self.z = 0.0
        self.primed = False

    def reset(self):
        self.x = 0.0
        self.y = 0.0
        self.z = 0.0
        self.primed = False

    def update(self, x, y, z):
        if not self.primed:
            # Start at the first sample instead of easing in from zero
            self.x, self.y, self.z = float(x), float(y), float(z)
            self.primed = True
        else:
            self.x += self.alpha * (x - self.x)
            self.y += self.alpha * (y - self.y)
            self.z += self.alpha * (z - self.z)
        return self.x, self.y, self.z


class SensorFilter:
    """
    Smoothing, warmup and adaptive baseline for one 3-axis sensor channel.

    Args:
        alpha: Low-pass coefficient per axis.
        warmup_samples: Samples averaged into the first baseline.
        baseline_alpha: Normal baseline drift rate.
        hold_alpha: Baseline drift rate while moderately elevated.
        spike_threshold: |delta| that counts as a spike.
        hold_factor: Fraction of spike_threshold where drift slows to hold_alpha.
        freeze_factor: Fraction of spike_threshold where drift stops.
    """

    def __init__(self, alpha=None, warmup_samples=None, baseline_alpha=None,
                 hold_alpha=None, spike_threshold=None, hold_factor=None,
                 freeze_factor=None):
        self.alpha = defaults.LOWPASS_ALPHA if alpha is None else alpha
        self.warmup_samples = (
            defaults.WARMUP_SAMPLES if warmup_samples is None else warmup_samples
        )
        self.baseline_alpha = (
            defaults.BASELINE_ALPHA if baseline_alpha is None else baseline_alpha
        )
        self.hold_alpha = (
            defaults.BASELINE_ALPHA_HOLD if hold_alpha is None else hold_alpha
        )
        self.spike_threshold = (
            defaults.SPIKE_THRESHOLD if spike_threshold is None else spike_threshold
        )
        self.hold_factor = defaults.HOLD_FACTOR if hold_factor is None else hold_factor
        self.freeze_factor = (
            defaults.FREEZE_FACTOR if freeze_factor is None else freeze_factor
        )
        if self.warmup_samples < 1:
            raise ValueError("warmup_samples must be at least 1")

        self._lowpass = _LowPass3(self.alpha)
        self.magnitude = 0.0
        self.baseline = 0.0
        self.baseline_ready = False
        self.delta = None
        self._warmup_count = 0
        self._warmup_sum = 0.0
        self._count = 0

    @property
    def ready(self):
        """True once warmup is complete and delta is meaningful."""
        return self.baseline_ready

    def reset(self):
        """Forget everything and start a new warmup."""
        self._lowpass.reset()
        self.magnitude = 0.0
        self.baseline = 0.0
        self.baseline_ready = False
        self.delta = None
        self._warmup_count = 0
        self._warmup_sum = 0.0
        self._count = 0

    def baseline_rate(self, deviation):
        """
        Baseline update rate for a given |magnitude - baseline|.

        Near the baseline the normal drift rate applies; moderately elevated
        signals nearly freeze it; strong ones freeze it completely.
        """
        deviation = abs(deviation)
        if deviation >= self.freeze_factor * self.spike_threshold:
            return 0.0
        if deviation >= self.hold_factor * self.spike_threshold:
            return self.hold_alpha
        return self.baseline_alpha

    def update(self, x, y, z):
        """
        Process one raw sample.

        Args:
            x, y, z: Raw axis values (e.g. μT).

        Returns:
            FilterReading snapshot. delta is None during warmup.
        """
        sx, sy, sz = self._lowpass.update(x, y, z)
        self.magnitude = math.sqrt(sx * sx + sy * sy + sz * sz)
        self._count += 1

        if not self.baseline_ready:
            self._warmup_sum += self.magnitude
            self._warmup_count += 1
            if self._warmup_count >= self.warmup_samples:
                self.baseline = self._warmup_sum / self._warmup_count
                self.baseline_ready = True
                self.delta = self.magnitude - self.baseline
            else:
                self.delta = None
        else:
            rate = self.baseline_rate(self.magnitude - self.baseline)
            self.baseline += rate * (self.magnitude - self.baseline)
            self.delta = self.magnitude - self.baseline

        return self.snapshot()

    def snapshot(self):
        """Create a FilterReading from the current state."""
        r = FilterReading()
        r.x = self._lowpass.x
        r.y = self._lowpass.y
        r.z = self._lowpass.z
        r.magnitude = self.magnitude
        r.ready = self.baseline_ready
        r.baseline = self.baseline if self.baseline_ready else None
        r.delta = self.delta if self.baseline_ready else None
        r.count = self._count
        return r


class OrientationFilter:
    """
    Smooths a second, orientation-type sensor (gravity vector).

    Only the smoothed vector is tracked; there is no baseline for this
    channel. Its lateral component drives the plane's tilt.
    """

    def __init__(self, alpha=None):
        self._lowpass = _LowPass3(defaults.LOWPASS_ALPHA if alpha is None else alpha)

    @property
    def active(self):
        """True once at least one orientation sample has arrived."""
        return self._lowpass.primed

    @property
    def vector(self):
        return self._lowpass.x, self._lowpass.y, self._lowpass.z

    def reset(self):
        self._lowpass.reset()

    def update(self, x, y, z):
        return self._lowpass.update(x, y, z)


def format_readout(reading, unit="μT"):
    """
    Format a reading for a text display.

    Returns:
        (magnitude_text, delta_text). Delta shows "--" until warmup completes.
    """
    mag_text = f"Mag: {reading.magnitude:.1f} {unit}"
    if reading.delta is None:
        delta_text = f"Δ: -- {unit}"
    else:
        delta_text = f"Δ: {reading.delta:.1f} {unit}"
    return mag_text, delta_text
