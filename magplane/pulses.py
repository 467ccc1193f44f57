"""
MagPlane Pulse Planner
=======================
Decides what the plane should do after each filtered sample.

Two kinds of pulses can be injected into the heightfield:
    - Sustain — every sample with a positive delta adds a small bump.
      Stronger steady fields make a taller, narrower bump.
    - Transient — a sample whose |delta| crosses the spike threshold adds
      one extra, larger bump.

Where the bump lands depends on the field itself:
    - Left/right comes from the smoothed X axis
    - Near/far comes from the overall magnitude

The planner also derives the sway/tilt/bend animation targets. Everything is
returned as a DriveValue; the planner never touches the field or the
animation directly.
"""

import time

from .config import defaults


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


class PulseRequest:
    """
    A Gaussian bump to add to the heightfield.

    Attributes:
        x (float): World X (left/right).
        z (float): World Z (depth).
        amplitude (float): Peak height (> 0).
        radius (float): Gaussian radius in world units (> 0).
        kind (str): "sustain" or "transient".
    """

    def __init__(self, x, z, amplitude, radius, kind="sustain"):
        self.x = x
        self.z = z
        self.amplitude = amplitude
        self.radius = radius
        self.kind = kind

    def __repr__(self):
        return (
            f"PulseRequest({self.kind}, x={self.x:.2f}, z={self.z:.2f}, "
            f"amp={self.amplitude:.2f}, r={self.radius:.2f})"
        )


class DriveValue:
    """
    Everything one sample asks of the visualization.

    Attributes:
        sway (float): Target sideways shift.
        tilt (float): Target tilt (height gained per unit of X).
        bend (float): Target bend along the depth axis.
        pulses (list): PulseRequest objects to inject now.
    """

    def __init__(self, sway=0.0, tilt=0.0, bend=0.0, pulses=None):
        self.sway = sway
        self.tilt = tilt
        self.bend = bend
        self.pulses = pulses if pulses is not None else []

    @property
    def targets(self):
        return self.sway, self.tilt, self.bend

    def __repr__(self):
        return (
            f"DriveValue(sway={self.sway:.3f}, tilt={self.tilt:.3f}, "
            f"bend={self.bend:.3f}, pulses={len(self.pulses)})"
        )


class PulsePlanner:
    """
    Converts FilterReadings into DriveValues.

    Args:
        world_half_width: Half the plane's width (world units).
        world_depth: The plane's depth (world units).
        spike_threshold: |delta| that triggers a transient pulse.
        min_pulse_interval: Seconds between pulse batches. 0.0 injects on
            every qualifying sample.
        clock: Time source for min_pulse_interval (default time.monotonic).
    """

    def __init__(self, world_half_width=None, world_depth=None,
                 spike_threshold=None, min_pulse_interval=None, clock=None):
        self.world_half_width = (
            defaults.WORLD_HALF_WIDTH if world_half_width is None else world_half_width
        )
        self.world_depth = defaults.WORLD_DEPTH if world_depth is None else world_depth
        self.spike_threshold = (
            defaults.SPIKE_THRESHOLD if spike_threshold is None else spike_threshold
        )
        self.min_pulse_interval = (
            defaults.MIN_PULSE_INTERVAL if min_pulse_interval is None
            else min_pulse_interval
        )
        self.flip_lateral = defaults.FLIP_LATERAL
        self.lateral_norm = defaults.LATERAL_NORM
        self.magnitude_norm = defaults.MAGNITUDE_NORM

        # Sustain tuning
        self.sustain_gain = defaults.SUSTAIN_GAIN
        self.sustain_amp_max = defaults.SUSTAIN_AMP_MAX
        self.sustain_radius_base = defaults.SUSTAIN_RADIUS_BASE
        self.sustain_radius_shrink = defaults.SUSTAIN_RADIUS_SHRINK
        self.sustain_radius_min = defaults.SUSTAIN_RADIUS_MIN

        self._clock = clock or time.monotonic
        self._last_pulse_time = None
        # Set by the orientation channel; overrides the field-derived tilt
        self._orientation_tilt = None

    def reset(self):
        self._last_pulse_time = None
        self._orientation_tilt = None

    # === Placement ===

    def place(self, reading):
        """Map a reading's direction and intensity to a world (x, z)."""
        norm_x = _clamp(reading.x / self.lateral_norm, -1.0, 1.0)
        if self.flip_lateral:
            norm_x = -norm_x
        norm_z = _clamp(reading.magnitude / self.magnitude_norm, 0.0, 1.0)
        return self.world_half_width * norm_x, self.world_depth * norm_z

    # === Pulse shapes ===

    def sustain_pulse(self, delta, x, z):
        """Small bump while the field stays above baseline, or None."""
        if delta <= 0:
            return None
        amplitude = _clamp(delta * self.sustain_gain, 0.0, self.sustain_amp_max)
        if amplitude <= 0:
            return None
        radius = max(
            self.sustain_radius_base - delta * self.sustain_radius_shrink,
            self.sustain_radius_min,
        )
        return PulseRequest(x, z, amplitude, radius, kind="sustain")

    def transient_pulse(self, delta, x, z):
        """One-shot larger bump when |delta| crosses the spike threshold, or None."""
        strength = abs(delta)
        if strength <= self.spike_threshold:
            return None
        amplitude = _clamp(
            strength / defaults.TRANSIENT_AMP_DIV,
            defaults.TRANSIENT_AMP_MIN, defaults.TRANSIENT_AMP_MAX,
        )
        radius = _clamp(
            defaults.TRANSIENT_RADIUS_BASE + strength / defaults.TRANSIENT_RADIUS_DIV,
            defaults.TRANSIENT_RADIUS_MIN, defaults.TRANSIENT_RADIUS_MAX,
        )
        return PulseRequest(x, z, amplitude, radius, kind="transient")

    # === Animation targets ===

    def targets(self, reading):
        """Sway/tilt/bend targets from the smoothed field vector."""
        sway = _clamp(reading.x * defaults.SWAY_GAIN,
                      -defaults.SWAY_LIMIT, defaults.SWAY_LIMIT)
        tilt = _clamp(reading.y * defaults.TILT_GAIN,
                      -defaults.TILT_LIMIT, defaults.TILT_LIMIT)
        bend = _clamp(reading.z * defaults.BEND_GAIN,
                      -defaults.BEND_LIMIT, defaults.BEND_LIMIT)
        if self._orientation_tilt is not None:
            tilt = self._orientation_tilt
        return sway, tilt, bend

    def orientation_tilt(self, ox, oy, oz):
        """
        Use a (smoothed) gravity vector to drive the tilt target.

        Tilting the device sideways moves gravity into the X axis, which
        tilts the plane the same way.
        """
        tilt = _clamp(
            ox / defaults.GRAVITY * defaults.ORIENTATION_TILT_GAIN,
            -defaults.TILT_LIMIT, defaults.TILT_LIMIT,
        )
        self._orientation_tilt = tilt
        return tilt

    # === Main entry ===

    def plan(self, reading):
        """
        Build the DriveValue for one reading.

        No pulses are planned until the filter is ready; the animation
        targets are always produced.
        """
        sway, tilt, bend = self.targets(reading)
        drive = DriveValue(sway, tilt, bend)

        if not reading.ready or reading.delta is None:
            return drive

        if self.min_pulse_interval > 0 and self._last_pulse_time is not None:
            if self._clock() - self._last_pulse_time < self.min_pulse_interval:
                return drive

        x, z = self.place(reading)
        for pulse in (self.sustain_pulse(reading.delta, x, z),
                      self.transient_pulse(reading.delta, x, z)):
            if pulse is not None:
                drive.pulses.append(pulse)

        if drive.pulses:
            self._last_pulse_time = self._clock()
        return drive
