"""
MagPlane Configuration Defaults
================================
All tunable constants for the MagPlane pipeline.
Each value has a comment explaining what it does and sensible defaults.

Learners can override these by setting attributes on the MagPlane object:
    plane.spike_threshold = 8.0   # Override default spike threshold

Or by passing keyword arguments to the individual components:
    SensorFilter(alpha=0.2, warmup_samples=50)

Advanced users can import this module to see all available constants:
    from magplane.config import defaults
"""


class _Defaults:
    """Container for all default configuration values."""

    # === SENSOR FILTER ===
    # Exponential smoothing per axis (0.0 = frozen, 1.0 = raw samples)
    LOWPASS_ALPHA = 0.10
    # Number of samples averaged into the first baseline
    WARMUP_SAMPLES = 20
    # Baseline drift rate while the signal sits near the baseline
    BASELINE_ALPHA = 0.005
    # Baseline drift rate while the signal is moderately elevated (near-frozen)
    BASELINE_ALPHA_HOLD = 0.0005
    # |delta| above this counts as a spike (field units, e.g. μT)
    SPIKE_THRESHOLD = 6.0
    # Fraction of SPIKE_THRESHOLD where the baseline slows to BASELINE_ALPHA_HOLD
    HOLD_FACTOR = 0.7
    # Fraction of SPIKE_THRESHOLD where the baseline stops moving entirely
    FREEZE_FACTOR = 1.2

    # === SUSTAIN PULSES (every sample with delta > 0) ===
    SUSTAIN_GAIN = 0.05           # amplitude per unit of delta
    SUSTAIN_AMP_MAX = 0.6         # amplitude ceiling
    SUSTAIN_RADIUS_BASE = 2.0     # radius at delta = 0 (world units)
    SUSTAIN_RADIUS_SHRINK = 0.02  # radius lost per unit of delta
    SUSTAIN_RADIUS_MIN = 0.8      # narrowest sustained bump

    # === TRANSIENT PULSES (|delta| > SPIKE_THRESHOLD) ===
    # amplitude = clamp(|delta| / TRANSIENT_AMP_DIV, AMP_MIN, AMP_MAX)
    TRANSIENT_AMP_DIV = 10.0
    TRANSIENT_AMP_MIN = 0.8
    TRANSIENT_AMP_MAX = 3.0
    # radius = clamp(RADIUS_BASE + |delta| / RADIUS_DIV, RADIUS_MIN, RADIUS_MAX)
    TRANSIENT_RADIUS_BASE = 1.2
    TRANSIENT_RADIUS_DIV = 15.0
    TRANSIENT_RADIUS_MIN = 1.0
    TRANSIENT_RADIUS_MAX = 2.5

    # === PULSE PLACEMENT ===
    # Lateral axis value that maps to the plane's left/right edge
    LATERAL_NORM = 60.0
    # Magnitude that maps to the far edge of the plane
    MAGNITUDE_NORM = 100.0
    # Mirror the lateral axis (True when the display is viewed flipped)
    FLIP_LATERAL = False
    # Minimum seconds between pulse batches (0.0 = every qualifying sample)
    MIN_PULSE_INTERVAL = 0.0

    # === ANIMATION TARGETS (from the smoothed field vector) ===
    SWAY_GAIN = 0.02
    SWAY_LIMIT = 1.2
    TILT_GAIN = 0.006
    TILT_LIMIT = 0.25
    BEND_GAIN = 0.003
    BEND_LIMIT = 0.35
    # Tilt from a second orientation sensor (gravity vector, m/s²)
    GRAVITY = 9.81
    ORIENTATION_TILT_GAIN = 0.25

    # === HEIGHTFIELD ===
    GRID_ROWS = 10
    GRID_COLS = 12
    WORLD_HALF_WIDTH = 4.0
    WORLD_DEPTH = 22.0
    # Fraction of the Laplacian added each step (spreads bumps)
    DIFFUSION = 0.65
    # Uniform attenuation per step (must stay below 1.0)
    DECAY = 0.98

    # === VISUAL STABILIZER ===
    STAB_EPSILON = 0.01     # dead zone: smaller differences are ignored
    STAB_RATE_UP = 0.35     # fraction of a rising gap closed per tick
    STAB_RATE_DOWN = 0.08   # fraction of a falling gap closed per tick
    STAB_QUANT_STEP = 0.005  # display heights snap to multiples of this
    STAB_FLOOR = 0.04        # display heights smaller than this become 0.0

    # === ANIMATION ===
    # Fraction of the remaining gap to the target covered per tick
    ANIM_BLEND = 0.08

    # === CAMERA / PROJECTION ===
    CAMERA_HEIGHT = 3.0
    CAMERA_DISTANCE = 12.0
    # Nodes at or behind this camera-relative depth are not drawn
    DEPTH_EPSILON = 0.01
    # focal length = viewport height * FOCAL_SCALE
    FOCAL_SCALE = 0.75
    # Screen centre is pushed this many pixels down
    CENTER_Y_OFFSET = 10.0
    VIEWPORT_WIDTH = 720
    VIEWPORT_HEIGHT = 1200

    # === RENDER FRAME ===
    BRIGHTNESS_BASE = 0.5
    BRIGHTNESS_GAIN = 0.7
    # Interior nodes at least this high get a glow marker
    GLOW_MIN_HEIGHT = 0.25
    GLOW_RADIUS_MAX = 6.0
    GLOW_RADIUS_MIN = 2.0
    GLOW_DEPTH_FALLOFF = 0.05

    # === LOOP TIMING ===
    # Tick period in seconds (display refresh, 60 Hz)
    FRAME_PERIOD = 1.0 / 60.0
    # Sample period of the synthetic / replay sources (seconds)
    SAMPLE_PERIOD = 0.02

    # === CSV LOGGING ===
    # Set True to automatically create a session log when the plane starts
    ENABLE_CSV_LOGGING = False


# Singleton instance that the library uses
defaults = _Defaults()
