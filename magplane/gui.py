"""
MagPlane GUI — Live Plane View
===============================
Built-in matplotlib windows for watching the pipeline run.

Usage:
    from magplane import MagPlane, SyntheticSource
    from magplane.gui import live_plane

    live_plane(MagPlane(source=SyntheticSource()))

Available functions:
    live_plane(plane)         — The animated heightfield
    live_signal_plot(plane)   — Magnitude, baseline and delta over time
    draw_frame(ax, frame, w, h) — Draw one RenderFrame onto any matplotlib Axes
"""

import time
from collections import deque

import numpy as np

try:
    import matplotlib.pyplot as plt
    import matplotlib.animation as animation
    from matplotlib.collections import LineCollection, PolyCollection
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False


def _check_matplotlib():
    """Fail early with an install hint when matplotlib is missing."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for GUI features.\n"
            "Install it with:  pip install matplotlib"
        )


def _ensure_started(plane):
    """Start the plane if it is not running yet."""
    if not plane.is_running:
        plane.start()


def _apply_dark_theme():
    """Dark figure colours shared by every MagPlane window."""
    plt.rcParams.update({
        "figure.facecolor": "#1e1e2e",
        "axes.facecolor": "#11111b",
        "axes.edgecolor": "#444466",
        "axes.labelcolor": "#cdd6f4",
        "text.color": "#cdd6f4",
        "xtick.color": "#a6adc8",
        "ytick.color": "#a6adc8",
        "grid.color": "#3a3a5c",
        "grid.alpha": 0.5,
        "lines.linewidth": 1.8,
        "font.size": 10,
        "axes.titlesize": 12,
        "axes.titleweight": "bold",
        "figure.titlesize": 14,
        "figure.titleweight": "bold",
    })


# ─── Color palette ───────────────────────────────────────────────────
COLORS = {
    "cyan":    "#89dceb",
    "green":   "#a6e3a1",
    "yellow":  "#f9e2af",
    "red":     "#f38ba8",
    "peach":   "#fab387",
}

GRID_COLOR = (220 / 255, 220 / 255, 220 / 255, 0.5)
GLOW_COLOR = (0.0, 180 / 255, 1.0, 0.7)


def cell_color(brightness, alpha=0.25):
    """RGBA fill colour for a cell: dark blue-grey up to pale blue."""
    rg = (40 + brightness * 160) / 255
    b = (60 + brightness * 180) / 255
    return (rg, rg, b, alpha)


class PlaneArtist:
    """
    Keeps the matplotlib artists for one Axes and redraws them per frame.

    Args:
        ax: matplotlib Axes to draw into.
        width: Viewport width in pixels.
        height: Viewport height in pixels.
    """

    def __init__(self, ax, width, height):
        self.ax = ax
        self.cells = PolyCollection([], edgecolors="none")
        self.lines = LineCollection([], colors=[GRID_COLOR], linewidths=1.0)
        self.glows = ax.scatter([], [], s=[], color=GLOW_COLOR, zorder=3)
        ax.add_collection(self.cells)
        ax.add_collection(self.lines)
        self.resize(width, height)
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])

    def resize(self, width, height):
        self.ax.set_xlim(0, width)
        # Screen Y grows downward
        self.ax.set_ylim(height, 0)

    def update(self, frame):
        """Replace the drawn geometry with a new RenderFrame."""
        self.cells.set_verts([[(p.x, p.y) for p in c.points] for c in frame.cells])
        self.cells.set_facecolors([cell_color(c.brightness) for c in frame.cells])
        self.lines.set_segments([[(p.x, p.y) for p in line] for line in frame.lines])
        if frame.glows:
            self.glows.set_offsets([(g.point.x, g.point.y) for g in frame.glows])
            self.glows.set_sizes([(g.radius * 2.0) ** 2 for g in frame.glows])
        else:
            self.glows.set_offsets(np.empty((0, 2)))
            self.glows.set_sizes([])
        return self.cells, self.lines, self.glows


def draw_frame(ax, frame, width, height):
    """Draw a single RenderFrame onto an Axes. Returns the PlaneArtist."""
    artist = PlaneArtist(ax, width, height)
    artist.update(frame)
    return artist


# ─────────────────────────────────────────────────────────────────────
#  PUBLIC FUNCTIONS
# ─────────────────────────────────────────────────────────────────────

def live_plane(plane, update_ms=None, show_readout=True):
    """
    Open a window with the animated plane.

    If the plane has no frame clock, the animation timer drives plane.tick();
    otherwise the window just shows the latest frame.

    Args:
        plane: MagPlane instance (will auto-start if needed).
        update_ms: Redraw interval in milliseconds (default: one frame period).
        show_readout: Show magnitude and delta text in the corner.
    """
    _check_matplotlib()
    _apply_dark_theme()

    from .config import defaults
    if update_ms is None:
        update_ms = int(round(defaults.FRAME_PERIOD * 1000))

    width, height = plane.camera.width, plane.camera.height
    fig, ax = plt.subplots(figsize=(5, 5 * height / max(width, 1)))
    fig.suptitle("MagPlane", color=COLORS["cyan"])
    artist = PlaneArtist(ax, width, height)
    text_mag = ax.text(12, 30, "", color=COLORS["cyan"], fontsize=11)
    text_delta = ax.text(12, 60, "", color=COLORS["peach"], fontsize=11)

    _ensure_started(plane)

    def update(_):
        frame = plane.last_frame if plane.has_clock else plane.tick()
        if frame is None:
            return ()
        artists = artist.update(frame)
        if show_readout:
            mag_text, delta_text = plane.readout()
            text_mag.set_text(mag_text)
            text_delta.set_text(delta_text)
        return artists

    ani = animation.FuncAnimation(fig, update, interval=update_ms, cache_frame_data=False)

    try:
        plt.show()
    except KeyboardInterrupt:
        pass
    finally:
        plane.stop()
    return ani


def live_signal_plot(plane, max_points=300, update_ms=100):
    """
    Open a live plot of the filter output:
      - Magnitude (smoothed)
      - Baseline (appears once warmup is done)
      - Delta, with the ± spike threshold marked

    Args:
        plane: MagPlane instance (will auto-start if needed).
        max_points: Number of samples visible on screen.
        update_ms: Plot refresh interval in milliseconds.
    """
    _check_matplotlib()
    _apply_dark_theme()

    timestamps = deque(maxlen=max_points)
    magnitude = deque(maxlen=max_points)
    baseline = deque(maxlen=max_points)
    delta = deque(maxlen=max_points)
    start_time = time.time()

    def collect(reading):
        timestamps.append(time.time() - start_time)
        magnitude.append(reading.magnitude)
        baseline.append(reading.baseline if reading.baseline is not None else float("nan"))
        delta.append(reading.delta if reading.delta is not None else float("nan"))

    plane.add_reading_listener(collect)
    _ensure_started(plane)

    fig, (ax_mag, ax_delta) = plt.subplots(2, 1, figsize=(10, 7))
    fig.suptitle("MagPlane — Live Signal", color=COLORS["cyan"])
    fig.subplots_adjust(hspace=0.35)

    line_mag, = ax_mag.plot([], [], color=COLORS["cyan"], label="Magnitude")
    line_base, = ax_mag.plot([], [], color=COLORS["yellow"], label="Baseline")
    ax_mag.set_ylabel("μT")
    ax_mag.legend(loc="upper right", fontsize=8)
    ax_mag.grid(True)

    line_delta, = ax_delta.plot([], [], color=COLORS["green"], label="Delta")
    ax_delta.axhline(plane.spike_threshold, color=COLORS["red"], linestyle="--", alpha=0.7)
    ax_delta.axhline(-plane.spike_threshold, color=COLORS["red"], linestyle="--", alpha=0.7)
    ax_delta.set_ylabel("μT")
    ax_delta.set_xlabel("time (s)")
    ax_delta.legend(loc="upper right", fontsize=8)
    ax_delta.grid(True)

    def update(_):
        t = list(timestamps)
        if len(t) < 2:
            return
        line_mag.set_data(t, list(magnitude))
        line_base.set_data(t, list(baseline))
        line_delta.set_data(t, list(delta))
        for ax in (ax_mag, ax_delta):
            ax.set_xlim(t[0], t[-1])
        mags = list(magnitude)
        ax_mag.set_ylim(min(mags) - 2.0, max(mags) + 2.0)
        d = [v for v in delta if v == v]
        if d:
            margin = max(abs(min(d)), abs(max(d)), plane.spike_threshold) * 1.2
            ax_delta.set_ylim(-margin, margin)

    ani = animation.FuncAnimation(fig, update, interval=update_ms, cache_frame_data=False)

    try:
        plt.show()
    except KeyboardInterrupt:
        pass
    finally:
        plane.remove_reading_listener(collect)
        plane.stop()
    return ani
