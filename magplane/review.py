"""
MagPlane Session Review
========================
Plot a recorded session CSV (see SessionLogger) after the fact.

Usage:
    from magplane.review import load_session, plot_session

    df = load_session("magplane_session_20260101_120000.csv")
    print(df["Delta"].describe())
    plot_session("magplane_session_20260101_120000.csv")
"""

import pandas as pd

REQUIRED_COLUMNS = ["Timestamp (s)", "Magnitude", "Baseline", "Delta", "Pulses"]


def load_session(filename):
    """
    Load a session CSV into a DataFrame.

    Baseline and Delta are NaN for warmup rows.

    Raises:
        ValueError: A required column is missing.
    """
    df = pd.read_csv(filename)
    for col in REQUIRED_COLUMNS:
        if col not in df.columns:
            raise ValueError(f"Missing column: {col}")
    return df


def summarize_session(df, spike_threshold=None):
    """
    Key numbers of a session.

    Returns:
        dict with samples, warmup_samples, duration, max_delta, spikes, pulses.
    """
    from .config import defaults
    if spike_threshold is None:
        spike_threshold = defaults.SPIKE_THRESHOLD

    delta = df["Delta"]
    ready = delta.notna()
    return {
        "samples": int(len(df)),
        "warmup_samples": int((~ready).sum()),
        "duration": float(df["Timestamp (s)"].iloc[-1]) if len(df) else 0.0,
        "max_delta": float(delta[ready].abs().max()) if ready.any() else None,
        "spikes": int((delta[ready].abs() > spike_threshold).sum()),
        "pulses": int(df["Pulses"].sum()),
    }


def plot_session(filename, spike_threshold=None, show=True):
    """
    Plot magnitude/baseline and delta of a recorded session.

    Args:
        filename: Session CSV path.
        spike_threshold: Draw ± this line on the delta plot.
        show: Call plt.show() (set False to keep the figure for saving).

    Returns:
        The matplotlib Figure.
    """
    import matplotlib.pyplot as plt
    from .config import defaults

    if spike_threshold is None:
        spike_threshold = defaults.SPIKE_THRESHOLD

    df = load_session(filename)
    t = df["Timestamp (s)"]

    fig = plt.figure(figsize=(12, 6))

    # === Plot 1: Magnitude and Baseline ===
    ax1 = fig.add_subplot(2, 1, 1)
    ax1.plot(t, df["Magnitude"], "b-", linewidth=1.5, label="Magnitude")
    ax1.plot(t, df["Baseline"], "orange", linewidth=2, label="Baseline")
    ax1.set_title("Field Magnitude")
    ax1.set_ylabel("μT")
    ax1.grid(True, alpha=0.3)
    ax1.legend()

    # === Plot 2: Delta with spike threshold ===
    ax2 = fig.add_subplot(2, 1, 2, sharex=ax1)
    ax2.plot(t, df["Delta"], "g-", linewidth=1.5, label="Delta")
    ax2.axhline(y=spike_threshold, color="red", linestyle="--", alpha=0.7,
                label=f"Spike = ±{spike_threshold}")
    ax2.axhline(y=-spike_threshold, color="red", linestyle="--", alpha=0.7)
    pulsed = df["Pulses"] > 0
    ax2.plot(t[pulsed], df["Delta"][pulsed], "k.", markersize=3, label="Pulse injected")
    ax2.set_title("Delta from Baseline")
    ax2.set_xlabel("Time (s)")
    ax2.set_ylabel("μT")
    ax2.grid(True, alpha=0.3)
    ax2.legend()

    fig.tight_layout()
    if show:
        plt.show()
    return fig
