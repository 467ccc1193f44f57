"""
MagPlane Session Logger
========================
Record every field sample and its filter output to a CSV file for later
analysis or replay.

Usage:
    plane.start_logging("my_session.csv")
    ...
    plane.stop_logging()

The CSV file will contain columns for:
    Timestamp, Raw X/Y/Z, Smoothed X/Y/Z, Magnitude, Baseline, Delta, Pulses

Baseline and Delta stay empty until the filter has warmed up. A recorded
file can be played back with ReplaySource.from_csv() or plotted with
magplane.review.plot_session().
"""

import csv
from datetime import datetime

COLUMNS = [
    "Timestamp (s)",
    "Raw X",
    "Raw Y",
    "Raw Z",
    "Smoothed X",
    "Smoothed Y",
    "Smoothed Z",
    "Magnitude",
    "Baseline",
    "Delta",
    "Pulses",
]


class SessionLogger:
    """
    Records filtered sensor data to CSV files.

    Each row is one field sample with the filter state right after it.
    Useful for tuning thresholds and for replaying a session offline.
    """

    def __init__(self):
        self._file = None
        self._writer = None
        self._start_time = None
        self._filepath = None
        self.rows = 0

    @property
    def is_logging(self):
        """True while a CSV file is open."""
        return self._writer is not None

    @property
    def filepath(self):
        """Path of the open CSV file, or None."""
        return self._filepath

    def start(self, filename=None, logger=None):
        """
        Start recording to a CSV file.

        Args:
            filename: Target path. Defaults to magplane_session_<date>_<time>.csv.
            logger: Callable for status messages, or None.
        """
        if self.is_logging:
            if logger:
                logger(f"SessionLogger: already writing {self._filepath}; call stop() first.")
            return

        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"magplane_session_{timestamp}.csv"

        self._filepath = str(filename)
        self._file = open(filename, mode="w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        self._start_time = None  # Set on first log_row call
        self.rows = 0

        self._writer.writerow(COLUMNS)

        if logger:
            logger(f"Session log started: {filename}")

    def log_row(self, sample, reading, pulses=0):
        """
        Write one row.

        Args:
            sample: The raw SensorSample.
            reading: FilterReading produced from it.
            pulses: Number of pulses planned for this sample.
        """
        if not self.is_logging:
            return

        if self._start_time is None:
            self._start_time = sample.timestamp

        elapsed = sample.timestamp - self._start_time
        baseline = "" if reading.baseline is None else f"{reading.baseline:.6f}"
        delta = "" if reading.delta is None else f"{reading.delta:.6f}"
        self._writer.writerow([
            f"{elapsed:.3f}",
            f"{sample.x:.6f}",
            f"{sample.y:.6f}",
            f"{sample.z:.6f}",
            f"{reading.x:.6f}",
            f"{reading.y:.6f}",
            f"{reading.z:.6f}",
            f"{reading.magnitude:.6f}",
            baseline,
            delta,
            pulses,
        ])
        self.rows += 1

    def stop(self, logger=None):
        """Stop recording and close the CSV file."""
        if self._file:
            self._file.close()
            self._file = None
            self._writer = None
            if logger:
                logger(f"Session log saved: {self._filepath} ({self.rows} rows)")
            self._filepath = None
            self._start_time = None
