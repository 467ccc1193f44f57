"""
MagPlane Frame Clocks
======================
A frame clock calls one function once per frame:
    clock.start(tick_fn)
    clock.stop()

ThreadClock runs a background loop at a fixed period (60 Hz by default).
ManualClock does nothing on its own; call advance() to tick, which makes
tests and offline rendering fully deterministic.
"""

import threading
import time

from .config import defaults


class FrameClock:
    """Base class: remembers the tick function and handles repeated calls."""

    def __init__(self, logger=None):
        self._tick_fn = None
        self._logger_fn = logger

    @property
    def is_running(self):
        return self._tick_fn is not None

    def start(self, tick_fn):
        """Begin calling tick_fn once per frame."""
        if self._tick_fn is not None:
            if self._logger_fn:
                self._logger_fn(f"{type(self).__name__}: already running.")
            return
        self._tick_fn = tick_fn
        self._on_start()

    def stop(self):
        """Stop ticking. Safe to call when already stopped."""
        if self._tick_fn is None:
            return
        self._on_stop()
        self._tick_fn = None

    def _on_start(self):
        pass

    def _on_stop(self):
        pass


class ManualClock(FrameClock):
    """Ticks only when advance() is called."""

    def __init__(self, logger=None):
        super().__init__(logger)
        self.ticks = 0

    def advance(self, count=1):
        """Run `count` ticks now. Returns the number actually run."""
        ran = 0
        for _ in range(count):
            tick_fn = self._tick_fn
            if tick_fn is None:
                break
            tick_fn()
            self.ticks += 1
            ran += 1
        return ran


class ThreadClock(FrameClock):
    """
    Background thread calling the tick function every `period` seconds.

    The loop sleeps for whatever is left of the period after each tick, so
    a slow tick delays the next one instead of piling ticks up.
    """

    def __init__(self, period=None, logger=None):
        super().__init__(logger)
        self.period = defaults.FRAME_PERIOD if period is None else period
        if self.period <= 0:
            raise ValueError(f"Frame period must be positive, got {self.period}")
        self._running = False
        self._thread = None
        self.ticks = 0

    def _on_start(self):
        self._running = True
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()

    def _on_stop(self):
        self._running = False
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)

    def _run_loop(self):
        next_time = time.monotonic()
        while self._running:
            tick_fn = self._tick_fn
            if tick_fn is None:
                break
            tick_fn()
            self.ticks += 1
            next_time += self.period
            delay = next_time - time.monotonic()
            if delay > 0:
                time.sleep(delay)
            else:
                # Fell behind: resynchronize rather than burst
                next_time = time.monotonic()
