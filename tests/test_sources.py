"""
MagPlane Library — Sources, Clocks and Session Log Tests
==========================================================
Run with: python -m pytest tests/ -v
"""

import csv
import sys
import os
import threading

import matplotlib
matplotlib.use("Agg")

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), ".."))


class TestManualSource:
    """Synchronous push source."""

    def test_push_without_subscriber_is_ignored(self):
        from magplane import ManualSource
        source = ManualSource()
        sample = source.push(1.0, 2.0, 3.0, timestamp=5.0)
        assert sample.vector == (1.0, 2.0, 3.0)
        assert source.is_subscribed is False

    def test_delivers_to_subscriber(self):
        from magplane import ManualSource
        received = []
        source = ManualSource(channel="orientation")
        source.subscribe(received.append)
        source.push(1.0, 2.0, 3.0, timestamp=5.0)
        assert len(received) == 1
        assert received[0].channel == "orientation"
        assert received[0].timestamp == 5.0

    def test_repeated_subscribe_keeps_first(self):
        from magplane import ManualSource
        first, second, messages = [], [], []
        source = ManualSource(logger=messages.append)
        source.subscribe(first.append)
        source.subscribe(second.append)
        source.push(0.0, 0.0, 1.0)
        assert len(first) == 1 and second == []
        assert messages

    def test_unsubscribe_twice(self):
        from magplane import ManualSource
        received = []
        source = ManualSource()
        source.subscribe(received.append)
        source.unsubscribe()
        source.unsubscribe()
        source.push(0.0, 0.0, 1.0)
        assert received == []


class TestThreadedSources:
    """Replay and synthetic sources."""

    def test_replay_delivers_all_then_stops(self):
        from magplane import ReplaySource
        done = threading.Event()
        received = []
        source = ReplaySource([(1, 2, 3), (4, 5, 6), (7, 8, 9)], period=0.001,
                              logger=lambda msg: done.set())
        source.subscribe(received.append)
        assert done.wait(timeout=5.0)
        source.unsubscribe()
        assert [s.vector for s in received] == [(1.0, 2.0, 3.0), (4.0, 5.0, 6.0),
                                                (7.0, 8.0, 9.0)]
        assert len(source) == 3

    def test_replay_can_play_again(self):
        from magplane import ReplaySource
        done = threading.Event()
        received = []
        source = ReplaySource([(1, 2, 3), (4, 5, 6), (7, 8, 9)], period=0.001,
                              logger=lambda msg: done.set())
        source.subscribe(received.append)
        assert done.wait(timeout=5.0)
        assert source.is_subscribed is False
        assert source.is_running is False

        done.clear()
        source.subscribe(received.append)
        assert done.wait(timeout=5.0)
        assert len(received) == 6
        assert received[3].vector == (1.0, 2.0, 3.0)
        assert source.is_subscribed is False

    def test_replay_loop(self):
        from magplane import ReplaySource
        enough = threading.Event()
        received = []

        def collect(sample):
            received.append(sample)
            if len(received) >= 5:
                enough.set()

        source = ReplaySource([(1, 0, 0), (2, 0, 0)], period=0.001, loop=True)
        source.subscribe(collect)
        assert enough.wait(timeout=5.0)
        source.unsubscribe()
        assert [s.x for s in received[:5]] == [1.0, 2.0, 1.0, 2.0, 1.0]

    def test_invalid_period(self):
        from magplane import ReplaySource, SyntheticSource
        with pytest.raises(ValueError):
            ReplaySource([], period=0.0)
        with pytest.raises(ValueError):
            SyntheticSource(period=-1.0)

    def test_synthetic_is_reproducible(self):
        from magplane import SyntheticSource
        a = SyntheticSource(seed=42).generate(50)
        b = SyntheticSource(seed=42).generate(50)
        assert [s.vector for s in a] == [s.vector for s in b]

    def test_synthetic_event_bump(self):
        from magplane import SyntheticSource
        source = SyntheticSource(noise=0.0)
        assert source.sample_at(0.0)[1] == -15.0
        x, _, z = source.sample_at(3.0)
        assert x == pytest.approx(55.0)
        assert z == pytest.approx(47.0)

    def test_synthetic_orientation_is_gravity(self):
        from magplane import SyntheticSource
        source = SyntheticSource(channel="orientation", noise=0.0)
        for sample in source.generate(20):
            assert sample.channel == "orientation"
            assert (sample.x ** 2 + sample.y ** 2 + sample.z ** 2) ** 0.5 == \
                pytest.approx(9.81)

    def test_synthetic_unknown_channel(self):
        from magplane import SyntheticSource
        with pytest.raises(ValueError):
            SyntheticSource(channel="pressure")


class TestClocks:
    """Manual and threaded frame clocks."""

    def test_manual_clock_needs_start(self):
        from magplane import ManualClock
        clock = ManualClock()
        assert clock.advance(3) == 0
        ticks = []
        clock.start(lambda: ticks.append(1))
        assert clock.advance(3) == 3
        assert clock.ticks == 3
        clock.stop()
        clock.stop()
        assert clock.advance() == 0

    def test_thread_clock_ticks(self):
        from magplane import ThreadClock
        enough = threading.Event()
        count = [0]

        def tick():
            count[0] += 1
            if count[0] >= 5:
                enough.set()

        clock = ThreadClock(period=0.005)
        clock.start(tick)
        assert clock.is_running
        assert enough.wait(timeout=5.0)
        clock.stop()
        clock.stop()
        assert clock.is_running is False
        stopped_at = count[0]
        assert clock.ticks == stopped_at

    def test_thread_clock_invalid_period(self):
        from magplane import ThreadClock
        with pytest.raises(ValueError):
            ThreadClock(period=0)


def _write_session(path, samples):
    from magplane import SensorFilter, SessionLogger
    from magplane.sources import SensorSample
    filt = SensorFilter(warmup_samples=5)
    log = SessionLogger()
    log.start(str(path))
    for i, (x, y, z) in enumerate(samples):
        sample = SensorSample(x, y, z, timestamp=100.0 + i * 0.5)
        reading = filt.update(x, y, z)
        log.log_row(sample, reading, pulses=1 if reading.ready and reading.delta > 0 else 0)
    log.stop()
    return log


class TestSessionLogger:
    """CSV recording."""

    def test_rows_and_columns(self, tmp_path):
        from magplane.logger import COLUMNS
        path = tmp_path / "s.csv"
        log = _write_session(path, [(5.0, 5.0, 5.0)] * 8)
        assert log.rows == 8
        assert log.is_logging is False
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == COLUMNS
        assert rows[1][0] == "0.000"
        assert rows[8][0] == "3.500"
        # Baseline and delta are blank during warmup
        assert rows[4][8] == "" and rows[4][9] == ""
        assert rows[5][8] != "" and rows[5][9] != ""

    def test_log_row_when_stopped_is_ignored(self):
        from magplane import FilterReading, SessionLogger
        from magplane.sources import SensorSample
        log = SessionLogger()
        log.log_row(SensorSample(1, 2, 3, timestamp=0.0), FilterReading())
        assert log.rows == 0

    def test_second_start_is_ignored(self, tmp_path):
        from magplane import SessionLogger
        messages = []
        log = SessionLogger()
        log.start(str(tmp_path / "a.csv"))
        log.start(str(tmp_path / "b.csv"), logger=messages.append)
        assert log.filepath.endswith("a.csv")
        assert messages
        log.stop()
        assert log.filepath is None

    def test_replay_from_csv(self, tmp_path):
        from magplane import ReplaySource
        path = tmp_path / "s.csv"
        _write_session(path, [(1.0, 2.0, 3.0), (4.0, 5.0, 6.0)])
        source = ReplaySource.from_csv(str(path))
        assert len(source) == 2
        assert source.samples[1].vector == (4.0, 5.0, 6.0)
        assert source.samples[1].timestamp == pytest.approx(0.5)

    def test_replay_from_csv_missing_columns(self, tmp_path):
        from magplane import ReplaySource
        path = tmp_path / "bad.csv"
        path.write_text("a,b\n1,2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ReplaySource.from_csv(str(path))


class TestReview:
    """Offline session review."""

    def test_summary(self, tmp_path):
        from magplane.review import load_session, summarize_session
        path = tmp_path / "s.csv"
        _write_session(path, [(5.0, 5.0, 5.0)] * 5 + [(100.0, 5.0, 5.0)] * 5)
        summary = summarize_session(load_session(str(path)))
        assert summary["samples"] == 10
        assert summary["warmup_samples"] == 4
        assert summary["duration"] == pytest.approx(4.5)
        assert summary["spikes"] == 5
        assert summary["max_delta"] > 6.0
        assert summary["pulses"] >= 5

    def test_missing_columns(self, tmp_path):
        from magplane.review import load_session
        path = tmp_path / "bad.csv"
        path.write_text("Timestamp (s),Magnitude\n0,1\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_session(str(path))

    def test_plot_session(self, tmp_path):
        import matplotlib.pyplot as plt
        from magplane.review import plot_session
        path = tmp_path / "s.csv"
        _write_session(path, [(5.0, 5.0, 5.0)] * 5 + [(60.0, 5.0, 5.0)] * 5)
        fig = plot_session(str(path), show=False)
        assert len(fig.axes) == 2
        plt.close(fig)


class TestGui:
    """Drawing a frame onto a matplotlib Axes."""

    def test_draw_frame(self):
        import matplotlib.pyplot as plt
        from magplane import MagPlane, ManualSource
        from magplane.gui import draw_frame, cell_color

        plane = MagPlane(source=ManualSource())
        plane.field.add_pulse(0.0, 11.0, 3.0, 2.5)
        for _ in range(5):
            frame = plane.tick()
        fig, ax = plt.subplots()
        artist = draw_frame(ax, frame, plane.camera.width, plane.camera.height)
        assert len(artist.cells.get_paths()) == len(frame.cells)
        assert len(artist.lines.get_segments()) == len(frame.lines)
        assert len(artist.glows.get_offsets()) == len(frame.glows)
        assert frame.glows
        assert ax.get_ylim() == (plane.camera.height, 0)
        assert cell_color(1.0)[3] == 0.25
        plt.close(fig)
