"""
MagPlane Library — Heightfield and Stabilizer Tests
=====================================================
Pulse injection, diffusion-decay steps and the display grid.
Run with: python -m pytest tests/ -v
"""

import sys
import os

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), ".."))


def reference_step(h, diffusion, decay):
    """Straightforward per-node diffusion-decay step."""
    rows, cols = h.shape
    out = np.zeros_like(h)
    for j in range(rows):
        for i in range(cols):
            c = h[j, i]
            left = h[j, i - 1] if i > 0 else c
            right = h[j, i + 1] if i < cols - 1 else c
            up = h[j - 1, i] if j > 0 else c
            down = h[j + 1, i] if j < rows - 1 else c
            lap = (left + right + up + down - 4.0 * c) * 0.25
            out[j, i] = (c + lap * diffusion) * decay
    return out


class TestFieldInit:
    """Grid allocation and validation."""

    def test_default_shape(self):
        from magplane import FieldSimulator
        field = FieldSimulator()
        assert field.shape == (11, 13)
        assert field.peak() == 0.0
        assert field.grid_x[0] == -4.0 and field.grid_x[-1] == 4.0
        assert field.grid_z[0] == 0.0 and field.grid_z[-1] == 22.0

    def test_invalid_grid(self):
        from magplane import FieldSimulator
        with pytest.raises(ValueError):
            FieldSimulator(rows=0)

    @pytest.mark.parametrize("decay", [0.0, 1.0, 1.5])
    def test_invalid_decay(self, decay):
        from magplane import FieldSimulator
        with pytest.raises(ValueError):
            FieldSimulator(decay=decay)

    def test_nearest_node(self):
        from magplane import FieldSimulator
        field = FieldSimulator()
        assert field.nearest_node(-4.0, 0.0) == (0, 0)
        assert field.nearest_node(4.0, 22.0) == (10, 12)
        assert field.nearest_node(0.1, 11.5) == (5, 6)


class TestAddPulse:
    """Gaussian bumps."""

    def setup_method(self):
        from magplane import FieldSimulator
        self.field = FieldSimulator()

    def test_peak_at_centre_node(self):
        x0, z0 = self.field.grid_x[6], self.field.grid_z[5]
        self.field.add_pulse(x0, z0, 1.5, 2.0)
        assert self.field.height[5, 6] == pytest.approx(1.5)
        assert self.field.peak() == pytest.approx(1.5)

    def test_strictly_decreasing_with_distance(self):
        x0, z0 = self.field.grid_x[6], self.field.grid_z[5]
        self.field.add_pulse(x0, z0, 1.5, 2.0)
        xs, zs = np.meshgrid(self.field.grid_x, self.field.grid_z)
        d = np.hypot(xs - x0, zs - z0).ravel()
        h = self.field.height.ravel()
        closer = d[:, None] < d[None, :] - 1e-9
        assert np.all((h[:, None] > h[None, :])[closer])

    def test_pulses_add_up(self):
        self.field.add_pulse(0.0, 11.0, 1.0, 2.0)
        first = self.field.height.copy()
        self.field.add_pulse(0.0, 11.0, 1.0, 2.0)
        np.testing.assert_allclose(self.field.height, 2.0 * first)

    @pytest.mark.parametrize("amplitude,radius", [(1.0, 0.0), (1.0, -1.0), (0.0, 1.0)])
    def test_rejects_non_positive(self, amplitude, radius):
        with pytest.raises(ValueError):
            self.field.add_pulse(0.0, 11.0, amplitude, radius)

    def test_apply_requests(self):
        from magplane import PulseRequest
        self.field.apply([PulseRequest(0.0, 11.0, 0.5, 1.0),
                          PulseRequest(2.0, 5.0, 0.5, 1.0, kind="transient")])
        assert self.field.peak() > 0.5


class TestStep:
    """Diffusion-decay."""

    def setup_method(self):
        from magplane import FieldSimulator
        self.field = FieldSimulator()

    def test_flat_field_only_decays(self):
        self.field.height.fill(1.0)
        self.field.step()
        np.testing.assert_allclose(self.field.height, 0.98)

    def test_matches_reference(self):
        rng = np.random.default_rng(11)
        self.field.height[:] = rng.uniform(-2.0, 2.0, self.field.shape)
        expected = reference_step(self.field.height.copy(), 0.65, 0.98)
        self.field.step()
        np.testing.assert_allclose(self.field.height, expected)

    def test_edges_do_not_wrap(self):
        self.field.height[0, 0] = 1.0
        self.field.step()
        assert self.field.height[0, 0] == pytest.approx((1.0 - 0.5 * 0.65) * 0.98)
        assert self.field.height[-1, -1] == 0.0
        assert self.field.height[0, -1] == 0.0
        assert self.field.height[-1, 0] == 0.0

    def test_peak_never_grows(self):
        self.field.add_pulse(-2.0, 4.0, 3.0, 1.0)
        self.field.add_pulse(3.0, 18.0, 2.0, 2.5)
        peaks = [self.field.peak()]
        for _ in range(200):
            self.field.step()
            peaks.append(self.field.peak())
        for a, b in zip(peaks, peaks[1:]):
            assert b <= a + 1e-12
        assert peaks[-1] < 0.02 * peaks[0]

    def test_stays_finite(self):
        for _ in range(50):
            self.field.add_pulse(0.0, 11.0, 3.0, 2.5)
            self.field.step()
        assert np.all(np.isfinite(self.field.height))

    def test_reset(self):
        self.field.add_pulse(0.0, 11.0, 1.0, 2.0)
        self.field.step()
        self.field.reset()
        assert self.field.peak() == 0.0


class TestStabilizer:
    """Display grid: dead zone, asymmetric rates, quantization, floor."""

    def test_dead_zone(self):
        from magplane import VisualStabilizer
        stab = VisualStabilizer((3, 3))
        stab.display.fill(0.5)
        stab.update(np.full((3, 3), 0.505))
        np.testing.assert_array_equal(stab.display, 0.5)

    def test_rise_fast_fall_slow(self):
        from magplane import VisualStabilizer
        stab = VisualStabilizer((1, 2), quant_step=0.0, floor=0.0)
        stab.display[0, 1] = 1.0
        stab.update(np.array([[1.0, 0.0]]))
        assert stab.display[0, 0] == pytest.approx(0.35)
        assert stab.display[0, 1] == pytest.approx(0.92)

    def test_moves_toward_target_without_overshoot(self):
        from magplane import VisualStabilizer
        rng = np.random.default_rng(5)
        stab = VisualStabilizer((8, 8), quant_step=0.0, floor=0.0)
        stab.display[:] = rng.uniform(-1.0, 1.0, (8, 8))
        for _ in range(20):
            before = stab.display.copy()
            physical = rng.uniform(-1.0, 1.0, (8, 8))
            after = stab.update(physical).copy()
            diff = physical - before
            step = after - before
            moving = np.abs(diff) >= 0.01
            assert np.all(step[~moving] == 0.0)
            rate = np.where(diff > 0, 0.35, 0.08)
            assert np.all(np.abs(step) <= rate * np.abs(diff) + 1e-12)
            assert np.all(step * diff >= 0.0)

    def test_rounding_can_pass_rate_limit_by_half_step(self):
        from magplane import VisualStabilizer
        stab = VisualStabilizer((1, 2))
        stab.display.fill(0.5)
        stab.update(np.array([[0.512, 0.4]]))
        # 0.5042 rounds up to 0.505, 0.492 rounds down to 0.49
        assert stab.display[0, 0] == pytest.approx(0.505)
        assert stab.display[0, 1] == pytest.approx(0.49)

    def test_default_rounding_stays_within_half_step(self):
        from magplane import VisualStabilizer
        rng = np.random.default_rng(9)
        stab = VisualStabilizer((8, 8))
        stab.display[:] = rng.integers(-200, 200, (8, 8)) * 0.005
        for _ in range(30):
            before = stab.display.copy()
            physical = rng.uniform(-1.0, 1.0, (8, 8))
            after = stab.update(physical).copy()
            diff = physical - before
            step = after - before
            moving = np.abs(diff) >= 0.01
            assert np.all(step[~moving] == 0.0)
            rate = np.where(diff > 0, 0.35, 0.08)
            bound = rate * np.abs(diff) + 0.0025 + 1e-9
            snapped = after == 0.0
            assert np.all((snapped | (np.abs(step) <= bound))[moving])
            assert np.all((snapped | (step * diff >= 0.0))[moving])

    def test_quantized(self):
        from magplane import VisualStabilizer
        stab = VisualStabilizer((2, 2))
        stab.update(np.full((2, 2), 0.123))
        assert stab.display[0, 0] == pytest.approx(0.045)
        steps = stab.display / 0.005
        np.testing.assert_allclose(steps, np.round(steps))

    def test_floor_snaps_to_zero(self):
        from magplane import VisualStabilizer
        stab = VisualStabilizer((2, 2))
        stab.update(np.full((2, 2), 0.1))
        np.testing.assert_array_equal(stab.display, 0.0)

    def test_decays_to_exact_zero(self):
        from magplane import VisualStabilizer
        stab = VisualStabilizer((2, 2))
        stab.display.fill(0.3)
        for _ in range(200):
            stab.update(np.zeros((2, 2)))
        np.testing.assert_array_equal(stab.display, 0.0)

    def test_shape_mismatch(self):
        from magplane import VisualStabilizer
        stab = VisualStabilizer((2, 2))
        with pytest.raises(ValueError):
            stab.update(np.zeros((3, 3)))

    def test_updates_in_place(self):
        from magplane import VisualStabilizer
        stab = VisualStabilizer((2, 2))
        display = stab.display
        assert stab.update(np.ones((2, 2))) is display
