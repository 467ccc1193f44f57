"""
MagPlane Visual Stabilizer
===========================
Keeps the drawn surface calm even though the physical field changes a
little every tick.

The display grid follows the physical grid with three tricks:
    - Dead zone — tiny differences are ignored completely
    - Asymmetric smoothing — peaks rise quickly but fall slowly
    - Quantization — heights snap to a fixed step, and near-zero heights
      snap to exactly zero
"""

import numpy as np

from .config import defaults


class VisualStabilizer:
    """
    Display-only copy of the heightfield.

    Args:
        shape: (rows + 1, cols + 1) of the physical grid.
        epsilon: Dead-zone half width.
        rate_up: Fraction of a rising gap closed per update.
        rate_down: Fraction of a falling gap closed per update.
        quant_step: Quantization step (0 disables quantization).
        floor: Magnitudes below this become 0.0 (0 disables the snap).
    """

    def __init__(self, shape, epsilon=None, rate_up=None, rate_down=None,
                 quant_step=None, floor=None):
        self.epsilon = defaults.STAB_EPSILON if epsilon is None else epsilon
        self.rate_up = defaults.STAB_RATE_UP if rate_up is None else rate_up
        self.rate_down = defaults.STAB_RATE_DOWN if rate_down is None else rate_down
        self.quant_step = defaults.STAB_QUANT_STEP if quant_step is None else quant_step
        self.floor = defaults.STAB_FLOOR if floor is None else floor
        self.display = np.zeros(shape, dtype=np.float64)

    def reset(self):
        self.display.fill(0.0)

    def update(self, physical):
        """
        Move the display grid one step toward the physical grid.

        Quantization rounds to the nearest step, so a moving node may land
        up to half a step past rate * diff. Nodes snapped by the floor go
        straight to 0.0.

        Args:
            physical: numpy array with the same shape as the display grid.

        Returns:
            The display grid (updated in place).
        """
        if physical.shape != self.display.shape:
            raise ValueError(
                f"Grid shape mismatch: physical {physical.shape}, "
                f"display {self.display.shape}"
            )
        diff = physical - self.display
        moving = np.abs(diff) >= self.epsilon
        if not moving.any():
            return self.display

        rate = np.where(diff > 0, self.rate_up, self.rate_down)
        target = self.display + diff * rate

        if self.quant_step > 0:
            target = np.round(target / self.quant_step) * self.quant_step
        if self.floor > 0:
            target[np.abs(target) < self.floor] = 0.0

        # Nodes inside the dead zone keep their previous value untouched
        self.display[moving] = target[moving]
        return self.display
