"""
MagPlane Heightfield
=====================
The physical "surface" under the visualization: a grid of heights that
pulses push up and that relaxes back to flat on its own.

Each tick the field does two things:
    1. Diffusion — every node moves toward the average of its four
       neighbours, so sharp bumps spread out into smooth hills.
    2. Decay — every node is multiplied by a factor just below 1.0, so the
       whole surface settles back to zero when nothing new happens.

Edge nodes reuse their own value for the missing neighbour (no wrap-around),
so energy does not leak in from the opposite side of the grid.
"""

import numpy as np

from .config import defaults


class FieldSimulator:
    """
    Owns the physical heightfield and its scratch buffer.

    Args:
        rows: Number of grid cells along the depth axis.
        cols: Number of grid cells along the width axis.
        world_half_width: Half the plane's width (world units).
        world_depth: The plane's depth (world units).
        diffusion: Fraction of the Laplacian added per step.
        decay: Uniform attenuation per step (0 < decay < 1).
    """

    def __init__(self, rows=None, cols=None, world_half_width=None,
                 world_depth=None, diffusion=None, decay=None):
        self.rows = defaults.GRID_ROWS if rows is None else rows
        self.cols = defaults.GRID_COLS if cols is None else cols
        self.world_half_width = (
            defaults.WORLD_HALF_WIDTH if world_half_width is None else world_half_width
        )
        self.world_depth = defaults.WORLD_DEPTH if world_depth is None else world_depth
        self.diffusion = defaults.DIFFUSION if diffusion is None else diffusion
        self.decay = defaults.DECAY if decay is None else decay

        if self.rows < 1 or self.cols < 1:
            raise ValueError("Grid needs at least one row and one column")
        if not 0.0 < self.decay < 1.0:
            raise ValueError(f"decay must be between 0 and 1, got {self.decay}")

        shape = (self.rows + 1, self.cols + 1)
        self.height = np.zeros(shape, dtype=np.float64)
        self._next = np.zeros(shape, dtype=np.float64)

        # Node positions in world space
        self.grid_x = np.linspace(-self.world_half_width, self.world_half_width,
                                  self.cols + 1)
        self.grid_z = np.linspace(0.0, self.world_depth, self.rows + 1)

    @property
    def shape(self):
        return self.height.shape

    def reset(self):
        """Flatten the field."""
        self.height.fill(0.0)
        self._next.fill(0.0)

    def peak(self):
        """Largest absolute height anywhere on the grid."""
        return float(np.max(np.abs(self.height)))

    def nearest_node(self, x, z):
        """(row, col) of the grid node closest to world position (x, z)."""
        col = int(np.argmin(np.abs(self.grid_x - x)))
        row = int(np.argmin(np.abs(self.grid_z - z)))
        return row, col

    def add_pulse(self, x, z, amplitude, radius):
        """
        Add a Gaussian bump centred on world position (x, z).

        Every node gains amplitude * exp(-d² / radius²), where d is its
        world-space distance to (x, z).
        """
        if radius <= 0:
            raise ValueError(f"Pulse radius must be positive, got {radius}")
        if amplitude <= 0:
            raise ValueError(f"Pulse amplitude must be positive, got {amplitude}")
        dx = self.grid_x[np.newaxis, :] - x
        dz = self.grid_z[:, np.newaxis] - z
        r2 = dx * dx + dz * dz
        self.height += amplitude * np.exp(-r2 / (radius * radius))

    def apply(self, pulses):
        """Add every PulseRequest in an iterable."""
        for pulse in pulses:
            self.add_pulse(pulse.x, pulse.z, pulse.amplitude, pulse.radius)

    def step(self):
        """Advance one diffusion-decay step."""
        h = self.height
        # Replicated edges give the boundary nodes a copy of themselves
        padded = np.pad(h, 1, mode="edge")
        up = padded[:-2, 1:-1]
        down = padded[2:, 1:-1]
        left = padded[1:-1, :-2]
        right = padded[1:-1, 2:]
        lap = (left + right + up + down - 4.0 * h) * 0.25

        np.multiply(h + lap * self.diffusion, self.decay, out=self._next)
        # Swap only after the whole pass has been computed
        self.height, self._next = self._next, self.height
