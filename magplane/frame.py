"""
MagPlane Render Frames
=======================
Everything a renderer needs to draw one tick, already in screen space.

A RenderFrame holds three layers, drawn back to front:
    1. cells — one quad per grid cell with a brightness from 0.0 to 1.0
    2. lines — grid polylines along rows and along columns
    3. glows — markers over interior peaks

Colours and alpha are the renderer's business; frames only carry geometry
and brightness.
"""

from .config import defaults


class CellQuad:
    """One grid cell: four corner points and a brightness."""

    __slots__ = ("row", "col", "points", "brightness")

    def __init__(self, row, col, points, brightness):
        self.row = row
        self.col = col
        self.points = points
        self.brightness = brightness

    def __repr__(self):
        return f"CellQuad({self.row}, {self.col}, brightness={self.brightness:.2f})"


class Glow:
    """A highlight drawn over a raised interior node."""

    __slots__ = ("point", "radius", "height")

    def __init__(self, point, radius, height):
        self.point = point
        self.radius = radius
        self.height = height

    def __repr__(self):
        return f"Glow({self.point!r}, r={self.radius:.1f})"


class RenderFrame:
    """
    One tick's worth of projected geometry.

    Attributes:
        tick (int): Tick counter when the frame was built.
        cells (list): CellQuad objects.
        lines (list): Polylines, each a list of Point2D.
        glows (list): Glow objects.
    """

    def __init__(self, tick=0):
        self.tick = tick
        self.cells = []
        self.lines = []
        self.glows = []

    def __repr__(self):
        return (
            f"RenderFrame(tick={self.tick}, cells={len(self.cells)}, "
            f"lines={len(self.lines)}, glows={len(self.glows)})"
        )


def cell_brightness(h00, h10, h01, h11):
    """Brightness of a cell from its four corner heights, clamped to [0, 1]."""
    avg = (h00 + h10 + h01 + h11) * 0.25
    bright = defaults.BRIGHTNESS_BASE + avg * defaults.BRIGHTNESS_GAIN
    return max(0.0, min(1.0, bright))


def glow_radius(zc):
    """Glow markers shrink with distance from the camera."""
    return max(defaults.GLOW_RADIUS_MIN,
               defaults.GLOW_RADIUS_MAX - zc * defaults.GLOW_DEPTH_FALLOFF)


def build_frame(display, grid_x, grid_z, projector, tick=0):
    """
    Project a display grid into a RenderFrame.

    Args:
        display: 2D numpy array of display heights, shape (rows+1, cols+1).
        grid_x: World X of each column.
        grid_z: World Z of each row.
        projector: PerspectiveProjector.
        tick: Tick counter stored on the frame.
    """
    rows = display.shape[0] - 1
    cols = display.shape[1] - 1
    frame = RenderFrame(tick)

    # Project every node once; invisible nodes stay None
    points = [
        [projector.project(float(grid_x[i]), float(display[j, i]), float(grid_z[j]))
         for i in range(cols + 1)]
        for j in range(rows + 1)
    ]

    # 1) Cells
    for j in range(rows):
        for i in range(cols):
            p00 = points[j][i]
            p10 = points[j][i + 1]
            p01 = points[j + 1][i]
            p11 = points[j + 1][i + 1]
            if p00 is None or p10 is None or p01 is None or p11 is None:
                continue
            bright = cell_brightness(
                display[j, i], display[j, i + 1],
                display[j + 1, i], display[j + 1, i + 1],
            )
            frame.cells.append(CellQuad(j, i, [p00, p10, p11, p01], bright))

    # 2) Grid lines: rows, then columns
    for j in range(rows + 1):
        line = [p for p in points[j] if p is not None]
        if len(line) > 1:
            frame.lines.append(line)
    for i in range(cols + 1):
        line = [points[j][i] for j in range(rows + 1) if points[j][i] is not None]
        if len(line) > 1:
            frame.lines.append(line)

    # 3) Peak glows (interior nodes only)
    for j in range(1, rows):
        for i in range(1, cols):
            h = float(display[j, i])
            if h < defaults.GLOW_MIN_HEIGHT:
                continue
            p = points[j][i]
            if p is None:
                continue
            frame.glows.append(Glow(p, glow_radius(p.zc), h))

    return frame
