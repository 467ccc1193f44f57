"""
MagPlane Perspective Projection
================================
Turns a 3D grid node into a 2D screen point.

The camera sits above and in front of the plane, looking down its depth
axis. Before projecting, the node is moved by the animation state:
    - sway shifts it sideways
    - tilt raises it in proportion to its X position
    - bend raises the far half and lowers the near half (or vice versa)

Nodes at or behind the camera are reported as invisible (None).
"""

from .config import defaults


class Point2D:
    """
    A projected screen point.

    Attributes:
        x (float): Screen X in pixels.
        y (float): Screen Y in pixels (grows downward).
        zc (float): Camera-relative depth of the source node.
    """

    __slots__ = ("x", "y", "zc")

    def __init__(self, x, y, zc):
        self.x = x
        self.y = y
        self.zc = zc

    def __iter__(self):
        yield self.x
        yield self.y

    def __repr__(self):
        return f"Point2D({self.x:.1f}, {self.y:.1f}, zc={self.zc:.2f})"


class Camera:
    """
    Fixed per-session camera constants.

    The focal length follows the viewport height and is recomputed by
    resize().
    """

    def __init__(self, width=None, height=None, world_depth=None,
                 camera_height=None, camera_distance=None):
        self.world_depth = defaults.WORLD_DEPTH if world_depth is None else world_depth
        self.camera_height = (
            defaults.CAMERA_HEIGHT if camera_height is None else camera_height
        )
        self.camera_distance = (
            defaults.CAMERA_DISTANCE if camera_distance is None else camera_distance
        )
        self.width = 0
        self.height = 0
        self.focal = 0.0
        self.resize(
            defaults.VIEWPORT_WIDTH if width is None else width,
            defaults.VIEWPORT_HEIGHT if height is None else height,
        )

    def resize(self, width, height):
        """Viewport changed size: update centre and focal length."""
        self.width = width
        self.height = height
        self.focal = height * defaults.FOCAL_SCALE

    @property
    def center(self):
        return self.width * 0.5, self.height * 0.5 + defaults.CENTER_Y_OFFSET


class PerspectiveProjector:
    """
    Projects world-space nodes using a Camera and an AnimationState.

    Args:
        camera: Camera instance.
        animation: AnimationState instance (read, never written).
        depth_epsilon: Nodes with camera-relative depth at or below this
            are invisible.
    """

    def __init__(self, camera, animation, depth_epsilon=None):
        self.camera = camera
        self.animation = animation
        self.depth_epsilon = (
            defaults.DEPTH_EPSILON if depth_epsilon is None else depth_epsilon
        )

    def resize(self, width, height):
        self.camera.resize(width, height)

    def depth_offset(self, z):
        """Depth normalized to [-0.5, 0.5] across the plane."""
        depth = self.camera.world_depth
        return (z - depth * 0.5) / depth

    def project(self, x, y, z):
        """
        Project one node.

        Returns:
            Point2D, or None when the node is at or behind the camera.
        """
        anim = self.animation
        x2 = x + anim.sway
        y2 = y + anim.tilt * x + anim.bend * self.depth_offset(z)

        zc = z + self.camera.camera_distance
        if zc <= self.depth_epsilon:
            return None

        cx, cy = self.camera.center
        focal = self.camera.focal
        sx = cx + (focal * x2) / zc
        sy = cy - (focal * (y2 - self.camera.camera_height)) / zc
        return Point2D(sx, sy, zc)
