"""
MagPlane Animation State
=========================
Sway, tilt and bend of the whole plane.

Targets can jump around from one sample to the next; the animation state
only ever covers a fixed fraction of the remaining gap per tick, so the
plane glides instead of twitching.
"""

from .config import defaults


class AnimationState:
    """
    Three smoothly animated plane parameters.

    Attributes:
        sway (float): Sideways shift added to every node's X.
        tilt (float): Height gained per unit of X (rolls the plane).
        bend (float): Height change from front to back (bends the plane).
        blend (float): Fraction of the remaining gap covered per tick.
    """

    def __init__(self, blend=None):
        self.blend = defaults.ANIM_BLEND if blend is None else blend
        self.sway = 0.0
        self.tilt = 0.0
        self.bend = 0.0

    def reset(self):
        self.sway = 0.0
        self.tilt = 0.0
        self.bend = 0.0

    def advance(self, target_sway, target_tilt, target_bend):
        """Move every parameter one tick closer to its target."""
        self.sway += self.blend * (target_sway - self.sway)
        self.tilt += self.blend * (target_tilt - self.tilt)
        self.bend += self.blend * (target_bend - self.bend)

    def __repr__(self):
        return (
            f"AnimationState(sway={self.sway:.3f}, tilt={self.tilt:.3f}, "
            f"bend={self.bend:.3f})"
        )
