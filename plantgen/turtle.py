"""
Turtle state for branch interpretation.

The turtle carries a position, an orientation, the current tube radius and
the texture V cursor. States are immutable values: every move or turn
returns a new state, so a saved branch state can never be changed by the
branch that follows it.

Local frame (before any rotation):
    right:   +x
    up:      +y (growth direction)
    forward: +z
"""

from dataclasses import dataclass, field

import numpy as np
from scipy.spatial.transform import Rotation

from plantgen.config import TEX_V_SCALE

RIGHT = np.array([1.0, 0.0, 0.0])
UP = np.array([0.0, 1.0, 0.0])
FORWARD = np.array([0.0, 0.0, 1.0])

# symbol -> (local axis, sign)
TURNS: dict[str, tuple[np.ndarray, float]] = {
    "+": (RIGHT, 1.0),
    "-": (RIGHT, -1.0),
    "a": (UP, 1.0),
    "c": (UP, -1.0),
    "l": (FORWARD, 1.0),
    "r": (FORWARD, -1.0),
}


@dataclass(frozen=True, eq=False)
class OrientationState:
    """
    Cursor state carried through interpretation.

    Attributes:
        position: Current position (3-vector)
        orientation: Rotation from the local frame to world space
        radius: Current tube radius
        tex_v: Current texture V coordinate
    """

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    orientation: Rotation = field(default_factory=Rotation.identity)
    radius: float = 1.0
    tex_v: float = 0.0

    @classmethod
    def initial(cls, radius: float) -> "OrientationState":
        """Upright state at the origin with the given base radius."""
        return cls(
            position=np.zeros(3),
            orientation=Rotation.identity(),
            radius=float(radius),
            tex_v=0.0,
        )

    @property
    def up(self) -> np.ndarray:
        """Local up axis in world space."""
        return self.orientation.apply(UP)

    def advance(self, segment_length: float, radius_decrease: float) -> "OrientationState":
        """
        Move one segment along the local up axis.

        The radius shrinks first; the texture V cursor then advances by an
        amount that grows with the segment length and with thinner tubes.
        """
        radius = self.radius * radius_decrease
        tex_v = self.tex_v + TEX_V_SCALE * (segment_length + segment_length / radius)
        position = self.position + segment_length * self.up
        return OrientationState(
            position=position,
            orientation=self.orientation,
            radius=radius,
            tex_v=tex_v,
        )

    def rotated(self, axis: np.ndarray, angle_deg: float) -> "OrientationState":
        """Rotate about a local axis by angle_deg degrees."""
        turn = Rotation.from_rotvec(axis * angle_deg, degrees=True)
        return OrientationState(
            position=self.position,
            orientation=self.orientation * turn,
            radius=self.radius,
            tex_v=self.tex_v,
        )


def turn_angle(
    nominal_deg: float, uncertainty_deg: float, rng: np.random.Generator
) -> float:
    """Nominal angle plus a fresh uniform jitter in [-u/2, u/2]."""
    half = 0.5 * uncertainty_deg
    return nominal_deg + float(rng.uniform(-half, half))


def apply_turn(
    state: OrientationState,
    symbol: str,
    nominal_deg: float,
    uncertainty_deg: float,
    rng: np.random.Generator,
) -> OrientationState:
    """
    Apply a turn symbol to a state.

    Args:
        state: Current turtle state
        symbol: One of ``+ - a c l r``
        nominal_deg: Nominal rotation angle
        uncertainty_deg: Jitter width
        rng: Random generator for the jitter draw

    Returns:
        The rotated state
    """
    axis, sign = TURNS[symbol]
    return state.rotated(axis, sign * turn_angle(nominal_deg, uncertainty_deg, rng))
