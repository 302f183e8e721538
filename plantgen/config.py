"""
Configuration and constants for plant mesh generation.

This module defines the build parameters consumed by the rewrite engine
and the branch interpreter, along with the defaults of the generator.

Build parameters:
    axiom: Starting symbol sequence
    rules: Rule texts of the form ``X=F[+X]-X,F[-X]+X``
    iterations: Number of expansion steps after the bootstrap step
    rotation_angle: Nominal turn per rotation symbol (degrees)
    rotation_uncertainty: Width of the uniform jitter added to each turn
    base_radius: Tube radius at the base of the plant
    radius_decrease: Factor applied to the radius at every segment
    segment_length: Length of each segment
    face_count: Number of faces on each ring
    seed: Seed for the random source (None = fresh entropy)
    max_branch_depth: Maximum bracket nesting (None = unbounded)
"""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Texture V advance per unit of (segment + segment / radius)
TEX_V_SCALE = 0.0625

DEFAULT_AXIOM = "X"
DEFAULT_RULES = ("F=FF", "X=F[[X]+X]-FX")


class BuildParams(BaseModel):
    """Validated parameters for one plant build."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    axiom: str = Field(
        default=DEFAULT_AXIOM, min_length=1, description="Initial symbol sequence"
    )
    rules: tuple[str, ...] = Field(
        default=DEFAULT_RULES, description="Production rule texts"
    )
    iterations: int = Field(
        default=1, ge=0, description="Expansion steps after the bootstrap step"
    )
    rotation_angle: float = Field(
        default=22.5, description="Nominal rotation per turn symbol (degrees)"
    )
    rotation_uncertainty: float = Field(
        default=0.0, ge=0.0, description="Width of the uniform angle jitter (degrees)"
    )
    base_radius: float = Field(
        default=2.0, gt=0.0, description="Trunk radius at the base of the plant"
    )
    radius_decrease: float = Field(
        default=0.9, gt=0.0, le=1.0, description="Radius factor applied per segment"
    )
    segment_length: float = Field(
        default=0.5, gt=0.0, description="Length of each branch segment"
    )
    face_count: int = Field(default=16, ge=3, description="Faces per vertex ring")
    seed: int | None = Field(default=None, description="Random seed")
    max_branch_depth: int | None = Field(
        default=1024, ge=1, description="Maximum bracket nesting depth"
    )

    @field_validator("iterations", mode="before")
    @classmethod
    def _truncate_iterations(cls, value: object) -> object:
        # Only the integer part counts as expansion steps
        if isinstance(value, float) and value >= 0:
            return int(value)
        return value

    @classmethod
    def bush(cls, **overrides: object) -> "BuildParams":
        """A dense bush with doubled internodes."""
        values: dict[str, object] = {
            "axiom": "X",
            "rules": ("F=FF", "X=F[+X][-X]FX"),
            "iterations": 4,
            "rotation_angle": 25.7,
            "base_radius": 0.6,
            "radius_decrease": 0.97,
            "segment_length": 0.3,
            "face_count": 8,
        }
        values.update(overrides)
        return cls.model_validate(values)

    @classmethod
    def weed(cls, **overrides: object) -> "BuildParams":
        """A tall weed that twists about its own axis between branches."""
        values: dict[str, object] = {
            "axiom": "F",
            "rules": ("F=F[+F]lF[-F][aF]",),
            "iterations": 3,
            "rotation_angle": 28.0,
            "base_radius": 0.4,
            "radius_decrease": 0.95,
            "segment_length": 0.4,
            "face_count": 6,
        }
        values.update(overrides)
        return cls.model_validate(values)

    @classmethod
    def stochastic(cls, **overrides: object) -> "BuildParams":
        """A stochastic plant: each X picks one of three branching patterns."""
        values: dict[str, object] = {
            "axiom": "X",
            "rules": (
                "F=FF",
                "X=F[+X]F[-X]+X,F[-X]F[+X]-X,F[aX][cX]FX",
            ),
            "iterations": 4,
            "rotation_angle": 22.5,
            "rotation_uncertainty": 10.0,
            "base_radius": 0.8,
            "radius_decrease": 0.96,
            "segment_length": 0.25,
            "face_count": 8,
            "seed": 7,
        }
        values.update(overrides)
        return cls.model_validate(values)


def load_params(path: str | Path) -> BuildParams:
    """
    Load build parameters from a JSON file.

    Keys not present in the file keep their defaults.

    Args:
        path: Path to a JSON object with BuildParams fields

    Returns:
        Validated BuildParams

    Raises:
        pydantic.ValidationError: If a value is out of range or unknown
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return BuildParams.model_validate(data)
