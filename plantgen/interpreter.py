"""
Turtle interpretation of symbol sequences into branched tube meshes.

Alphabet:
    F: Advance one segment, taper the radius, emit a ring and side wall
    + -: Turn about the local right axis
    a c: Turn about the local up axis
    l r: Turn about the local forward axis
    [: Open a nested branch from the current state
    ]: Cap the current branch and resume the enclosing one
    anything else: ignored

Nested branches are tracked with an explicit stack of saved states, so the
nesting depth is limited by max_branch_depth rather than by the Python
call stack. The end of the sequence caps every branch still open.
"""

import logging
from collections.abc import Sequence

import numpy as np

from plantgen.config import BuildParams
from plantgen.mesh import MeshBuilder, TriangleMesh
from plantgen.symbols import BRANCH_CLOSE, BRANCH_OPEN, Symbol
from plantgen.turtle import TURNS, OrientationState, apply_turn

_LOGGER = logging.getLogger(__name__)

SEGMENT = "F"


class BranchDepthError(RuntimeError):
    """Branch nesting exceeded the configured maximum depth."""

    def __init__(self, depth: int, limit: int, index: int) -> None:
        super().__init__(
            f"Branch depth {depth} exceeds limit {limit} at symbol index {index}"
        )
        self.depth = depth
        self.limit = limit
        self.index = index


class BranchInterpreter:
    """
    Builds a tube mesh from a symbol sequence.

    Args:
        params: Build parameters (angles, radius, segment length, faces)
        rng: Random generator for rotation jitter
    """

    def __init__(
        self, params: BuildParams, rng: np.random.Generator | None = None
    ) -> None:
        self.params = params
        self.rng = rng if rng is not None else np.random.default_rng(params.seed)

    def build(self, sequence: Sequence[Symbol]) -> TriangleMesh:
        """
        Interpret a whole sequence into a fresh mesh.

        The turtle starts at the origin, upright, with the base radius.
        """
        mesh = MeshBuilder(self.params.face_count)
        state = OrientationState.initial(self.params.base_radius)
        self.generate_branch(sequence, 0, state, None, mesh)
        result = mesh.finalize()
        _LOGGER.debug(
            "built mesh from %d symbols: %d vertices, %d triangles",
            len(sequence),
            result.vertex_count,
            result.triangle_count,
        )
        return result

    def generate_branch(
        self,
        sequence: Sequence[Symbol],
        start_index: int,
        state: OrientationState,
        previous_ring: int | None,
        mesh: MeshBuilder,
    ) -> int:
        """
        Interpret symbols from start_index until this branch closes.

        Args:
            sequence: Symbols to interpret
            start_index: First symbol of the branch
            state: Turtle state at the start of the branch
            previous_ring: First vertex of the ring the branch grows from;
                None emits a base ring at state first
            mesh: Shared output buffer

        Returns:
            Index just past the ``]`` that closed this branch, or
            len(sequence) if the sequence ended first

        Raises:
            BranchDepthError: If nesting exceeds params.max_branch_depth
        """
        params = self.params
        limit = params.max_branch_depth

        if previous_ring is None:
            previous_ring = mesh.emit_ring(state, None)

        # Saved (state, ring) of each enclosing branch opened in this call
        stack: list[tuple[OrientationState, int]] = []

        index = start_index
        while index < len(sequence):
            symbol = sequence[index]
            if symbol == SEGMENT:
                state = state.advance(params.segment_length, params.radius_decrease)
                previous_ring = mesh.emit_ring(state, previous_ring)
            elif symbol in TURNS:
                state = apply_turn(
                    state,
                    symbol,
                    params.rotation_angle,
                    params.rotation_uncertainty,
                    self.rng,
                )
            elif symbol == BRANCH_OPEN:
                if limit is not None and len(stack) >= limit:
                    raise BranchDepthError(len(stack) + 1, limit, index)
                stack.append((state, previous_ring))
            elif symbol == BRANCH_CLOSE:
                mesh.emit_cap(state, previous_ring)
                if not stack:
                    return index + 1
                state, previous_ring = stack.pop()
            index += 1

        # End of sequence closes this branch and every branch left open
        mesh.emit_cap(state, previous_ring)
        while stack:
            state, previous_ring = stack.pop()
            mesh.emit_cap(state, previous_ring)
        return len(sequence)
