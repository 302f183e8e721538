"""
Full plant build: rule parsing, rewriting and mesh interpretation.

A build is one synchronous call from rewrite through mesh assembly. Every
call allocates fresh buffers; nothing is shared between builds. One random
generator, seeded from the build parameters, is consumed first by the
rewrite engine and then by the interpreter, so a fixed seed reproduces the
sequence and the mesh exactly.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from plantgen.config import BuildParams
from plantgen.interpreter import BranchInterpreter
from plantgen.mesh import TriangleMesh
from plantgen.rewrite import RewriteEngine
from plantgen.symbols import ProductionTable, Symbol, SymbolSequence

_LOGGER = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """
    Complete record of one build.

    Contains:
    - params: Parameters used for the build
    - sequence: Final symbol sequence after rewriting
    - generations: Expansion steps that actually changed the sequence
    - mesh: Finalized triangle mesh
    """

    params: BuildParams
    sequence: SymbolSequence
    generations: int
    mesh: TriangleMesh

    @property
    def sequence_text(self) -> str:
        return "".join(self.sequence)

    def get_scalar_summary(self) -> dict[str, float]:
        """Sequence statistics merged with the mesh summary."""
        summary: dict[str, float] = {
            "Symbols": len(self.sequence),
            "Generations": self.generations,
            "Segments": self.sequence.count("F"),
            "Branches": self.sequence.count("["),
        }
        summary.update(self.mesh.get_scalar_summary())
        return summary

    def print_summary(self) -> None:
        """Print a formatted summary table to stdout."""
        summary = self.get_scalar_summary()
        print("\n" + "=" * 40)
        print("BUILD SUMMARY")
        print("=" * 40)
        for key, value in summary.items():
            if isinstance(value, int):
                print(f"{key:20s}: {value:>10d}")
            else:
                print(f"{key:20s}: {value:>10.3f}")
        print("=" * 40)


def _make_rng(params: BuildParams, rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng(params.seed)


def rebuild(
    axiom: Iterable[Symbol],
    table: ProductionTable,
    params: BuildParams,
    rng: np.random.Generator | None = None,
) -> TriangleMesh:
    """
    Rewrite the axiom and interpret the result into a mesh.

    Args:
        axiom: Initial symbol sequence
        table: Production rules
        params: Build parameters; params.axiom and params.rules are not used
        rng: Optional random generator (defaults to one seeded by params.seed)

    Returns:
        Freshly allocated TriangleMesh
    """
    rng = _make_rng(params, rng)
    engine = RewriteEngine(axiom, table, rng)
    sequence = engine.iterate(params.iterations)
    return BranchInterpreter(params, rng).build(sequence)


def generate(
    params: BuildParams, rng: np.random.Generator | None = None
) -> BuildResult:
    """
    Build a plant from the axiom and rule texts stored in params.

    Malformed rule texts are logged and skipped.
    """
    rng = _make_rng(params, rng)
    table = ProductionTable.from_rules(params.rules)
    engine = RewriteEngine(params.axiom, table, rng)
    sequence = engine.iterate(params.iterations)
    _LOGGER.debug(
        "rewrote %r with %d rules to %d symbols",
        params.axiom,
        len(table),
        len(sequence),
    )
    mesh = BranchInterpreter(params, rng).build(sequence)
    return BuildResult(
        params=params,
        sequence=sequence,
        generations=engine.generation,
        mesh=mesh,
    )


class PlantGenerator:
    """
    Host-side adapter that keeps the latest build for a parameter set.

    The host calls attach() once and update() whenever a parameter changes;
    the generator never rebuilds on its own.
    """

    def __init__(self, params: BuildParams | None = None) -> None:
        self.params = params if params is not None else BuildParams()
        self.result: BuildResult | None = None
        self.build_count = 0

    @property
    def mesh(self) -> TriangleMesh | None:
        return self.result.mesh if self.result is not None else None

    def attach(self) -> BuildResult:
        """Build once for the current parameters."""
        return self.rebuild()

    def rebuild(self) -> BuildResult:
        self.result = generate(self.params)
        self.build_count += 1
        return self.result

    def update(self, **changes: object) -> BuildResult:
        """
        Apply parameter changes and rebuild if anything changed.

        Raises:
            pydantic.ValidationError: If a changed value is invalid
        """
        params = BuildParams.model_validate({**self.params.model_dump(), **changes})
        if params == self.params and self.result is not None:
            return self.result
        self.params = params
        return self.rebuild()
