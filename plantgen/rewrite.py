"""
Generation-by-generation rewriting of symbol sequences.

The engine follows an enumerator protocol: a step taken while the
sequence is empty (after construction, reset, or an erasing generation)
yields the axiom, every other step expands the current sequence once. Expansion rebuilds a new tuple left to right from
the previous generation, so symbols inserted during a step are only
eligible for expansion in the next step.
"""

import logging
from collections.abc import Iterable

import numpy as np

from plantgen.symbols import ProductionTable, Symbol, SymbolSequence, as_sequence

_LOGGER = logging.getLogger(__name__)


class RewriteEngine:
    """
    Stochastic L-system rewriter.

    Each occurrence of a symbol with several alternatives draws its own
    alternative uniformly from the injected random generator.

    Attributes:
        table: Production table consulted on every expansion step
    """

    def __init__(
        self,
        axiom: Iterable[Symbol],
        table: ProductionTable,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._axiom = as_sequence(axiom)
        if not self._axiom:
            raise ValueError("Axiom must contain at least one symbol")
        self.table = table
        self._rng = rng if rng is not None else np.random.default_rng()
        self._current: SymbolSequence = ()
        self._generation = -1
        self._at_fixpoint = False

    @property
    def axiom(self) -> SymbolSequence:
        return self._axiom

    @property
    def current(self) -> SymbolSequence:
        """The active sequence; empty until the bootstrap step."""
        return self._current

    @property
    def generation(self) -> int:
        """Number of expanding steps since the last bootstrap (-1 before the first)."""
        return self._generation

    @property
    def at_fixpoint(self) -> bool:
        return self._at_fixpoint

    def reset(self) -> None:
        """Clear the current sequence so the next step reproduces the axiom."""
        self._current = ()
        self._generation = -1
        self._at_fixpoint = False

    def step(self) -> bool:
        """
        Advance one generation.

        Returns:
            True if the axiom was bootstrapped or at least one symbol was
            substituted; False if the sequence is a fixpoint
        """
        # An empty sequence, including one emptied by erasing rules, re-seeds
        if not self._current:
            self._current = self._axiom
            self._generation = 0
            self._at_fixpoint = False
            return True

        output: list[Symbol] = []
        expanded = False
        for symbol in self._current:
            alternatives = self.table.alternatives(symbol)
            if not alternatives:
                output.append(symbol)
                continue
            if len(alternatives) == 1:
                choice = 0
            else:
                choice = int(self._rng.integers(len(alternatives)))
            output.extend(alternatives[choice])
            expanded = True

        if not expanded:
            self._at_fixpoint = True
            return False

        self._current = tuple(output)
        self._generation += 1
        self._at_fixpoint = False
        _LOGGER.debug(
            "generation %d: %d symbols", self._generation, len(self._current)
        )
        return True

    def iterate(self, n: int) -> SymbolSequence:
        """
        Step exactly n + 1 times: one bootstrap plus n expansions.

        Steps past the fixpoint are no-ops.

        Args:
            n: Number of expansion steps (nonnegative)

        Returns:
            The current sequence after stepping
        """
        if n < 0:
            raise ValueError("Iteration count must be nonnegative")
        for _ in range(int(n) + 1):
            self.step()
        return self._current


def expand(
    axiom: Iterable[Symbol],
    table: ProductionTable,
    iterations: int,
    rng: np.random.Generator | None = None,
) -> SymbolSequence:
    """Expand an axiom with a fresh engine and return the final sequence."""
    return RewriteEngine(axiom, table, rng).iterate(iterations)
