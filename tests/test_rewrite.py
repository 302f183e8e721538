"""
Tests for the rewrite engine.

These tests verify the bootstrap/expand/fixpoint protocol, the
insert-without-rescan behavior and seeded stochastic reproducibility.
"""

import numpy as np
import pytest

from plantgen.rewrite import RewriteEngine, expand
from plantgen.symbols import ProductionTable


def text(sequence: tuple[str, ...]) -> str:
    return "".join(sequence)


class TestBootstrap:
    """Tests for the first step after construction or reset."""

    def test_first_step_yields_axiom(self) -> None:
        """The first step reproduces the axiom and reports progress."""
        engine = RewriteEngine("X", ProductionTable.from_rules(["X=FX"]))
        assert engine.current == ()
        assert engine.step() is True
        assert text(engine.current) == "X"
        assert engine.generation == 0

    def test_reset_reproduces_axiom(self) -> None:
        """After reset, the next step yields the axiom again."""
        engine = RewriteEngine("X", ProductionTable.from_rules(["X=FX"]))
        engine.iterate(3)
        engine.reset()
        assert engine.current == ()
        assert engine.step() is True
        assert text(engine.current) == "X"

    def test_empty_axiom_rejected(self) -> None:
        """An empty axiom cannot be bootstrapped."""
        with pytest.raises(ValueError):
            RewriteEngine("", ProductionTable())


class TestExpansion:
    """Tests for deterministic rewriting."""

    def test_doubling(self) -> None:
        """F=FF applied twice gives four segments."""
        table = ProductionTable.from_rules(["F=FF"])
        assert text(expand("F", table, 2)) == "FFFF"

    def test_branching_rule_one_generation(self) -> None:
        """One generation of X=F[+X]-X."""
        table = ProductionTable.from_rules(["X=F[+X]-X"])
        assert text(expand("X", table, 1)) == "F[+X]-X"

    def test_inserted_symbols_not_rescanned(self) -> None:
        """Symbols produced in a step wait for the next step."""
        table = ProductionTable.from_rules(["A=AB", "B=A"])
        engine = RewriteEngine("A", table)
        generations = []
        for _ in range(5):
            engine.step()
            generations.append(text(engine.current))
        assert generations == ["A", "AB", "ABA", "ABAAB", "ABAABABA"]

    def test_symbols_without_rules_copied(self) -> None:
        """Unmatched symbols pass through unchanged."""
        table = ProductionTable.from_rules(["X=F"])
        assert text(expand("+X-[Y]", table, 1)) == "+F-[Y]"

    def test_zero_iterations_is_axiom(self) -> None:
        """iterate(0) performs only the bootstrap step."""
        table = ProductionTable.from_rules(["F=FF"])
        assert text(expand("F", table, 0)) == "F"

    def test_iterate_is_pure_for_deterministic_rules(self) -> None:
        """Identical inputs give identical sequences."""
        rules = ["F=FF", "X=F[[X]+X]-FX"]
        first = expand("X", ProductionTable.from_rules(rules), 4)
        second = expand("X", ProductionTable.from_rules(rules), 4)
        assert first == second

    def test_negative_iterations_rejected(self) -> None:
        """A negative iteration count is an error."""
        engine = RewriteEngine("F", ProductionTable())
        with pytest.raises(ValueError):
            engine.iterate(-1)

    def test_erasing_rule_removes_symbol(self) -> None:
        """An erasing alternative removes the symbol."""
        table = ProductionTable()
        table.insert_rule("X", [""])
        assert text(expand("FXF", table, 1)) == "FF"

    def test_emptied_sequence_reseeds_axiom(self) -> None:
        """A step after the sequence is erased bootstraps the axiom again."""
        table = ProductionTable()
        table.insert_rule("X", [""])
        engine = RewriteEngine("X", table)

        assert engine.step() is True
        assert engine.current == ("X",)
        assert engine.step() is True
        assert engine.current == ()
        assert engine.generation == 1

        assert engine.step() is True
        assert engine.current == ("X",)
        assert engine.generation == 0
        assert not engine.at_fixpoint


class TestFixpoint:
    """Tests for behavior once no rule applies."""

    def test_step_without_rules_returns_false(self) -> None:
        """Without applicable rules the sequence is a fixpoint."""
        engine = RewriteEngine("F+F", ProductionTable.from_rules(["X=F"]))
        engine.step()
        assert engine.step() is False
        assert text(engine.current) == "F+F"
        assert engine.at_fixpoint

    def test_fixpoint_is_idempotent(self) -> None:
        """Further steps keep returning False and change nothing."""
        engine = RewriteEngine("X", ProductionTable.from_rules(["X=F+F"]))
        engine.iterate(1)
        assert text(engine.current) == "F+F"
        before = engine.current
        assert engine.step() is False
        assert engine.step() is False
        assert engine.current == before
        assert engine.generation == 1

    def test_iterate_past_fixpoint_is_harmless(self) -> None:
        """Extra iterations past the fixpoint are no-ops."""
        table = ProductionTable.from_rules(["X=F+F"])
        assert text(expand("X", table, 10)) == "F+F"


class TestStochasticRules:
    """Tests for rules with several alternatives."""

    RULES = ["X=FX,F-X"]

    def test_seeded_runs_reproduce(self) -> None:
        """A fixed seed reproduces the sequence."""
        table = ProductionTable.from_rules(self.RULES)
        first = expand("X", table, 6, np.random.default_rng(123))
        second = expand("X", table, 6, np.random.default_rng(123))
        assert first == second

    def test_both_alternatives_observed(self) -> None:
        """Across seeds, both alternatives get chosen."""
        table = ProductionTable.from_rules(self.RULES)
        outcomes = {
            text(expand("X", table, 1, np.random.default_rng(seed)))
            for seed in range(50)
        }
        assert outcomes == {"FX", "F-X"}

    def test_each_occurrence_draws_independently(self) -> None:
        """Occurrences in the same generation can pick different alternatives."""
        table = ProductionTable.from_rules(["X=A,B"])
        rng = np.random.default_rng(0)
        mixed = False
        for _ in range(20):
            result = set(text(expand("XXXXXXXX", table, 1, rng)))
            if result == {"A", "B"}:
                mixed = True
                break
        assert mixed

    def test_forced_choice_with_injected_generator(self) -> None:
        """An injected generator decides which alternative is used."""

        class LastChoice:
            def integers(self, high: int) -> int:
                return high - 1

        table = ProductionTable.from_rules(["X=A,B,C"])
        engine = RewriteEngine("XX", table, LastChoice())
        assert text(engine.iterate(1)) == "CC"
