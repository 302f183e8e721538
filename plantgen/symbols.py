"""
Symbols, symbol sequences and production tables.

A symbol is a single character. Letters name grammar variables and drawing
commands; ``+ - a c l r`` are turns and ``[ ]`` open and close branches.
A SymbolSequence is an immutable tuple of symbols, so every generation of
the rewrite engine is a fresh value.

Rule texts look like::

    X=F[+X]-X,F[-X]+X

Each comma-separated body becomes one stochastic alternative for the key.
"""

import logging
import re
from collections.abc import Iterable, Iterator

_LOGGER = logging.getLogger(__name__)

Symbol = str
SymbolSequence = tuple[Symbol, ...]

BRANCH_OPEN = "["
BRANCH_CLOSE = "]"

_BODY = r"[-+a-zA-Z\[\]]+"
RULE_PATTERN = re.compile(
    rf"\s*([a-zA-Z])\s*=\s*({_BODY}(?:\s*,\s*{_BODY})*)\s*"
)


class RuleError(ValueError):
    """A production rule that cannot be installed."""


def as_sequence(symbols: Iterable[Symbol]) -> SymbolSequence:
    """
    Convert a string or iterable of symbols into a SymbolSequence.

    Raises:
        RuleError: If an element is not a single character
    """
    sequence = tuple(symbols)
    for symbol in sequence:
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise RuleError(f"Symbol must be a single character, got {symbol!r}")
    return sequence


def parse_rule(text: str) -> tuple[Symbol, list[SymbolSequence]] | None:
    """
    Parse a single rule text.

    Args:
        text: Rule text such as ``"F=FF"`` or ``"X=F[+X],F[-X]"``

    Returns:
        (symbol, alternatives), or None if the text is malformed
    """
    match = RULE_PATTERN.fullmatch(text)
    if match is None:
        return None
    symbol = match.group(1)
    alternatives = [
        as_sequence(body.strip()) for body in match.group(2).split(",")
    ]
    return symbol, alternatives


class ProductionTable:
    """
    Mapping from a symbol to its ordered replacement alternatives.

    A symbol with more than one alternative is a stochastic rule: the
    rewrite engine draws one alternative per occurrence.
    """

    def __init__(self) -> None:
        self._rules: dict[Symbol, tuple[SymbolSequence, ...]] = {}

    @classmethod
    def from_rules(cls, rules: Iterable[str]) -> "ProductionTable":
        """
        Build a table from rule texts.

        Malformed texts are logged as warnings and skipped; the remaining
        rules are still installed.
        """
        table = cls()
        table.load_rules(rules)
        return table

    def load_rules(self, rules: Iterable[str]) -> int:
        """Parse and install rule texts. Returns the number installed."""
        installed = 0
        for text in rules:
            parsed = parse_rule(text)
            if parsed is None:
                _LOGGER.warning(
                    "The rule %r could not be parsed. "
                    "Expected something like 'A=B+C[D]'.",
                    text,
                )
                continue
            symbol, alternatives = parsed
            self.insert_rule(symbol, alternatives)
            installed += 1
        return installed

    def insert_rule(
        self, symbol: Symbol, alternatives: Iterable[Iterable[Symbol]]
    ) -> None:
        """
        Install alternatives for a symbol.

        Alternatives for a symbol that already has a rule are appended.

        Raises:
            RuleError: If the symbol is not a single character or no
                alternatives are given
        """
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise RuleError(f"Rule key must be a single character, got {symbol!r}")
        bodies = tuple(as_sequence(alt) for alt in alternatives)
        if not bodies:
            raise RuleError(f"Rule for {symbol!r} has no production alternatives")
        self._rules[symbol] = self._rules.get(symbol, ()) + bodies

    def alternatives(self, symbol: Symbol) -> tuple[SymbolSequence, ...]:
        """Alternatives for a symbol; empty if it has no rule."""
        return self._rules.get(symbol, ())

    def clear(self) -> None:
        self._rules.clear()

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._rules)

    def __repr__(self) -> str:
        parts = [
            f"{symbol}={','.join(''.join(alt) for alt in alts)}"
            for symbol, alts in self._rules.items()
        ]
        return f"ProductionTable({parts!r})"
