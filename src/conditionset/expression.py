"""A single (name, operator, operand) condition expression."""

from __future__ import annotations

from dataclasses import dataclass

from conditionset.operators import Operator, lookup


@dataclass(frozen=True)
class Expression:
    """One operator application against a named condition.

    An empty ``name`` is valid: the ``never`` shorthand produces
    ``"" != 0``, which can never be satisfied because a missing
    condition always reads as 0.
    """

    name: str
    operator: Operator
    operand: int

    def evaluate(self, current: int) -> int:
        """Apply the bound operator to the condition's current value."""
        return self.operator.apply(current, self.operand)

    @classmethod
    def from_tokens(cls, name: str, op: str, operand: int) -> Expression | None:
        """Build an expression from raw tokens, or None if ``op`` is unknown."""
        operator = lookup(op)
        if operator is None:
            return None
        return cls(name=name, operator=operator, operand=operand)
