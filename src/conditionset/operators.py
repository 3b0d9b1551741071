"""Operator table for condition expressions.

Every operator maps a condition's current value and an integer operand
to a new integer. Comparison operators return 1 (true) or 0 (false);
assignment operators return the value the condition should hold after
the expression is applied.

| token | result                     |
|-------|----------------------------|
| ==    | current == operand         |
| !=    | current != operand         |
| <     | current < operand          |
| >     | current > operand          |
| <=    | current <= operand         |
| >=    | current >= operand         |
| =     | operand                    |
| +=    | current + operand          |
| -=    | current - operand          |
| <?=   | min(current, operand)      |
| >?=   | max(current, operand)      |
"""

from __future__ import annotations

from enum import StrEnum


class Operator(StrEnum):
    """The closed set of operator tokens."""

    EQ = "=="
    NE = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    ASSIGN = "="
    ADD = "+="
    SUBTRACT = "-="
    CLAMP_DOWN = "<?="
    CLAMP_UP = ">?="

    def apply(self, current: int, operand: int) -> int:
        """Apply this operator to a condition's current value."""
        match self:
            case Operator.EQ:
                return int(current == operand)
            case Operator.NE:
                return int(current != operand)
            case Operator.LT:
                return int(current < operand)
            case Operator.GT:
                return int(current > operand)
            case Operator.LE:
                return int(current <= operand)
            case Operator.GE:
                return int(current >= operand)
            case Operator.ASSIGN:
                return operand
            case Operator.ADD:
                return current + operand
            case Operator.SUBTRACT:
                return current - operand
            case Operator.CLAMP_DOWN:
                return min(current, operand)
            case Operator.CLAMP_UP:
                return max(current, operand)

    @property
    def is_comparison(self) -> bool:
        """True for operators that test a value rather than assign one."""
        return self in COMPARISON_OPERATORS


COMPARISON_OPERATORS: frozenset[Operator] = frozenset(
    {Operator.EQ, Operator.NE, Operator.LT, Operator.GT, Operator.LE, Operator.GE}
)

# Token -> operator, built once from the enum
_BY_TOKEN: dict[str, Operator] = {op.value: op for op in Operator}


def lookup(token: str) -> Operator | None:
    """Return the operator for a token, or None if the token is unknown."""
    return _BY_TOKEN.get(token)
