"""Condition sets: parsing, serialization and evaluation.

A ConditionSet is a tree. Each node holds an ordered list of leaf
expressions and an ordered list of nested sets, combined with either
AND or OR semantics. The same tree can be tested (read-only boolean
evaluation) or applied (mutating the caller's mapping in place).

Grammar, one data-file line per entry::

    never                   # can never be satisfied
    and | or                # opens a nested group from the child lines
    <name> <op> <value>     # op: == != < > <= >= = += -= <?= >?=
    not|has|set|clear <name>
    <name> ++|--

Example::

    conditions
        has "visited Earth"
        or
            reputation >= 10
            random < 25

Malformed lines are reported through the node's trace and dropped;
building a set never raises.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from conditionset.expression import Expression
from conditionset.operators import Operator
from conditionset.randomness import RandomSource, default_source

if TYPE_CHECKING:
    from conditionset.datafile.reader import DataNode

logger = logging.getLogger(__name__)

RANDOM_CONDITION = "random"
RANDOM_RANGE = 100

UNRECOGNIZED = "Unrecognized condition expression:"

# Two-token shorthands keyed on the first token: keyword -> (op, operand)
_PREFIX_SHORTHANDS: dict[str, tuple[Operator, int]] = {
    "not": (Operator.EQ, 0),
    "has": (Operator.NE, 0),
    "set": (Operator.ASSIGN, 1),
    "clear": (Operator.ASSIGN, 0),
}

# Two-token shorthands keyed on the second token: suffix -> (op, operand)
_SUFFIX_SHORTHANDS: dict[str, tuple[Operator, int]] = {
    "++": (Operator.ADD, 1),
    "--": (Operator.SUBTRACT, 1),
}


class Writer(Protocol):
    """The part of DataWriter that ``save`` needs."""

    def write(self, *tokens: str | int) -> None: ...

    def begin_child(self) -> None: ...

    def end_child(self) -> None: ...


# ------------------------------------------------------------------ #
# Mapping access
# ------------------------------------------------------------------ #


def read_condition(conditions: Mapping[str, int], name: str) -> int:
    """Read a condition's value, defaulting to 0. Never inserts."""
    return conditions.get(name, 0)


def update_condition(
    conditions: MutableMapping[str, int],
    name: str,
    fn: Callable[[int], int],
) -> int:
    """Read a condition (inserting 0 if absent), then store ``fn(value)``."""
    current = conditions.setdefault(name, 0)
    value = fn(current)
    conditions[name] = value
    return value


# ------------------------------------------------------------------ #
# ConditionSet
# ------------------------------------------------------------------ #


@dataclass
class ConditionSet:
    """A tree of condition expressions under one AND/OR combinator."""

    is_or: bool = False
    expressions: list[Expression] = field(default_factory=list)
    children: list[ConditionSet] = field(default_factory=list)

    @classmethod
    def from_node(cls, node: DataNode) -> ConditionSet:
        """Build a set from the children of ``node``."""
        conditions = cls()
        conditions.load(node)
        return conditions

    # ---------------------------------------------------------------- #
    # Construction
    # ---------------------------------------------------------------- #

    def load(self, node: DataNode) -> None:
        """Load a set of conditions from the children of this node."""
        self.is_or = node.token(0) == "or"
        for child in node:
            self.add(child)
        logger.debug(
            "Loaded %s set: %d expression(s), %d nested set(s)",
            "or" if self.is_or else "and",
            len(self.expressions),
            len(self.children),
        )

    def add(self, node: DataNode) -> None:
        """Read a single condition line. Unrecognized lines are traced and dropped."""
        size = node.size()
        if size == 2:
            if not self.add_unary(node.token(0), node.token(1)):
                node.print_trace(UNRECOGNIZED)
        elif size == 3:
            if not self.add_binary(node.token(0), node.token(1), node.value(2)):
                node.print_trace(UNRECOGNIZED)
        elif size == 1 and node.token(0) == "never":
            self.expressions.append(Expression("", Operator.NE, 0))
        elif size == 1 and node.token(0) in ("and", "or"):
            nested = ConditionSet()
            nested.load(node)
            self.children.append(nested)
        else:
            node.print_trace(UNRECOGNIZED)

    def add_unary(self, first: str, second: str) -> bool:
        """Add a two-token shorthand line. Returns False if it is not one.

        Keyword forms (``not x``, ``has x``, ``set x``, ``clear x``) are
        checked before suffix forms (``x ++``, ``x --``).
        """
        if first in _PREFIX_SHORTHANDS:
            op, operand = _PREFIX_SHORTHANDS[first]
            self.expressions.append(Expression(second, op, operand))
        elif second in _SUFFIX_SHORTHANDS:
            op, operand = _SUFFIX_SHORTHANDS[second]
            self.expressions.append(Expression(first, op, operand))
        else:
            return False
        return True

    def add_binary(self, name: str, op: str, value: int | float) -> bool:
        """Add a ``name op value`` line. Returns False on a bad operator or value."""
        if isinstance(value, float) and not math.isfinite(value):
            return False
        expression = Expression.from_tokens(name, op, int(value))
        if expression is None:
            return False
        self.expressions.append(expression)
        return True

    # ---------------------------------------------------------------- #
    # Serialization
    # ---------------------------------------------------------------- #

    def save(self, out: Writer) -> None:
        """Write this set in canonical ``name op value`` form."""
        for expression in self.expressions:
            out.write(expression.name, expression.operator.value, expression.operand)
        for child in self.children:
            out.write("or" if child.is_or else "and")
            out.begin_child()
            child.save(out)
            out.end_child()

    # ---------------------------------------------------------------- #
    # Evaluation
    # ---------------------------------------------------------------- #

    def is_empty(self) -> bool:
        """True if there are no expressions and no nested sets."""
        return not self.expressions and not self.children

    def test(self, conditions: Mapping[str, int], rng: RandomSource | None = None) -> bool:
        """Check whether the given condition values satisfy this set.

        An AND set stops at the first false member, an OR set at the
        first true one. Expressions are scanned before nested sets, in
        declaration order, so ``random`` draws happen in a fixed order.
        """
        for expression in self.expressions:
            if expression.name == RANDOM_CONDITION:
                source = rng if rng is not None else default_source()
                value = source.int(RANDOM_RANGE)
            else:
                value = read_condition(conditions, expression.name)
            result = bool(expression.evaluate(value))
            if result == self.is_or:
                return result
        for child in self.children:
            result = child.test(conditions, rng)
            if result == self.is_or:
                return result
        # Nothing disproved an AND set / nothing proved an OR set
        return not self.is_or

    def apply(self, conditions: MutableMapping[str, int]) -> None:
        """Apply every expression to the mapping, in place.

        Missing conditions are created with a value of 0 before the
        operator runs. Nested sets are applied unconditionally; their
        and/or combinator has no meaning here.
        """
        for expression in self.expressions:
            update_condition(conditions, expression.name, expression.evaluate)
        for child in self.children:
            child.apply(conditions)

    def all_expressions(self) -> list[Expression]:
        """All expressions in this set and its nested sets, depth first."""
        found = list(self.expressions)
        for child in self.children:
            found.extend(child.all_expressions())
        return found
