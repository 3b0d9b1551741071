"""Tests for the operator table and Expression."""

from __future__ import annotations

import pytest

from conditionset import Expression, Operator, lookup
from conditionset.operators import COMPARISON_OPERATORS

# ---------------------------------------------------------------------------
# Operator table
# ---------------------------------------------------------------------------


class TestOperatorTable:
    @pytest.mark.parametrize(
        ("token", "current", "operand", "expected"),
        [
            ("==", 3, 3, 1),
            ("==", 3, 4, 0),
            ("!=", 3, 4, 1),
            ("!=", 0, 0, 0),
            ("<", 2, 3, 1),
            ("<", 3, 3, 0),
            (">", 4, 3, 1),
            (">", 3, 3, 0),
            ("<=", 3, 3, 1),
            ("<=", 4, 3, 0),
            (">=", 3, 3, 1),
            (">=", 2, 3, 0),
            ("=", 17, 5, 5),
            ("+=", 17, 5, 22),
            ("-=", 17, 5, 12),
            ("-=", 0, 1, -1),
            ("<?=", 5, 3, 3),
            ("<?=", 2, 3, 2),
            (">?=", 5, 3, 5),
            (">?=", 2, 3, 3),
        ],
    )
    def test_apply_matches_table(
        self, token: str, current: int, operand: int, expected: int
    ) -> None:
        op = lookup(token)
        assert op is not None
        assert op.apply(current, operand) == expected

    def test_every_token_is_recognized(self) -> None:
        tokens = ["==", "!=", "<", ">", "<=", ">=", "=", "+=", "-=", "<?=", ">?="]
        assert [lookup(t) for t in tokens] == list(Operator)

    @pytest.mark.parametrize("token", ["", "===", "=>", "+", "*=", "and", "<?", "?="])
    def test_unknown_tokens(self, token: str) -> None:
        assert lookup(token) is None

    def test_lookup_is_stable(self) -> None:
        assert lookup("+=") is lookup("+=")
        assert lookup("+=") is Operator.ADD

    def test_comparison_results_are_zero_or_one(self) -> None:
        for op in COMPARISON_OPERATORS:
            for current in (-5, 0, 5):
                assert op.apply(current, 0) in (0, 1)

    def test_is_comparison(self) -> None:
        assert Operator.GE.is_comparison
        assert Operator.NE.is_comparison
        assert not Operator.ASSIGN.is_comparison
        assert not Operator.CLAMP_UP.is_comparison

    def test_operator_is_its_token(self) -> None:
        assert Operator.CLAMP_DOWN == "<?="
        assert str(Operator.SUBTRACT) == "-="


# ---------------------------------------------------------------------------
# Expression
# ---------------------------------------------------------------------------


class TestExpression:
    def test_evaluate_uses_operand(self) -> None:
        expr = Expression("gold", Operator.ADD, 5)
        assert expr.evaluate(10) == 15

    def test_from_tokens(self) -> None:
        expr = Expression.from_tokens("gold", ">=", 100)
        assert expr == Expression("gold", Operator.GE, 100)

    def test_from_tokens_unknown_operator(self) -> None:
        assert Expression.from_tokens("gold", "=>", 100) is None

    def test_is_immutable(self) -> None:
        expr = Expression("gold", Operator.ADD, 5)
        with pytest.raises(AttributeError):
            expr.operand = 6  # type: ignore[misc]

    def test_empty_name_is_valid(self) -> None:
        never = Expression("", Operator.NE, 0)
        assert never.name == ""
        assert never.evaluate(0) == 0
