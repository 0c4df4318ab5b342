"""
Unit tests for the logic expression evaluator and visibility conditions.
"""

import pytest

from json_renderer.core.visibility import (
    AuthState,
    VisibilityContext,
    evaluate_logic_expression,
    evaluate_visibility,
)
from json_renderer.specs import AndExpr, AuthCondition, EqExpr, NotExpr, PathExpr, PathRef


class TestLogicExpressions:
    """Tests for evaluate_logic_expression."""

    def test_path_truthiness(self, ctx):
        """Test path leaves are truthy checks."""
        assert evaluate_logic_expression({"path": "/flags/on"}, ctx) is True
        assert evaluate_logic_expression({"path": "/flags/off"}, ctx) is False
        assert evaluate_logic_expression({"path": "/flags/empty"}, ctx) is False
        assert evaluate_logic_expression({"path": "/missing"}, ctx) is False

    def test_and_or_not(self, ctx):
        """Test boolean combinators."""
        on = {"path": "/flags/on"}
        off = {"path": "/flags/off"}
        assert evaluate_logic_expression({"and": [on, on]}, ctx) is True
        assert evaluate_logic_expression({"and": [on, off]}, ctx) is False
        assert evaluate_logic_expression({"or": [off, on]}, ctx) is True
        assert evaluate_logic_expression({"or": [off, off]}, ctx) is False
        assert evaluate_logic_expression({"not": off}, ctx) is True

    def test_empty_and_or(self, ctx):
        """Test empty combinators follow all/any."""
        assert evaluate_logic_expression({"and": []}, ctx) is True
        assert evaluate_logic_expression({"or": []}, ctx) is False

    def test_eq_and_neq(self, ctx):
        """Test equality against resolved values."""
        assert evaluate_logic_expression({"eq": [{"path": "/user/name"}, "Ada"]}, ctx) is True
        assert evaluate_logic_expression({"neq": [{"path": "/user/name"}, "Ada"]}, ctx) is False
        assert evaluate_logic_expression({"eq": [{"path": "/count"}, "3"]}, ctx) is False

    @pytest.mark.parametrize(
        "left,right",
        [(1, 2), (2, 1), (3, 3), (-1.5, 0), (0, 0.0), (10, 9.99)],
    )
    def test_comparisons_strict_and_exclusive(self, ctx, left, right):
        """Test gt/lt are strict and exclusive with eq for numeric pairs."""
        gt = evaluate_logic_expression({"gt": [left, right]}, ctx)
        lt = evaluate_logic_expression({"lt": [left, right]}, ctx)
        eq = evaluate_logic_expression({"eq": [left, right]}, ctx)
        assert [gt, lt, eq].count(True) == 1
        assert evaluate_logic_expression({"gte": [left, right]}, ctx) == (gt or eq)
        assert evaluate_logic_expression({"lte": [left, right]}, ctx) == (lt or eq)

    @pytest.mark.parametrize("op", ["gt", "gte", "lt", "lte"])
    @pytest.mark.parametrize("operand", ["3", None, True, {"path": "/user/name"}, {"path": "/missing"}])
    def test_comparisons_false_for_non_numbers(self, ctx, op, operand):
        """Test every comparison is false when an operand is not a number."""
        assert evaluate_logic_expression({op: [operand, 3]}, ctx) is False
        assert evaluate_logic_expression({op: [3, operand]}, ctx) is False

    def test_comparison_reads_paths(self, ctx):
        """Test comparison operands resolve as dynamic values."""
        assert evaluate_logic_expression({"gte": [{"path": "/user/age"}, 18]}, ctx) is True

    def test_unknown_shape_is_false(self, ctx, caplog):
        """Test unknown expressions evaluate false with a warning."""
        assert evaluate_logic_expression({"xor": [1, 2]}, ctx) is False
        assert "Unknown logic expression" in caplog.text

    def test_malformed_operands_are_false(self, ctx):
        """Test malformed operator arguments evaluate false."""
        assert evaluate_logic_expression({"eq": [1]}, ctx) is False
        assert evaluate_logic_expression({"and": "nope"}, ctx) is False

    def test_spec_models(self, ctx):
        """Test pydantic expression models evaluate like their JSON form."""
        expr = AndExpr(
            all_of=[
                PathExpr(path="/flags/on"),
                NotExpr(negated=EqExpr(eq=(PathRef(path="/count"), 4))),
            ]
        )
        assert evaluate_logic_expression(expr, ctx) is True


class TestVisibility:
    """Tests for evaluate_visibility."""

    def test_none_is_visible(self, ctx):
        """Test an absent condition is visible."""
        assert evaluate_visibility(None, ctx) is True
        assert evaluate_visibility(None, VisibilityContext()) is True

    def test_booleans(self, ctx):
        """Test literal booleans."""
        assert evaluate_visibility(True, ctx) is True
        assert evaluate_visibility(False, ctx) is False

    def test_auth_conditions(self, data_model):
        """Test auth leaves follow the sign-in state."""
        signed_in = VisibilityContext(data_model, AuthState(is_signed_in=True))
        signed_out = VisibilityContext(data_model)
        assert evaluate_visibility({"auth": "signedIn"}, signed_in) is True
        assert evaluate_visibility({"auth": "signedIn"}, signed_out) is False
        assert evaluate_visibility({"auth": "signedOut"}, signed_out) is True
        assert evaluate_visibility(AuthCondition(auth="signedOut"), signed_in) is False

    def test_path_shortcut(self, ctx):
        """Test a bare path condition is a truthy check."""
        assert evaluate_visibility({"path": "/user"}, ctx) is True
        assert evaluate_visibility({"path": "/flags/off"}, ctx) is False

    def test_logic_fallthrough(self, ctx):
        """Test other conditions go to the logic evaluator."""
        assert evaluate_visibility({"or": [{"path": "/flags/off"}, {"gt": [{"path": "/count"}, 2]}]}, ctx)

    def test_auth_nested_in_combinators(self, data_model):
        """Test auth and bool leaves work inside and/or/not."""
        signed_in = VisibilityContext(data_model, AuthState(is_signed_in=True))
        signed_out = VisibilityContext(data_model)
        condition = {"and": [{"auth": "signedIn"}, {"path": "/flags/on"}]}
        assert evaluate_visibility(condition, signed_in) is True
        assert evaluate_visibility(condition, signed_out) is False
        assert evaluate_visibility({"not": {"auth": "signedIn"}}, signed_out) is True
        assert evaluate_visibility({"or": [False, {"auth": "signedOut"}]}, signed_out) is True
        assert evaluate_visibility({"and": [True, {"auth": "signedOut"}]}, signed_in) is False

    def test_unknown_auth_value_is_false(self, ctx, caplog):
        """Test an unknown auth value is hidden with a warning."""
        assert evaluate_visibility({"and": [{"auth": "sometimes"}]}, ctx) is False
        assert "Unknown auth condition" in caplog.text
