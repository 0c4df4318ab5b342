"""
Logic expression evaluator and visibility conditions.

Evaluates the JSON form of logic expressions against a data model:

    {"and": [...]}, {"or": [...]}, {"not": expr}
    {"path": "/flag"}                      truthy check
    {"eq": [a, b]}, {"neq": [a, b]}        strict equality of dynamic values
    {"gt"|"gte"|"lt"|"lte": [a, b]}        numeric comparison

Visibility conditions additionally accept a plain bool and
{"auth": "signedIn" | "signedOut"}, also nested inside and/or/not. Pure
evaluation, no side effects.
Comparisons with a non-numeric operand are false rather than an error.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from json_renderer.core.values import (
    as_plain,
    is_number,
    is_truthy,
    resolve_dynamic_value,
    strict_equals,
)

logger = logging.getLogger(__name__)

_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}


@dataclass(frozen=True)
class AuthState:
    """Sign-in state supplied by the host."""

    is_signed_in: bool = False


@dataclass
class VisibilityContext:
    """Everything a condition can read."""

    data_model: Any = field(default_factory=dict)
    auth_state: AuthState | None = None

    @property
    def is_signed_in(self) -> bool:
        return self.auth_state.is_signed_in if self.auth_state else False


def _operands(expr: Mapping[str, Any], op: str, ctx: VisibilityContext) -> tuple[Any, Any] | None:
    """Resolve the two operands of a binary operator, or None if malformed."""
    pair = expr[op]
    if not isinstance(pair, (list, tuple)) or len(pair) != 2:
        logger.warning(f"Operator {op!r} expects two operands, got: {pair!r}")
        return None
    left, right = pair
    return (
        resolve_dynamic_value(left, ctx.data_model),
        resolve_dynamic_value(right, ctx.data_model),
    )


def _auth_matches(auth: Any, ctx: VisibilityContext) -> bool:
    if auth == "signedIn":
        return ctx.is_signed_in
    if auth == "signedOut":
        return not ctx.is_signed_in
    logger.warning(f"Unknown auth condition: {auth!r}")
    return False


def evaluate_logic_expression(expr: Any, ctx: VisibilityContext) -> bool:
    """
    Evaluate a logic expression to a bool.

    Args:
        expr: Expression in JSON form (or a spec model from
            json_renderer.specs.visibility).
        ctx: Data model and auth state to evaluate against.

    Returns:
        The boolean result. Unrecognised expressions evaluate to False.
    """
    expr = as_plain(expr)
    # Visibility leaves may appear inside and/or/not
    if isinstance(expr, bool):
        return expr
    if not isinstance(expr, Mapping):
        logger.warning(f"Unknown logic expression: {expr!r}")
        return False

    if "auth" in expr:
        return _auth_matches(expr["auth"], ctx)

    if "and" in expr or "or" in expr:
        op = "and" if "and" in expr else "or"
        subs = expr[op]
        if not isinstance(subs, (list, tuple)):
            logger.warning(f"Operator {op!r} expects a list, got: {subs!r}")
            return False
        results = (evaluate_logic_expression(sub, ctx) for sub in subs)
        return all(results) if op == "and" else any(results)

    if "not" in expr:
        return not evaluate_logic_expression(expr["not"], ctx)

    if "path" in expr:
        return is_truthy(resolve_dynamic_value({"path": expr["path"]}, ctx.data_model))

    if "eq" in expr or "neq" in expr:
        op = "eq" if "eq" in expr else "neq"
        operands = _operands(expr, op, ctx)
        if operands is None:
            return False
        equal = strict_equals(*operands)
        return equal if op == "eq" else not equal

    for op, compare in _COMPARISONS.items():
        if op in expr:
            operands = _operands(expr, op, ctx)
            if operands is None:
                return False
            left, right = operands
            if is_number(left) and is_number(right):
                return compare(left, right)
            return False

    logger.warning(f"Unknown logic expression: {dict(expr)!r}")
    return False


def evaluate_visibility(condition: Any, ctx: VisibilityContext) -> bool:
    """
    Decide whether an element with this condition is visible.

    An absent condition (None) is always visible.
    """
    if condition is None:
        return True

    return evaluate_logic_expression(condition, ctx)
