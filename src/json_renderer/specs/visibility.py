"""
Logic expression and visibility condition models.

These models describe the wire shape of conditions so that catalogs can
validate generated elements. Evaluation works on the plain JSON form,
see json_renderer.core.visibility.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from json_renderer.specs.values import DynamicNumber, DynamicValue

_EXPR_CONFIG = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


# =============================================================================
# Compound expressions
# =============================================================================


class AndExpr(BaseModel):
    """All sub-expressions must be true."""

    all_of: list[VisibilityCondition] = Field(alias="and")

    model_config = _EXPR_CONFIG


class OrExpr(BaseModel):
    """Any sub-expression must be true."""

    any_of: list[VisibilityCondition] = Field(alias="or")

    model_config = _EXPR_CONFIG


class NotExpr(BaseModel):
    """Negation of a sub-expression."""

    negated: VisibilityCondition = Field(alias="not")

    model_config = _EXPR_CONFIG


# =============================================================================
# Leaf expressions
# =============================================================================


class PathExpr(BaseModel):
    """
    True when the value at path is truthy.

    Example:
        PathExpr(path="/form/agreed")
    """

    path: str

    model_config = _EXPR_CONFIG


class EqExpr(BaseModel):
    """Strict equality of two dynamic values."""

    eq: tuple[DynamicValue, DynamicValue]

    model_config = _EXPR_CONFIG


class NeqExpr(BaseModel):
    """Strict inequality of two dynamic values."""

    neq: tuple[DynamicValue, DynamicValue]

    model_config = _EXPR_CONFIG


class GtExpr(BaseModel):
    gt: tuple[DynamicNumber, DynamicNumber]

    model_config = _EXPR_CONFIG


class GteExpr(BaseModel):
    gte: tuple[DynamicNumber, DynamicNumber]

    model_config = _EXPR_CONFIG


class LtExpr(BaseModel):
    lt: tuple[DynamicNumber, DynamicNumber]

    model_config = _EXPR_CONFIG


class LteExpr(BaseModel):
    lte: tuple[DynamicNumber, DynamicNumber]

    model_config = _EXPR_CONFIG


LogicExpression = Union[
    AndExpr,
    OrExpr,
    NotExpr,
    PathExpr,
    EqExpr,
    NeqExpr,
    GtExpr,
    GteExpr,
    LtExpr,
    LteExpr,
]


# =============================================================================
# Visibility
# =============================================================================


class AuthCondition(BaseModel):
    """
    Visible depending on the host's sign-in state.

    Example:
        AuthCondition(auth="signedIn")
    """

    auth: Literal["signedIn", "signedOut"]

    model_config = _EXPR_CONFIG


# Also the operand type of and/or/not, so auth and bool leaves can nest
VisibilityCondition = Union[bool, AuthCondition, LogicExpression]


AndExpr.model_rebuild()
OrExpr.model_rebuild()
NotExpr.model_rebuild()
