"""
Pydantic models for the JSON wire format.

This module exports the pydantic models describing dynamic values, logic
expressions, validation configs, actions, elements, trees and patches.
"""

from json_renderer.specs.actions import (
    ActionSpec,
    ChainOutcome,
    ConfirmSpec,
    NavigateOutcome,
    OnErrorSpec,
    OnSuccessSpec,
    ResolvedAction,
    SetOutcome,
)
from json_renderer.specs.tree import PatchOp, PatchSpec, UIElement, UITree
from json_renderer.specs.validation import ValidationCheckSpec, ValidationConfigSpec
from json_renderer.specs.values import (
    DynamicBoolean,
    DynamicNumber,
    DynamicString,
    DynamicValue,
    PathRef,
)
from json_renderer.specs.visibility import (
    AndExpr,
    AuthCondition,
    EqExpr,
    GteExpr,
    GtExpr,
    LogicExpression,
    LteExpr,
    LtExpr,
    NeqExpr,
    NotExpr,
    OrExpr,
    PathExpr,
    VisibilityCondition,
)

__all__ = [
    # Values
    "DynamicValue",
    "DynamicString",
    "DynamicNumber",
    "DynamicBoolean",
    "PathRef",
    # Logic
    "LogicExpression",
    "VisibilityCondition",
    "AndExpr",
    "OrExpr",
    "NotExpr",
    "PathExpr",
    "EqExpr",
    "NeqExpr",
    "GtExpr",
    "GteExpr",
    "LtExpr",
    "LteExpr",
    "AuthCondition",
    # Validation
    "ValidationCheckSpec",
    "ValidationConfigSpec",
    # Actions
    "ActionSpec",
    "ConfirmSpec",
    "NavigateOutcome",
    "SetOutcome",
    "ChainOutcome",
    "OnSuccessSpec",
    "OnErrorSpec",
    "ResolvedAction",
    # Tree
    "UIElement",
    "UITree",
    "PatchOp",
    "PatchSpec",
]
