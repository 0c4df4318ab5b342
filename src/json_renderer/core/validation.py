"""
Declarative field validation.

Runs the named checks of a validation config against one field value.
Check arguments are dynamic values resolved against the data model before
the check function is called. Custom functions supplied by the host take
precedence over the built-ins; an unknown function name passes with a
warning so that one bad rule cannot block a whole form.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from json_renderer.core.values import (
    as_plain,
    is_number,
    is_truthy,
    resolve_dynamic_value,
    strict_equals,
)
from json_renderer.core.visibility import AuthState, VisibilityContext, evaluate_logic_expression

logger = logging.getLogger(__name__)

ValidationFunction = Callable[[Any, Mapping[str, Any]], bool]

_EMAIL = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
# Leading numeric prefix, as accepted by a lenient float parse
_NUMERIC_PREFIX = re.compile(r"\s*[+-]?(?:Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)")
_URL_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss"}


# =============================================================================
# Results
# =============================================================================


@dataclass
class ValidationCheckResult:
    """Outcome of one check."""

    fn: str
    valid: bool
    message: str


@dataclass
class ValidationResult:
    """Outcome of a whole validation config."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    checks: list[ValidationCheckResult] = field(default_factory=list)


@dataclass
class ValidationContext:
    """The field value plus everything its checks may read."""

    value: Any
    data_model: Any = field(default_factory=dict)
    custom_functions: Mapping[str, ValidationFunction] | None = None
    auth_state: AuthState | None = None


# =============================================================================
# Built-in checks
# =============================================================================


def _required(value: Any, args: Mapping[str, Any]) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return len(value.strip()) > 0
    if isinstance(value, list):
        return len(value) > 0
    return is_truthy(value)


def _email(value: Any, args: Mapping[str, Any]) -> bool:
    return isinstance(value, str) and _EMAIL.fullmatch(value) is not None


def _min_length(value: Any, args: Mapping[str, Any]) -> bool:
    minimum = args.get("min")
    return isinstance(value, str) and is_number(minimum) and len(value) >= minimum


def _max_length(value: Any, args: Mapping[str, Any]) -> bool:
    maximum = args.get("max")
    return isinstance(value, str) and is_number(maximum) and len(value) <= maximum


def _pattern(value: Any, args: Mapping[str, Any]) -> bool:
    pattern = args.get("pattern")
    if not isinstance(value, str) or not isinstance(pattern, str):
        return False
    try:
        return re.search(pattern, value) is not None
    except re.error:
        return False


def _min(value: Any, args: Mapping[str, Any]) -> bool:
    minimum = args.get("min")
    return is_number(value) and is_number(minimum) and value >= minimum


def _max(value: Any, args: Mapping[str, Any]) -> bool:
    maximum = args.get("max")
    return is_number(value) and is_number(maximum) and value <= maximum


def _numeric(value: Any, args: Mapping[str, Any]) -> bool:
    if is_number(value):
        return value == value
    if isinstance(value, str):
        return _NUMERIC_PREFIX.match(value) is not None
    return False


def _url(value: Any, args: Mapping[str, Any]) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False
    if not parts.scheme or not _URL_SCHEME.fullmatch(parts.scheme):
        return False
    if parts.scheme.lower() in _HOST_SCHEMES:
        return bool(parts.netloc)
    return bool(parts.netloc or parts.path)


def _matches(value: Any, args: Mapping[str, Any]) -> bool:
    return strict_equals(value, args.get("other"))


BUILTIN_VALIDATION_FUNCTIONS: dict[str, ValidationFunction] = {
    "required": _required,
    "email": _email,
    "minLength": _min_length,
    "maxLength": _max_length,
    "pattern": _pattern,
    "min": _min,
    "max": _max,
    "numeric": _numeric,
    "url": _url,
    "matches": _matches,
}


# =============================================================================
# Runner
# =============================================================================


def run_validation_check(check: Any, ctx: ValidationContext) -> ValidationCheckResult:
    """Run one check against ctx.value."""
    check = as_plain(check)
    name = check["fn"]
    message = check.get("message", "")

    resolved_args = {
        key: resolve_dynamic_value(arg, ctx.data_model)
        for key, arg in (check.get("args") or {}).items()
    }

    custom = ctx.custom_functions or {}
    fn = custom.get(name) or BUILTIN_VALIDATION_FUNCTIONS.get(name)
    if fn is None:
        logger.warning(f"Unknown validation function: {name}")
        return ValidationCheckResult(fn=name, valid=True, message=message)

    return ValidationCheckResult(fn=name, valid=bool(fn(ctx.value, resolved_args)), message=message)


def run_validation(config: Any, ctx: ValidationContext) -> ValidationResult:
    """
    Run every check of a validation config.

    If the config has an `enabled` expression that evaluates false, the
    field is disabled and always valid.

    Args:
        config: Validation config in JSON form or a ValidationConfigSpec.
        ctx: Field value, data model, custom functions and auth state.

    Returns:
        ValidationResult with the failed messages in check order.
    """
    config = as_plain(config)

    enabled = config.get("enabled")
    if enabled is not None:
        visibility_ctx = VisibilityContext(data_model=ctx.data_model, auth_state=ctx.auth_state)
        if not evaluate_logic_expression(enabled, visibility_ctx):
            return ValidationResult(valid=True)

    checks: list[ValidationCheckResult] = []
    errors: list[str] = []
    for check in config.get("checks") or []:
        result = run_validation_check(check, ctx)
        checks.append(result)
        if not result.valid:
            errors.append(result.message)

    return ValidationResult(valid=not errors, errors=errors, checks=checks)
