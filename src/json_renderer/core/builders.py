"""
Builders for the JSON forms of visibility conditions, validation checks
and actions.

These return plain dicts ready to embed in an element or tree:

    element = {
        "key": "email",
        "type": "TextField",
        "props": {"validation": {"checks": [required(), email()]}},
        "visible": all_of(SIGNED_IN, visible_when("/form/open")),
    }
"""

from __future__ import annotations

from typing import Any

from json_renderer.core.values import as_plain

# =============================================================================
# Visibility
# =============================================================================

ALWAYS = True
NEVER = False
SIGNED_IN: dict[str, Any] = {"auth": "signedIn"}
SIGNED_OUT: dict[str, Any] = {"auth": "signedOut"}


def visible_when(path: str) -> dict[str, Any]:
    """Visible when the value at path is truthy."""
    return {"path": path}


def all_of(*conditions: Any) -> dict[str, Any]:
    return {"and": [as_plain(c) for c in conditions]}


def any_of(*conditions: Any) -> dict[str, Any]:
    return {"or": [as_plain(c) for c in conditions]}


def negate(condition: Any) -> dict[str, Any]:
    return {"not": as_plain(condition)}


def equals(left: Any, right: Any) -> dict[str, Any]:
    return {"eq": [as_plain(left), as_plain(right)]}


def not_equals(left: Any, right: Any) -> dict[str, Any]:
    return {"neq": [as_plain(left), as_plain(right)]}


def greater_than(left: Any, right: Any) -> dict[str, Any]:
    return {"gt": [as_plain(left), as_plain(right)]}


def greater_or_equal(left: Any, right: Any) -> dict[str, Any]:
    return {"gte": [as_plain(left), as_plain(right)]}


def less_than(left: Any, right: Any) -> dict[str, Any]:
    return {"lt": [as_plain(left), as_plain(right)]}


def less_or_equal(left: Any, right: Any) -> dict[str, Any]:
    return {"lte": [as_plain(left), as_plain(right)]}


# =============================================================================
# Validation checks
# =============================================================================


def required(message: str = "This field is required") -> dict[str, Any]:
    return {"fn": "required", "message": message}


def email(message: str = "Invalid email address") -> dict[str, Any]:
    return {"fn": "email", "message": message}


def min_length(minimum: int, message: str | None = None) -> dict[str, Any]:
    return {
        "fn": "minLength",
        "args": {"min": minimum},
        "message": message or f"Must be at least {minimum} characters",
    }


def max_length(maximum: int, message: str | None = None) -> dict[str, Any]:
    return {
        "fn": "maxLength",
        "args": {"max": maximum},
        "message": message or f"Must be at most {maximum} characters",
    }


def pattern(regex: str, message: str = "Invalid format") -> dict[str, Any]:
    return {"fn": "pattern", "args": {"pattern": regex}, "message": message}


def min_value(minimum: float, message: str | None = None) -> dict[str, Any]:
    return {"fn": "min", "args": {"min": minimum}, "message": message or f"Must be at least {minimum}"}


def max_value(maximum: float, message: str | None = None) -> dict[str, Any]:
    return {"fn": "max", "args": {"max": maximum}, "message": message or f"Must be at most {maximum}"}


def url(message: str = "Invalid URL") -> dict[str, Any]:
    return {"fn": "url", "message": message}


def matches(other_path: str, message: str = "Fields must match") -> dict[str, Any]:
    """The field must equal the value at other_path."""
    return {"fn": "matches", "args": {"other": {"path": other_path}}, "message": message}


# =============================================================================
# Actions
# =============================================================================


def _action(name: str, params: dict[str, Any] | None, **extra: Any) -> dict[str, Any]:
    action: dict[str, Any] = {"name": name}
    if params is not None:
        action["params"] = {key: as_plain(value) for key, value in params.items()}
    for key, value in extra.items():
        action[key] = as_plain(value)
    return action


def simple_action(name: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    return _action(name, params)


def action_with_confirm(
    name: str, confirm: Any, params: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Action that asks for confirmation first."""
    return _action(name, params, confirm=confirm)


def action_with_success(
    name: str, on_success: Any, params: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Action with an onSuccess continuation."""
    return _action(name, params, onSuccess=on_success)
