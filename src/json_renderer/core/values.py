"""
Dynamic value resolution and JSON value semantics.

A dynamic value is a literal or a `{"path": ...}` reference. Any mapping
with a string `path` key is treated as a reference; literals must not use
that shape.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from json_renderer.core.paths import get_by_path
from json_renderer.specs.values import PathRef

_INTERPOLATION = re.compile(r"\$\{([^}]+)\}")


def as_plain(value: Any) -> Any:
    """Dump pydantic spec models to their JSON wire form; pass anything else through."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_unset=True)
    return value


def is_number(value: Any) -> bool:
    """True for int and float, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """Truthiness of a JSON value: empty string, zero, NaN, null and false are falsy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return value == value and value != 0
    if isinstance(value, str):
        return value != ""
    # Containers are always truthy
    return True


def strict_equals(left: Any, right: Any) -> bool:
    """
    Equality without type coercion.

    Booleans never equal numbers, and dicts/lists compare by identity only.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return left is right
    if type(left) is not type(right):
        return False
    return left == right


def is_path_reference(value: Any) -> bool:
    if isinstance(value, PathRef):
        return True
    return isinstance(value, Mapping) and isinstance(value.get("path"), str)


def resolve_dynamic_value(value: Any, data_model: Any) -> Any:
    """
    Resolve a dynamic value against the data model.

    None resolves to None, references read their path, anything else is
    returned unchanged.
    """
    if value is None:
        return None
    if isinstance(value, PathRef):
        return get_by_path(data_model, value.path)
    if is_path_reference(value):
        return get_by_path(data_model, value["path"])
    return value


def stringify(value: Any) -> str:
    """Render a resolved value for display inside a string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def interpolate_string(template: str, data_model: Any) -> str:
    """Replace `${/path}` tokens with the stringified value at that path."""

    def replace(match: re.Match[str]) -> str:
        return stringify(get_by_path(data_model, match.group(1)))

    return _INTERPOLATION.sub(replace, template)
