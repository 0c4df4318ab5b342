"""
Patch protocol.

A tree is streamed as newline-delimited JSON, one patch per line:

    {"op": "set", "path": "/root", "value": "page"}
    {"op": "add", "path": "/elements/page", "value": {"key": "page", "type": "Card", "props": {}}}
    {"op": "replace", "path": "/elements/page/props/title", "value": "Hello"}
    {"op": "remove", "path": "/elements/page"}

Trees here are plain dicts `{"root": str, "elements": {key: element}}`.
Patch application is copy-on-write: every applied patch returns a new tree
dict with a new elements dict, and earlier snapshots are never mutated.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from json_renderer.core.paths import get_by_path, set_by_path, split_path
from json_renderer.core.values import as_plain
from json_renderer.specs.tree import PatchOp, PatchSpec

logger = logging.getLogger(__name__)

ROOT_PATH = "/root"
ELEMENTS_PREFIX = "/elements/"
COMMENT_PREFIX = "//"


def empty_tree() -> dict[str, Any]:
    return {"root": "", "elements": {}}


# =============================================================================
# Parsing
# =============================================================================


def parse_patch_line(line: str) -> PatchSpec | None:
    """
    Parse one stream line into a patch.

    Blank lines, `//` comments, malformed JSON and anything that is not a
    patch object all return None.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_PREFIX):
        return None

    try:
        raw = json.loads(stripped)
    except json.JSONDecodeError as e:
        logger.debug(f"Skipping unparseable patch line ({e}): {stripped[:80]}")
        return None

    if not isinstance(raw, dict):
        logger.debug(f"Skipping non-object patch line: {stripped[:80]}")
        return None

    try:
        return PatchSpec.model_validate(raw)
    except ValidationError as e:
        logger.debug(f"Skipping invalid patch ({e.error_count()} errors): {stripped[:80]}")
        return None


# =============================================================================
# Application
# =============================================================================


def _delete_by_path(obj: Any, path: str) -> None:
    segments = split_path(path)
    if not segments:
        return
    parent = get_by_path(obj, "/".join(segments[:-1]))
    last = segments[-1]
    if isinstance(parent, dict):
        parent.pop(last, None)
    elif isinstance(parent, list) and last.isascii() and last.isdigit() and int(last) < len(parent):
        del parent[int(last)]


def apply_patch(tree: Mapping[str, Any], patch: PatchSpec | Mapping[str, Any]) -> dict[str, Any]:
    """
    Apply one patch and return the new tree.

    `/root` reassigns the root key. `/elements/<key>` replaces or removes a
    whole element. Longer paths write into (or remove from) an existing
    element; if the element does not exist the patch is a no-op.
    """
    if not isinstance(patch, PatchSpec):
        patch = PatchSpec.model_validate(as_plain(patch))

    new_tree = dict(tree)
    elements = dict(tree.get("elements") or {})
    new_tree["elements"] = elements

    if patch.path == ROOT_PATH:
        if patch.op != PatchOp.REMOVE:
            new_tree["root"] = patch.value
        return new_tree

    if not patch.path.startswith(ELEMENTS_PREFIX):
        logger.debug(f"Ignoring patch outside the tree: {patch.path}")
        return new_tree

    key, _, sub_path = patch.path[len(ELEMENTS_PREFIX) :].partition("/")
    if not key:
        return new_tree

    if not sub_path:
        if patch.op == PatchOp.REMOVE:
            elements.pop(key, None)
        else:
            elements[key] = patch.value
        return new_tree

    element = elements.get(key)
    if not isinstance(element, dict):
        logger.debug(f"Ignoring patch for missing element {key!r}: {patch.path}")
        return new_tree

    # Deep copy so nested props shared with older snapshots stay untouched
    element = copy.deepcopy(element)
    if patch.op == PatchOp.REMOVE:
        _delete_by_path(element, sub_path)
    else:
        set_by_path(element, sub_path, patch.value)
    elements[key] = element
    return new_tree


def apply_patches(
    tree: Mapping[str, Any], patches: Iterable[PatchSpec | Mapping[str, Any]]
) -> dict[str, Any]:
    """Apply patches in order."""
    result = dict(tree)
    for patch in patches:
        result = apply_patch(result, patch)
    return result


# =============================================================================
# Flat element lists
# =============================================================================


def flat_to_tree(elements: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """
    Build a tree from a flat list of elements linked by `parentKey`.

    Children are ordered as they appear in the list. The root is the last
    element without a parent; parents that are missing are ignored.
    """
    elements = [as_plain(element) for element in elements]
    element_map: dict[str, dict[str, Any]] = {}
    root = ""

    for element in elements:
        node = {
            "key": element["key"],
            "type": element["type"],
            "props": element.get("props") or {},
            "children": [],
        }
        if element.get("parentKey"):
            node["parentKey"] = element["parentKey"]
        if element.get("visible") is not None:
            node["visible"] = element["visible"]
        element_map[element["key"]] = node

    for element in elements:
        parent_key = element.get("parentKey")
        if parent_key:
            parent = element_map.get(parent_key)
            if parent is not None:
                parent["children"].append(element["key"])
        else:
            root = element["key"]

    return {"root": root, "elements": element_map}
