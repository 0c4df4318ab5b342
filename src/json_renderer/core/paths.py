"""
Slash-delimited path addressing over nested dicts and lists.

    get_by_path({"user": {"name": "Ada"}}, "/user/name")  # "Ada"

A leading slash is optional. An empty path or "/" addresses the whole
object. Reads never raise; writes create intermediate dicts.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

logger = logging.getLogger(__name__)


def split_path(path: str) -> list[str]:
    """Split a path into its segments. Root paths have no segments."""
    if not path or path == "/":
        return []
    if path.startswith("/"):
        path = path[1:]
    return path.split("/")



def _list_index(segment: str) -> int | None:
    # ASCII only: str.isdigit() also accepts characters int() rejects
    if segment.isascii() and segment.isdigit():
        return int(segment)
    return None


def _read(container: Any, segment: str) -> Any:
    if isinstance(container, Mapping):
        return container.get(segment)
    if isinstance(container, list):
        index = _list_index(segment)
        if index is None or index >= len(container):
            return None
        return container[index]
    return None


def get_by_path(obj: Any, path: str) -> Any:
    """
    Read the value at path, or None if any segment is missing.

    Traversal stops at the first intermediate that is not a dict or list.
    """
    current = obj
    for segment in split_path(path):
        current = _read(current, segment)
        if current is None:
            return None
    return current


def _can_hold(container: Any, segment: str) -> bool:
    if isinstance(container, MutableMapping):
        return True
    return isinstance(container, list) and _list_index(segment) is not None


def _assign(container: Any, segment: str, value: Any) -> None:
    if isinstance(container, list):
        index = _list_index(segment)
        while len(container) <= index:
            container.append(None)
        container[index] = value
    else:
        container[segment] = value


def set_by_path(obj: MutableMapping[str, Any], path: str, value: Any) -> None:
    """
    Write value at path, mutating obj in place.

    Intermediates that cannot hold the next segment (scalars, or lists
    addressed by a non-index segment) are replaced with dicts, so a read of
    the same path afterwards returns value. A path with no segments is a
    no-op.
    """
    segments = split_path(path)
    if not segments:
        return
    if not _can_hold(obj, segments[0]):
        logger.debug(f"Cannot write {path} into a {type(obj).__name__}")
        return

    current: Any = obj
    for segment, next_segment in zip(segments, segments[1:]):
        child = _read(current, segment)
        if not _can_hold(child, next_segment):
            child = {}
            _assign(current, segment, child)
        current = child

    _assign(current, segments[-1], value)
