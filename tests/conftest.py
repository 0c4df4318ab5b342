"""Shared pytest fixtures for json-renderer tests."""

import json
from pathlib import Path

import pytest

from json_renderer.core.visibility import AuthState, VisibilityContext


@pytest.fixture
def data_model() -> dict:
    """Return a small data model."""
    return {
        "user": {"name": "Ada", "age": 36, "email": "ada@example.com"},
        "items": [{"title": "first"}, {"title": "second"}],
        "flags": {"on": True, "off": False, "empty": ""},
        "count": 3,
    }


@pytest.fixture
def ctx(data_model: dict) -> VisibilityContext:
    """Return a signed-out visibility context over data_model."""
    return VisibilityContext(data_model=data_model, auth_state=AuthState(is_signed_in=False))


@pytest.fixture
def sample_tree() -> dict:
    """Return a tree with a card holding a title and a hidden admin panel."""
    return {
        "root": "page",
        "elements": {
            "page": {
                "key": "page",
                "type": "Card",
                "props": {"title": "Dashboard"},
                "children": ["title", "admin"],
            },
            "title": {
                "key": "title",
                "type": "Text",
                "props": {"text": "Hello"},
                "parentKey": "page",
            },
            "admin": {
                "key": "admin",
                "type": "Text",
                "props": {"text": "Admin only"},
                "parentKey": "page",
                "visible": {"auth": "signedIn"},
            },
        },
    }


@pytest.fixture
def patch_lines() -> list[str]:
    """Return the patch lines that build a one-element tree."""
    return [
        json.dumps({"op": "add", "path": "/root", "value": "a"}),
        json.dumps(
            {"op": "add", "path": "/elements/a", "value": {"key": "a", "type": "Text", "props": {}}}
        ),
        json.dumps({"op": "replace", "path": "/elements/a/props/text", "value": "hi"}),
    ]


@pytest.fixture
def patch_file(tmp_path: Path, patch_lines: list[str]) -> Path:
    """Write patch_lines to an NDJSON file."""
    path = tmp_path / "tree.ndjson"
    path.write_text("\n".join(patch_lines) + "\n")
    return path
