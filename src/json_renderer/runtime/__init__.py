"""
json-renderer runtime.

Stateful pieces built on json_renderer.core:
- DataStore: owns the data model
- ActionDispatcher: handlers, loading state and confirmation
- FieldValidator: per-field validation state
- UIStream / build_tree: streaming tree builder
- Renderer: tree walker dispatching to host render functions
- UIRuntime: all of the above bundled for one UI
"""

from json_renderer.runtime.actions import ActionDispatcher, PendingConfirmation
from json_renderer.runtime.data import DataStore
from json_renderer.runtime.renderer import (
    Renderer,
    RenderFunction,
    RenderProps,
    create_renderer_from_catalog,
)
from json_renderer.runtime.session import UIRuntime
from json_renderer.runtime.stream import PatchLineBuffer, UIStream, build_tree
from json_renderer.runtime.validation import FieldValidationState, FieldValidator

__all__ = [
    "DataStore",
    "ActionDispatcher",
    "PendingConfirmation",
    "FieldValidator",
    "FieldValidationState",
    "PatchLineBuffer",
    "UIStream",
    "build_tree",
    "Renderer",
    "RenderFunction",
    "RenderProps",
    "create_renderer_from_catalog",
    "UIRuntime",
]
