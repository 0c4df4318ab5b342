"""
UIRuntime: one data model with its actions, validation and renderer.

    runtime = UIRuntime(
        registry={"Button": render_button},
        handlers={"save": save},
        initial_data={"form": {}},
        auth_state=AuthState(is_signed_in=True),
    )
    output = runtime.render(tree)
    await runtime.dispatch({"name": "save"})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from json_renderer.core.actions import ActionHandler, Navigate
from json_renderer.core.catalog import Catalog
from json_renderer.core.validation import ValidationFunction
from json_renderer.core.visibility import AuthState
from json_renderer.runtime.actions import ActionDispatcher, PendingConfirmation
from json_renderer.runtime.data import DataStore, OnChange
from json_renderer.runtime.renderer import Renderer, RenderFunction, create_renderer_from_catalog
from json_renderer.runtime.validation import FieldValidator


class UIRuntime:
    """
    Bundles a DataStore, ActionDispatcher, FieldValidator and Renderer.

    If a catalog is given, its custom validation functions are used and
    the renderer warns about catalog types without a render function.
    """

    def __init__(
        self,
        registry: Mapping[str, RenderFunction],
        *,
        handlers: Mapping[str, ActionHandler] | None = None,
        initial_data: Mapping[str, Any] | None = None,
        auth_state: AuthState | None = None,
        navigate: Navigate | None = None,
        validation_functions: Mapping[str, ValidationFunction] | None = None,
        catalog: Catalog | None = None,
        fallback: RenderFunction | None = None,
        on_data_change: OnChange | None = None,
    ):
        functions = dict(catalog.functions) if catalog else {}
        functions.update(validation_functions or {})

        self.store = DataStore(initial_data, auth_state=auth_state, on_change=on_data_change)
        self.actions = ActionDispatcher(self.store, handlers=handlers, navigate=navigate)
        self.validation = FieldValidator(self.store, custom_functions=functions)
        if catalog is not None:
            self.renderer = create_renderer_from_catalog(catalog, registry, fallback=fallback)
        else:
            self.renderer = Renderer(registry, fallback=fallback)

    @property
    def data(self) -> dict[str, Any]:
        return self.store.data

    @property
    def pending_confirmation(self) -> PendingConfirmation | None:
        return self.actions.pending_confirmation

    def is_visible(self, condition: Any) -> bool:
        return self.store.is_visible(condition)

    async def dispatch(self, action: Any) -> None:
        await self.actions.execute(action)

    def render(self, tree: Any, loading: bool = False) -> Any:
        """Render a tree against the current data and auth state."""
        return self.renderer.render(
            tree,
            self.store.visibility_context(),
            on_action=self.dispatch,
            loading=loading,
        )
