"""
Tree walker.

Walks a tree from its root and hands each visible element to a render
function chosen by element type. Render functions are supplied by the host:

    def render_card(props: RenderProps) -> Any:
        return {"card": props.element["props"].get("title"), "body": props.children}

    renderer = Renderer({"Card": render_card, "Text": render_text})
    output = renderer.render(tree, store.visibility_context())

Visibility is inherited: a hidden element hides its whole subtree. Missing
roots and dangling child keys render nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from json_renderer.core.catalog import Catalog
from json_renderer.core.values import as_plain
from json_renderer.core.visibility import VisibilityContext, evaluate_visibility

logger = logging.getLogger(__name__)

# Receives an action in JSON form, as found in element props
ActionCallback = Callable[[Any], Any]


@dataclass
class RenderProps:
    """What a render function receives."""

    element: dict[str, Any]
    children: list[Any] = field(default_factory=list)
    on_action: ActionCallback | None = None
    loading: bool = False


RenderFunction = Callable[[RenderProps], Any]


class Renderer:
    """Dispatches elements to render functions by type."""

    def __init__(
        self,
        registry: Mapping[str, RenderFunction],
        fallback: RenderFunction | None = None,
    ):
        self.registry = dict(registry)
        self.fallback = fallback

    def render(
        self,
        tree: Any,
        ctx: VisibilityContext,
        on_action: ActionCallback | None = None,
        loading: bool = False,
    ) -> Any:
        """
        Render a tree. Returns the root's output, or None if nothing renders.
        """
        tree = as_plain(tree)
        if not tree or not tree.get("root"):
            return None
        elements = tree.get("elements") or {}
        return self._render_key(tree["root"], elements, ctx, on_action, loading)

    def _render_key(
        self,
        key: str,
        elements: Mapping[str, Any],
        ctx: VisibilityContext,
        on_action: ActionCallback | None,
        loading: bool,
    ) -> Any:
        element = elements.get(key)
        if element is None:
            return None
        element = as_plain(element)

        if not evaluate_visibility(element.get("visible"), ctx):
            return None

        render_fn = self.registry.get(element.get("type")) or self.fallback
        if render_fn is None:
            logger.warning(f"No renderer for component type: {element.get('type')}")
            return None

        children = []
        for child_key in element.get("children") or []:
            rendered = self._render_key(child_key, elements, ctx, on_action, loading)
            if rendered is not None:
                children.append(rendered)

        return render_fn(
            RenderProps(element=element, children=children, on_action=on_action, loading=loading)
        )


def create_renderer_from_catalog(
    catalog: Catalog,
    registry: Mapping[str, RenderFunction],
    fallback: RenderFunction | None = None,
) -> Renderer:
    """Build a Renderer for a catalog, warning about types without a render function."""
    for type_name in catalog.component_names:
        if type_name not in registry:
            logger.warning(f"Catalog component {type_name!r} has no renderer")
    return Renderer(registry, fallback=fallback)
