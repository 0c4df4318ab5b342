"""
Unit tests for the tree walker.
"""

import pytest
from pydantic import BaseModel

from json_renderer.core.catalog import create_catalog
from json_renderer.core.visibility import AuthState, VisibilityContext
from json_renderer.runtime.renderer import Renderer, RenderProps, create_renderer_from_catalog


def card(props: RenderProps):
    return {"card": props.element["props"].get("title"), "children": props.children}


def text(props: RenderProps):
    return props.element["props"]["text"]


@pytest.fixture
def renderer():
    return Renderer({"Card": card, "Text": text})


class TestRenderer:
    """Tests for Renderer.render."""

    def test_renders_visible_elements(self, renderer, sample_tree, ctx):
        """Test children are rendered first and hidden ones omitted."""
        assert renderer.render(sample_tree, ctx) == {"card": "Dashboard", "children": ["Hello"]}

    def test_auth_reveals_element(self, renderer, sample_tree, data_model):
        """Test auth-gated children render when signed in."""
        ctx = VisibilityContext(data_model, AuthState(is_signed_in=True))
        assert renderer.render(sample_tree, ctx)["children"] == ["Hello", "Admin only"]

    def test_hidden_parent_hides_subtree(self, renderer, sample_tree, data_model):
        """Test visibility is inherited top-down."""
        sample_tree["elements"]["page"]["visible"] = {"path": "/flags/off"}
        seen = []
        spy = Renderer({"Card": card, "Text": lambda p: seen.append(p.element["key"])})
        assert spy.render(sample_tree, VisibilityContext(data_model)) is None
        assert seen == []

    def test_missing_root_renders_nothing(self, renderer, ctx):
        """Test an empty or dangling root renders nothing."""
        assert renderer.render({"root": "", "elements": {}}, ctx) is None
        assert renderer.render({"root": "gone", "elements": {}}, ctx) is None
        assert renderer.render(None, ctx) is None

    def test_dangling_child_renders_nothing(self, renderer, sample_tree, ctx):
        """Test a child key missing from elements is skipped."""
        sample_tree["elements"]["page"]["children"] = ["ghost", "title"]
        assert renderer.render(sample_tree, ctx)["children"] == ["Hello"]

    def test_unknown_type_uses_fallback(self, sample_tree, ctx):
        """Test the fallback renders types without a renderer."""
        fallback = Renderer({"Card": card}, fallback=lambda p: f"<{p.element['type']}>")
        assert fallback.render(sample_tree, ctx)["children"] == ["<Text>"]

    def test_unknown_type_without_fallback_is_skipped(self, sample_tree, ctx, caplog):
        """Test a node without any renderer is skipped with a warning."""
        partial = Renderer({"Card": card})
        assert partial.render(sample_tree, ctx)["children"] == []
        assert "No renderer for component type: Text" in caplog.text

    def test_threads_action_and_loading(self, sample_tree, ctx):
        """Test on_action and loading reach every visited node."""
        seen = []

        def record(props: RenderProps):
            seen.append((props.element["key"], props.on_action, props.loading))
            return props.element["key"]

        def on_action(action):
            return None

        Renderer({}, fallback=record).render(sample_tree, ctx, on_action=on_action, loading=True)
        assert seen == [("title", on_action, True), ("page", on_action, True)]


class TestCreateRendererFromCatalog:
    """Tests for create_renderer_from_catalog."""

    def test_warns_for_missing_renderers(self, caplog):
        """Test catalog types without a renderer are reported."""

        class TextProps(BaseModel):
            text: str

        class ChartProps(BaseModel):
            series: list[int]

        catalog = create_catalog({"Text": TextProps, "Chart": ChartProps})
        renderer = create_renderer_from_catalog(catalog, {"Text": text})
        assert isinstance(renderer, Renderer)
        assert "Catalog component 'Chart' has no renderer" in caplog.text
        assert "'Text'" not in caplog.text
