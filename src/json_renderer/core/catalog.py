"""
Component catalog and schema compiler.

A catalog names the element types a tree may contain, with a pydantic
props model per type, plus the actions and custom validation functions an
integrator provides. From it we compile element and tree schemas:

    catalog = create_catalog(
        name="dashboard",
        components={
            "Card": ComponentDefinition(props=CardProps, description="A card"),
            "Text": ComponentDefinition(props=TextProps),
        },
        actions={"refresh": ActionDefinition(description="Reload data")},
    )
    result = catalog.validate_tree(tree_json)
    if not result.success:
        print(result.error)

Elements are a tagged variant keyed on `type`. A single component type
uses its element model directly; several are a discriminated union.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, create_model

from json_renderer.core.validation import BUILTIN_VALIDATION_FUNCTIONS, ValidationFunction
from json_renderer.specs.tree import UIElement
from json_renderer.specs.visibility import VisibilityCondition

logger = logging.getLogger(__name__)


# =============================================================================
# Definitions
# =============================================================================


@dataclass(frozen=True)
class ComponentDefinition:
    """One element type: its props model and an optional description."""

    props: type[BaseModel]
    description: str | None = None


@dataclass(frozen=True)
class ActionDefinition:
    """One action the generator may reference."""

    description: str | None = None
    params: type[BaseModel] | None = None


@dataclass
class CatalogValidationResult:
    """
    Outcome of validating an element or tree.

    On success `data` holds the parsed model and `error` is None; on
    failure `error` holds the pydantic ValidationError.
    """

    success: bool
    data: Any = None
    error: ValidationError | None = None


# =============================================================================
# Schema compilation
# =============================================================================


def _element_model(type_name: str, props: type[BaseModel]) -> type[BaseModel]:
    """Build `{key, type: Literal[type_name], props, children?, parentKey?, visible?}`."""
    return create_model(
        f"{type_name}Element",
        __config__=ConfigDict(populate_by_name=True),
        __doc__=f"Element schema for {type_name}",
        key=(str, ...),
        type=(Literal[type_name], ...),
        props=(props, ...),
        children=(list[str] | None, None),
        parent_key=(str | None, Field(default=None, alias="parentKey")),
        visible=(VisibilityCondition | None, None),
    )


def _combined_element_schema(models: list[type[BaseModel]]) -> Any:
    if not models:
        return UIElement
    if len(models) == 1:
        return models[0]
    return Annotated[Union[tuple(models)], Field(discriminator="type")]


class Catalog:
    """
    Compiled catalog.

    Attributes:
        name: Catalog name, used in the generated prompt
        components: Component definitions by type name
        actions: Action definitions by name
        functions: Custom validation functions by name
        element_models: Element model per component type
        element_schema: Combined element schema (model or union)
        tree_schema: Model of `{root, elements: {key -> element}}`
    """

    def __init__(
        self,
        name: str,
        components: dict[str, ComponentDefinition],
        actions: dict[str, ActionDefinition],
        functions: dict[str, ValidationFunction],
    ):
        self.name = name
        self.components = components
        self.actions = actions
        self.functions = functions

        self.element_models: dict[str, type[BaseModel]] = {
            type_name: _element_model(type_name, definition.props)
            for type_name, definition in components.items()
        }
        self.element_schema = _combined_element_schema(list(self.element_models.values()))
        self.tree_schema: type[BaseModel] = create_model(
            f"{name.title().replace(' ', '')}Tree",
            __doc__=f"Tree schema for the {name} catalog",
            root=(str, ...),
            elements=(dict[str, self.element_schema], ...),
        )
        self._element_adapter: TypeAdapter[Any] = TypeAdapter(self.element_schema)

    @property
    def component_names(self) -> list[str]:
        return list(self.components)

    @property
    def action_names(self) -> list[str]:
        return list(self.actions)

    @property
    def function_names(self) -> list[str]:
        return list(self.functions)

    def has_component(self, type_name: str) -> bool:
        return type_name in self.components

    def has_action(self, name: str) -> bool:
        return name in self.actions

    def has_function(self, name: str) -> bool:
        return name in self.functions

    def validate_element(self, data: Any) -> CatalogValidationResult:
        """Validate one element. Never raises."""
        try:
            return CatalogValidationResult(success=True, data=self._element_adapter.validate_python(data))
        except ValidationError as e:
            return CatalogValidationResult(success=False, error=e)

    def validate_tree(self, data: Any) -> CatalogValidationResult:
        """Validate a whole tree. Never raises."""
        try:
            return CatalogValidationResult(success=True, data=self.tree_schema.model_validate(data))
        except ValidationError as e:
            return CatalogValidationResult(success=False, error=e)


def create_catalog(
    components: Mapping[str, ComponentDefinition | type[BaseModel]],
    actions: Mapping[str, ActionDefinition] | None = None,
    functions: Mapping[str, ValidationFunction] | None = None,
    name: str = "unnamed",
) -> Catalog:
    """
    Compile a catalog.

    A component may be given as a bare props model instead of a
    ComponentDefinition. Entries that are neither are skipped with a
    warning.
    """
    definitions: dict[str, ComponentDefinition] = {}
    for type_name, definition in components.items():
        if isinstance(definition, ComponentDefinition):
            definitions[type_name] = definition
        elif isinstance(definition, type) and issubclass(definition, BaseModel):
            definitions[type_name] = ComponentDefinition(props=definition)
        else:
            logger.warning(f"Skipping component {type_name!r}: props must be a pydantic model")

    return Catalog(
        name=name,
        components=definitions,
        actions=dict(actions or {}),
        functions=dict(functions or {}),
    )


# =============================================================================
# Prompt generation
# =============================================================================


def _type_label(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return repr(annotation).replace("typing.", "")


def _props_lines(props: type[BaseModel]) -> list[str]:
    lines = []
    for field_name, info in props.model_fields.items():
        label = info.alias or field_name
        required = " (required)" if info.is_required() else ""
        description = f": {info.description}" if info.description else ""
        lines.append(f"- `{label}`: {_type_label(info.annotation)}{required}{description}")
    return lines


def generate_catalog_prompt(catalog: Catalog) -> str:
    """
    Describe a catalog in Markdown for an external tree generator.

    Lists components with their props, actions, the visibility grammar, and
    the built-in and custom validation functions.
    """
    lines = [
        f"# {catalog.name} Component Catalog",
        "",
        "## Available Components",
        "",
    ]
    for type_name, definition in catalog.components.items():
        lines.append(f"### {type_name}")
        if definition.description:
            lines.append(definition.description)
        props = _props_lines(definition.props)
        if props:
            lines.append("")
            lines.append("Props:")
            lines.extend(props)
        lines.append("")

    if catalog.actions:
        lines.append("## Available Actions")
        lines.append("")
        for action_name, action in catalog.actions.items():
            description = f": {action.description}" if action.description else ""
            lines.append(f"- `{action_name}`{description}")
        lines.append("")

    lines.extend(
        [
            "## Visibility Conditions",
            "",
            "Components can have a `visible` property:",
            "- `true` / `false` - Always visible/hidden",
            '- `{ "path": "/data/path" }` - Visible when path is truthy',
            '- `{ "auth": "signedIn" }` / `{ "auth": "signedOut" }` - Auth state',
            '- `{ "and": [...] }` - All conditions must be true',
            '- `{ "or": [...] }` - Any condition must be true',
            '- `{ "not": {...} }` - Negates a condition',
            '- `{ "eq": [a, b] }` / `{ "neq": [a, b] }` - Equality check',
            '- `{ "gt" | "gte" | "lt" | "lte": [a, b] }` - Numeric comparison',
            "",
            "## Validation Functions",
            "",
            "Built-in: " + ", ".join(f"`{fn}`" for fn in BUILTIN_VALIDATION_FUNCTIONS),
        ]
    )
    if catalog.functions:
        lines.append("Custom: " + ", ".join(f"`{fn}`" for fn in catalog.functions))
    lines.append("")

    return "\n".join(lines)
