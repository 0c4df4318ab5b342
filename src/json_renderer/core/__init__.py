"""Core json-renderer functionality: paths, values, logic, validation, actions, catalog, patches."""

from .actions import ERROR_MESSAGE_TOKEN, ActionHandler, execute_action, resolve_action
from .catalog import (
    ActionDefinition,
    Catalog,
    CatalogValidationResult,
    ComponentDefinition,
    create_catalog,
    generate_catalog_prompt,
)
from .errors import (
    ActionCancelledError,
    ConfigError,
    JsonRendererError,
    StreamTransportError,
)
from .paths import get_by_path, set_by_path, split_path
from .patches import apply_patch, apply_patches, empty_tree, flat_to_tree, parse_patch_line
from .validation import (
    BUILTIN_VALIDATION_FUNCTIONS,
    ValidationCheckResult,
    ValidationContext,
    ValidationFunction,
    ValidationResult,
    run_validation,
    run_validation_check,
)
from .values import interpolate_string, is_path_reference, resolve_dynamic_value, strict_equals
from .visibility import (
    AuthState,
    VisibilityContext,
    evaluate_logic_expression,
    evaluate_visibility,
)

__all__ = [
    # Errors
    "JsonRendererError",
    "ActionCancelledError",
    "StreamTransportError",
    "ConfigError",
    # Paths and values
    "split_path",
    "get_by_path",
    "set_by_path",
    "is_path_reference",
    "resolve_dynamic_value",
    "interpolate_string",
    "strict_equals",
    # Logic
    "AuthState",
    "VisibilityContext",
    "evaluate_logic_expression",
    "evaluate_visibility",
    # Validation
    "BUILTIN_VALIDATION_FUNCTIONS",
    "ValidationFunction",
    "ValidationContext",
    "ValidationCheckResult",
    "ValidationResult",
    "run_validation",
    "run_validation_check",
    # Actions
    "ActionHandler",
    "ERROR_MESSAGE_TOKEN",
    "resolve_action",
    "execute_action",
    # Catalog
    "ComponentDefinition",
    "ActionDefinition",
    "Catalog",
    "CatalogValidationResult",
    "create_catalog",
    "generate_catalog_prompt",
    # Patches
    "empty_tree",
    "parse_patch_line",
    "apply_patch",
    "apply_patches",
    "flat_to_tree",
]
