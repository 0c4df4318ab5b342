"""
Field validation state.

Tracks, per field path, whether the field was touched and the result of
its last validation. State is created on first touch or validate, updated
on validate, and removed on clear.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from json_renderer.core.validation import (
    ValidationContext,
    ValidationFunction,
    ValidationResult,
    run_validation,
)
from json_renderer.runtime.data import DataStore

logger = logging.getLogger(__name__)


@dataclass
class FieldValidationState:
    touched: bool = False
    validated: bool = False
    result: ValidationResult | None = None


class FieldValidator:
    """
    Validates fields of a DataStore by path.

    Example:
        validator = FieldValidator(store)
        validator.register_field("/form/email", {"checks": [required(), email()]})
        if not validator.validate_all():
            print(validator.errors_for("/form/email"))
    """

    def __init__(
        self,
        store: DataStore,
        custom_functions: Mapping[str, ValidationFunction] | None = None,
    ):
        self.store = store
        self.custom_functions: dict[str, ValidationFunction] = dict(custom_functions or {})
        self.field_states: dict[str, FieldValidationState] = {}
        self.field_configs: dict[str, Any] = {}

    def register_field(self, path: str, config: Any) -> None:
        self.field_configs[path] = config

    def validate(self, path: str, config: Any = None) -> ValidationResult:
        """
        Validate the field at path.

        Uses the given config or, if omitted, the registered one. A field
        validated for the first time counts as touched.
        """
        if config is None:
            config = self.field_configs.get(path)
        if config is None:
            logger.warning(f"No validation config for field: {path}")
            return ValidationResult(valid=True)

        result = run_validation(
            config,
            ValidationContext(
                value=self.store.get(path),
                data_model=self.store.data,
                custom_functions=self.custom_functions,
                auth_state=self.store.auth_state,
            ),
        )

        previous = self.field_states.get(path)
        self.field_states[path] = FieldValidationState(
            touched=previous.touched if previous else True,
            validated=True,
            result=result,
        )
        return result

    def touch(self, path: str) -> None:
        state = self.field_states.setdefault(path, FieldValidationState())
        state.touched = True

    def clear(self, path: str) -> None:
        self.field_states.pop(path, None)

    def validate_all(self) -> bool:
        """Validate every registered field. True if all are valid."""
        all_valid = True
        for path, config in self.field_configs.items():
            if not self.validate(path, config).valid:
                all_valid = False
        return all_valid

    def get_state(self, path: str) -> FieldValidationState | None:
        return self.field_states.get(path)

    def errors_for(self, path: str) -> list[str]:
        state = self.field_states.get(path)
        if state is None or state.result is None:
            return []
        return list(state.result.errors)

    def is_valid(self, path: str) -> bool:
        """True unless the last validation of path failed."""
        state = self.field_states.get(path)
        return state is None or state.result is None or state.result.valid
