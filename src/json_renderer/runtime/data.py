"""
Data model owner.

DataStore holds the data model a tree is resolved against. Writes go
through `set`/`update`; each write replaces the top-level dict so a
snapshot taken from `data` before the write keeps its top-level keys.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from typing import Any

from json_renderer.core.paths import get_by_path, set_by_path
from json_renderer.core.visibility import AuthState, VisibilityContext, evaluate_visibility

logger = logging.getLogger(__name__)

OnChange = Callable[[str, Any], None]


class DataStore:
    """
    Mutable data model with path-addressed access.

    Example:
        store = DataStore({"user": {"name": "Ada"}})
        store.set("/user/email", "ada@example.com")
        store.get("/user/email")  # "ada@example.com"
    """

    def __init__(
        self,
        initial_data: Mapping[str, Any] | None = None,
        auth_state: AuthState | None = None,
        on_change: OnChange | None = None,
    ):
        self._data: dict[str, Any] = copy.deepcopy(dict(initial_data or {}))
        self.auth_state = auth_state
        self.on_change = on_change

    @property
    def data(self) -> dict[str, Any]:
        """Current data model."""
        return self._data

    def get(self, path: str) -> Any:
        return get_by_path(self._data, path)

    def set(self, path: str, value: Any) -> None:
        """Write value at path and notify on_change."""
        data = dict(self._data)
        set_by_path(data, path, value)
        self._data = data
        logger.debug(f"Data set {path}")
        if self.on_change is not None:
            self.on_change(path, value)

    def update(self, updates: Mapping[str, Any]) -> None:
        """Write several path/value pairs in order."""
        for path, value in updates.items():
            self.set(path, value)

    def visibility_context(self) -> VisibilityContext:
        return VisibilityContext(data_model=self._data, auth_state=self.auth_state)

    def is_visible(self, condition: Any) -> bool:
        return evaluate_visibility(condition, self.visibility_context())
