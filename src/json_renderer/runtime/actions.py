"""
Action dispatcher.

Owns the handler registry, the set of in-flight action names and the
single pending confirmation. One dispatch moves through:

    resolving -> (confirming) -> executing -> (chaining) -> idle

Confirmation suspends the dispatch on an asyncio future that `confirm()`
resolves and `cancel()` rejects with ActionCancelledError.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from json_renderer.core.actions import ActionHandler, Navigate, execute_action, resolve_action
from json_renderer.core.errors import ActionCancelledError
from json_renderer.runtime.data import DataStore
from json_renderer.specs.actions import ActionSpec, ResolvedAction

logger = logging.getLogger(__name__)


class PendingConfirmation:
    """A dispatch waiting for the user to confirm or cancel."""

    def __init__(self, action: ResolvedAction, future: asyncio.Future[None]):
        self.action = action
        self.future = future

    @property
    def title(self) -> str:
        return self.action.confirm.title if self.action.confirm else ""

    @property
    def message(self) -> str:
        return self.action.confirm.message if self.action.confirm else ""

    @property
    def confirm_label(self) -> str:
        return (self.action.confirm and self.action.confirm.confirm_label) or "Confirm"

    @property
    def cancel_label(self) -> str:
        return (self.action.confirm and self.action.confirm.cancel_label) or "Cancel"

    @property
    def variant(self) -> str:
        return (self.action.confirm and self.action.confirm.variant) or "default"

    @property
    def done(self) -> bool:
        return self.future.done()

    def resolve(self) -> None:
        if not self.future.done():
            self.future.set_result(None)

    def reject(self) -> None:
        if not self.future.done():
            self.future.set_exception(ActionCancelledError(self.action.name))


class ActionDispatcher:
    """
    Dispatches actions against a DataStore.

    Example:
        dispatcher = ActionDispatcher(store, handlers={"save": save_handler})
        await dispatcher.execute({"name": "save", "params": {"id": {"path": "/id"}}})
    """

    def __init__(
        self,
        store: DataStore,
        handlers: Mapping[str, ActionHandler] | None = None,
        navigate: Navigate | None = None,
    ):
        self.store = store
        self.handlers: dict[str, ActionHandler] = dict(handlers or {})
        self.navigate = navigate
        self._loading: set[str] = set()
        self._pending: PendingConfirmation | None = None

    # -------------------------------------------------------------------------
    # Registry and state
    # -------------------------------------------------------------------------

    def register_handler(self, name: str, handler: ActionHandler) -> None:
        self.handlers[name] = handler

    @property
    def loading_actions(self) -> frozenset[str]:
        """Names of actions currently executing."""
        return frozenset(self._loading)

    def is_loading(self, name: str) -> bool:
        return name in self._loading

    @property
    def pending_confirmation(self) -> PendingConfirmation | None:
        return self._pending

    def confirm(self) -> bool:
        """Resume the pending dispatch. Returns False if nothing is pending."""
        pending, self._pending = self._pending, None
        if pending is None:
            return False
        pending.resolve()
        return True

    def cancel(self) -> bool:
        """Reject the pending dispatch. Returns False if nothing is pending."""
        pending, self._pending = self._pending, None
        if pending is None:
            return False
        pending.reject()
        return True

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    async def execute(self, action: ActionSpec | Mapping[str, Any]) -> None:
        """
        Dispatch one action.

        Malformed actions and actions without a registered handler are
        skipped with a warning.

        Raises:
            ActionCancelledError: If the confirmation was cancelled.
            Exception: Whatever the handler raised, when no onError is declared.
        """
        try:
            resolved = resolve_action(action, self.store.data)
        except ValidationError as e:
            logger.warning(f"Skipping malformed action: {e}")
            return

        handler = self.handlers.get(resolved.name)
        if handler is None:
            logger.warning(f"No handler registered for action: {resolved.name}")
            return

        if resolved.confirm is not None:
            await self._wait_for_confirmation(resolved)

        logger.debug(f"Executing action {resolved.name!r}")
        self._loading.add(resolved.name)
        try:
            await execute_action(
                resolved,
                handler,
                set_data=self.store.set,
                navigate=self.navigate,
                execute_action=self._chain,
            )
        finally:
            self._loading.discard(resolved.name)

    async def _chain(self, name: str) -> None:
        await self.execute({"name": name})

    async def _wait_for_confirmation(self, resolved: ResolvedAction) -> None:
        # Only one confirmation can be shown; a newer one cancels the older
        if self._pending is not None:
            logger.debug(f"Replacing pending confirmation for {self._pending.action.name!r}")
            self.cancel()

        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        pending = PendingConfirmation(resolved, future)
        self._pending = pending
        logger.debug(f"Awaiting confirmation for {resolved.name!r}")
        try:
            await future
        finally:
            if self._pending is pending:
                self._pending = None
