"""
Action resolution and execution.

Resolution turns an action spec into a ResolvedAction: params are resolved
as dynamic values and the confirm title/message are interpolated. Execution
calls the handler with the resolved params and then follows the declared
success or error continuation.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from json_renderer.core.values import as_plain, interpolate_string, resolve_dynamic_value
from json_renderer.specs.actions import (
    ActionSpec,
    ChainOutcome,
    NavigateOutcome,
    ResolvedAction,
    SetOutcome,
)

logger = logging.getLogger(__name__)

# Handlers receive resolved params and may return a value or an awaitable
ActionHandler = Callable[[dict[str, Any]], Any]
SetData = Callable[[str, Any], None]
Navigate = Callable[[str], None]
ChainAction = Callable[[str], Awaitable[Any]]

# Literal placeholder in onError.set values, replaced by the error message
ERROR_MESSAGE_TOKEN = "$error.message"


def to_action_spec(action: ActionSpec | Mapping[str, Any]) -> ActionSpec:
    """Coerce the JSON form of an action into an ActionSpec."""
    if isinstance(action, ActionSpec):
        return action
    return ActionSpec.model_validate(as_plain(action))


def resolve_action(action: ActionSpec | Mapping[str, Any], data_model: Any) -> ResolvedAction:
    """
    Resolve params and interpolate confirm text against the data model.

    Pure: the data model is only read.

    Raises:
        pydantic.ValidationError: If the action is not a valid action spec.
    """
    spec = to_action_spec(action)

    params = {
        key: resolve_dynamic_value(as_plain(value), data_model)
        for key, value in (spec.params or {}).items()
    }

    confirm = None
    if spec.confirm is not None:
        confirm = spec.confirm.model_copy(
            update={
                "title": interpolate_string(spec.confirm.title, data_model),
                "message": interpolate_string(spec.confirm.message, data_model),
            }
        )

    return ResolvedAction(
        name=spec.name,
        params=params,
        confirm=confirm,
        on_success=spec.on_success,
        on_error=spec.on_error,
    )


async def execute_action(
    action: ResolvedAction,
    handler: ActionHandler,
    set_data: SetData,
    navigate: Navigate | None = None,
    execute_action: ChainAction | None = None,
) -> None:
    """
    Run a resolved action and its continuations.

    On success, onSuccess navigates, writes values, or chains another action
    by name. If the handler (or the success continuation) raises and an
    onError is declared, the error is absorbed: onError.set writes its
    values with "$error.message" replaced by the error text, onError.action
    chains. Without onError the exception propagates.

    Args:
        action: The resolved action.
        handler: Registered handler for action.name.
        set_data: Writes one value into the data model by path.
        navigate: Route callback, needed for navigate continuations.
        execute_action: Dispatches another action by name, needed for chains.
    """
    try:
        result = handler(dict(action.params))
        if inspect.isawaitable(result):
            await result

        outcome = action.on_success
        if isinstance(outcome, NavigateOutcome):
            if navigate is not None:
                navigate(outcome.navigate)
            else:
                logger.warning(f"Action {action.name!r} navigates but no navigate callback is set")
        elif isinstance(outcome, SetOutcome):
            for path, value in outcome.updates.items():
                set_data(path, value)
        elif isinstance(outcome, ChainOutcome) and execute_action is not None:
            logger.debug(f"Action {action.name!r} chaining to {outcome.action!r}")
            await execute_action(outcome.action)
    except Exception as error:
        recovery = action.on_error
        if recovery is None:
            raise

        logger.debug(f"Action {action.name!r} failed, running onError: {error}")
        if isinstance(recovery, SetOutcome):
            for path, value in recovery.updates.items():
                if value == ERROR_MESSAGE_TOKEN:
                    value = str(error)
                set_data(path, value)
        elif isinstance(recovery, ChainOutcome) and execute_action is not None:
            await execute_action(recovery.action)
