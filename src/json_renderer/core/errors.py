"""
Error types for json-renderer.

Malformed input (bad patch lines, unknown validation functions, missing
handlers or renderers) is never raised; it is logged and skipped. The types
here cover the outcomes a caller must be able to tell apart.
"""


class JsonRendererError(Exception):
    """Base exception for all json-renderer errors."""


class ActionCancelledError(JsonRendererError):
    """
    Raised out of an action dispatch when its confirmation was cancelled.

    This is a user decision, not a handler failure.
    """

    def __init__(self, action_name: str):
        self.action_name = action_name
        super().__init__(f"Action cancelled: {action_name}")


class StreamTransportError(JsonRendererError):
    """
    Raised when the patch stream transport fails.

    Examples:
    - Non-2xx HTTP status from the generator endpoint
    - Connection dropped mid-stream
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ConfigError(JsonRendererError):
    """Raised when a config file cannot be read or fails validation."""
