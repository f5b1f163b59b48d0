"""Exceptions raised by the plugin and completion layers."""


class ToolforgeError(Exception):
    """Base class for all toolforge errors."""


class ToolNotFoundError(ToolforgeError):
    """The requested tool is not in the current plugin snapshot."""

    def __init__(self, name: str):
        super().__init__(f"Function '{name}' not found")
        self.name = name


class ToolExecutionError(ToolforgeError):
    """A tool's execute entry point raised."""

    def __init__(self, name: str, cause: BaseException):
        super().__init__(str(cause))
        self.name = name


class UpstreamAPIError(ToolforgeError):
    """The chat-completion API call failed or returned an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
