"""Exception types raised by carafe."""


class CarafeError(Exception):
    """Base class for framework errors."""


class ControllerError(CarafeError):
    """An application error raised from a controller action.

    ``code`` is an application-defined number shown on the debug error
    page as ``Exception[<code>]``.
    """

    def __init__(self, message="", code=0):
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigKeyError(CarafeError, KeyError):
    """Raised when a required configuration key is not set."""

    def __init__(self, key):
        super().__init__(key)
        self.key = key

    def __str__(self):
        return f"Configuration key {self.key!r} is not set."


class ResponseFactoryError(CarafeError, ValueError):
    """Raised for a format/engine pair with no registered response class."""


class ResponseAlreadySent(CarafeError, RuntimeError):
    """Raised when ``send()`` is called on a context that already has a response."""


class NoRequestContext(CarafeError, RuntimeError):
    """Raised when request state is looked up outside a request context."""

    def __init__(self, message="Working outside of request context."):
        super().__init__(message)
