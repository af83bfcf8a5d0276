"""Request context management using contextvars."""
import contextvars

from carafe.exceptions import NoRequestContext, ResponseAlreadySent

_request_ctx_var = contextvars.ContextVar("carafe.request_ctx")


def get_request_context():
    """Return the active :class:`RequestContext` or raise :class:`NoRequestContext`."""
    try:
        return _request_ctx_var.get()
    except LookupError:
        raise NoRequestContext() from None


class RequestContext:
    """State of a single request: the environ, the request object, the
    matched route, the request's own configuration and the response that
    will be sent.

    ``config`` is derived from the application config when the context is
    created. Controllers read themes and metadata from it and write
    metadata back to it, so nothing they change outlives the request.
    """

    def __init__(self, app, environ, request=None):
        self.app = app
        self.environ = environ
        if request is None:
            request = app.request_class(environ)
        self.request = request
        self.config = app.config.derive()
        self.route = None
        self.response = None
        self._tokens = []

    def install_response(self, response):
        if self.response is not None:
            raise ResponseAlreadySent(
                "A response has already been sent for this request."
            )
        self.response = response

    def discard_response(self):
        self.response = None

    def push(self):
        self._tokens.append(_request_ctx_var.set(self))

    def pop(self):
        token = self._tokens.pop()
        _request_ctx_var.reset(token)

    def __enter__(self):
        self.push()
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.pop()

    def __repr__(self):
        return (
            f"<{type(self).__name__} {self.request.url!r}"
            f" [{self.request.method}] of {self.app.name}>"
        )
