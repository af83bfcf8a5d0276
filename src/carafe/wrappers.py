"""Request wrapper built on Werkzeug."""
from werkzeug.wrappers import Request as _WerkzeugRequest

from carafe.ctx import get_request_context


class Request(_WerkzeugRequest):
    """The request object handed to controllers.

    Adds AJAX detection and a factory building a request from the active
    request context.
    """

    #: Header set by JavaScript HTTP clients on asynchronous calls.
    ajax_header = "X-Requested-With"

    @classmethod
    def create_from_global(cls):
        """Build a request from the environ of the active request context.

        Raises :class:`~carafe.exceptions.NoRequestContext` when no request
        is being handled.
        """
        return cls(get_request_context().environ)

    @property
    def is_ajax(self):
        return bool(self.headers.get(self.ajax_header))
