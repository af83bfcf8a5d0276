"""Proxies to the state of the active request."""
from carafe.ctx import _request_ctx_var
from carafe.exceptions import NoRequestContext


class _ProxyLookup:
    """Forward attribute and item access to an object looked up per call."""

    def __init__(self, lookup_func, name=None):
        object.__setattr__(self, "_lookup_func", lookup_func)
        object.__setattr__(self, "__name__", name)

    def _get_current_object(self):
        try:
            return self._lookup_func()
        except LookupError:
            raise NoRequestContext() from None

    def __getattr__(self, name):
        return getattr(self._get_current_object(), name)

    def __setattr__(self, name, value):
        setattr(self._get_current_object(), name, value)

    def __getitem__(self, key):
        return self._get_current_object()[key]

    def __setitem__(self, key, value):
        self._get_current_object()[key] = value

    def __contains__(self, key):
        return key in self._get_current_object()

    def __iter__(self):
        return iter(self._get_current_object())

    def __len__(self):
        return len(self._get_current_object())

    def __bool__(self):
        try:
            self._get_current_object()
            return True
        except NoRequestContext:
            return False

    def __eq__(self, other):
        return self._get_current_object() == other

    def __hash__(self):
        return id(self)

    def __repr__(self):
        try:
            return repr(self._get_current_object())
        except NoRequestContext:
            return f"<LocalProxy unbound {self.__name__}>"


def _get_app():
    return _request_ctx_var.get().app


def _get_request():
    return _request_ctx_var.get().request


def _get_config():
    return _request_ctx_var.get().config


current_app = _ProxyLookup(_get_app, name="current_app")
request = _ProxyLookup(_get_request, name="request")
#: The configuration of the active request, not the application's.
config = _ProxyLookup(_get_config, name="config")


def has_request_context():
    """Return True if a request context is active."""
    try:
        _request_ctx_var.get()
        return True
    except LookupError:
        return False
