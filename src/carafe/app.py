"""The carafe WSGI application."""
import os
import sys

from werkzeug.exceptions import HTTPException
from werkzeug.test import Client, EnvironBuilder

from carafe.config import Config
from carafe.ctx import RequestContext
from carafe.dispatch import Dispatcher
from carafe.json_provider import JSONProvider
from carafe.responses import TextResponse
from carafe.routing import Route, RouteMap
from carafe.wrappers import Request


def _default_config(root_path):
    return {
        "ENV": os.environ.get("CARAFE_ENV", "prod"),
        "DEBUG": False,
        "TESTING": False,
        "PROPAGATE_EXCEPTIONS": None,
        "THEME_NAME": "Default",
        "THEME_LAYOUT_PATH": os.path.join(root_path, "layout"),
        "TEMPLATE_EXTENSION": ".html",
        "META": {"title": "", "description": ""},
        "JSON_SORT_KEYS": False,
    }


def _find_root_path(import_name):
    module = sys.modules.get(import_name)
    if module is not None and getattr(module, "__file__", None):
        return os.path.dirname(os.path.abspath(module.__file__))
    return os.getcwd()


class Carafe:
    """A WSGI application dispatching requests to controllers.

    ::

        app = Carafe(__name__)

        @app.route("/articles/<slug>", action="show")
        class ArticleController(Controller):
            def show(self, slug):
                ...

    Every request gets its own :class:`~carafe.ctx.RequestContext`, with
    a copy of :attr:`config` the controllers may change freely.
    """

    request_class = Request
    config_class = Config
    json_provider_class = JSONProvider
    dispatcher_class = Dispatcher

    def __init__(self, import_name=None, root_path=None):
        self.import_name = import_name
        if root_path is None:
            root_path = _find_root_path(import_name)
        self.root_path = root_path
        self.config = self.config_class(root_path, _default_config(root_path))
        self.routes = RouteMap()
        self.dispatcher = self.dispatcher_class()
        self.json = self.json_provider_class(self)
        self._jinja_env = None
        self._logger = None

    @property
    def name(self):
        if self.import_name == "__main__":
            fn = getattr(sys.modules["__main__"], "__file__", None)
            if fn is not None:
                return os.path.splitext(os.path.basename(fn))[0]
        return self.import_name

    @property
    def debug(self):
        return self.config["DEBUG"]

    @debug.setter
    def debug(self, value):
        self.config["DEBUG"] = bool(value)

    @property
    def testing(self):
        return self.config["TESTING"]

    @testing.setter
    def testing(self, value):
        self.config["TESTING"] = bool(value)

    @property
    def logger(self):
        if self._logger is None:
            from carafe.logging import create_logger
            self._logger = create_logger(self)
        return self._logger

    @property
    def jinja_env(self):
        """The Jinja2 environment templates are rendered with (lazy, cached)."""
        if self._jinja_env is None:
            from carafe.templating import create_environment
            self._jinja_env = create_environment(self)
        return self._jinja_env

    def add_route(self, rule, controller, action="run", endpoint=None, methods=None):
        """Register ``controller``'s ``action`` for the URL ``rule``.

        The endpoint defaults to ``<ControllerName>.<action>``.
        """
        if endpoint is None:
            endpoint = f"{controller.__name__}.{action}"
        if methods is not None:
            methods = frozenset(m.upper() for m in methods)
        return self.routes.add(
            Route(endpoint, rule, controller, action=action, methods=methods)
        )

    def route(self, rule, **options):
        """Class decorator form of :meth:`add_route`."""
        def decorator(controller):
            self.add_route(rule, controller, **options)
            return controller
        return decorator

    def request_context(self, environ):
        return RequestContext(self, environ)

    def test_request_context(self, *args, **kwargs):
        """A request context for the environ Werkzeug's ``EnvironBuilder``
        builds from the given arguments."""
        builder = EnvironBuilder(*args, **kwargs)
        try:
            return self.request_context(builder.get_environ())
        finally:
            builder.close()

    def test_client(self):
        return Client(self)

    def log_exception(self, exc, request=None):
        if request is None:
            self.logger.error("Exception while handling a request", exc_info=exc)
        else:
            self.logger.error(
                "Exception on %s [%s]", request.path, request.method, exc_info=exc
            )

    def _should_propagate(self):
        rv = self.config.get("PROPAGATE_EXCEPTIONS")
        if rv is not None:
            return rv
        return self.testing or self.debug

    def full_dispatch_request(self, ctx):
        """Match the request of ``ctx`` and dispatch it to its controller."""
        try:
            route = self.routes.match(ctx.environ)
        except HTTPException as e:
            return e.get_response(ctx.environ)
        ctx.route = route
        self.logger.debug("Dispatching to %s", route.controller.__name__)
        return self.dispatcher.dispatch(route, ctx)

    def wsgi_app(self, environ, start_response):
        ctx = self.request_context(environ)
        with ctx:
            try:
                response = self.full_dispatch_request(ctx)
            except Exception as exc:
                # The error response could not be produced.
                self.log_exception(exc, ctx.request)
                if self._should_propagate():
                    raise
                response = TextResponse("Internal Server Error", status=500)
            return response(environ, start_response)

    def __call__(self, environ, start_response):
        return self.wsgi_app(environ, start_response)

    def run(self, host="127.0.0.1", port=5000, debug=None, **options):
        """Serve the application with Werkzeug's development server."""
        from werkzeug.serving import run_simple

        if debug is not None:
            self.debug = debug
        options.setdefault("use_reloader", self.debug)
        options.setdefault("use_debugger", False)
        run_simple(host, port, self, **options)

    def __repr__(self):
        return f"<{type(self).__name__} {self.name!r}>"
