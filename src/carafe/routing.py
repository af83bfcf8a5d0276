"""Routes binding URL rules to controller actions.

Matching itself is Werkzeug's; this module only keeps track of which
controller class and action each endpoint stands for.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Type

from werkzeug.routing import Map, Rule


@dataclass(frozen=True)
class Route:
    """A controller action registered under ``endpoint``.

    Matching a request yields a copy carrying the URL parameters in
    ``params``.
    """

    endpoint: str
    rule: str
    controller: Type[Any]
    action: str = "run"
    methods: Optional[frozenset] = None
    params: Dict[str, Any] = field(default_factory=dict)

    def bind(self, params):
        return replace(self, params=dict(params))


class RouteMap:
    """The routes of an application, backed by a :class:`werkzeug.routing.Map`."""

    def __init__(self):
        self.url_map = Map()
        self._routes = {}

    def add(self, route):
        if route.endpoint in self._routes:
            raise AssertionError(
                f"Route endpoint {route.endpoint!r} is already registered."
            )
        methods = sorted(route.methods) if route.methods else None
        self.url_map.add(Rule(route.rule, endpoint=route.endpoint, methods=methods))
        self._routes[route.endpoint] = route
        return route

    def match(self, environ):
        """Return the route matching ``environ`` with its URL parameters bound.

        Raises Werkzeug's ``NotFound``, ``MethodNotAllowed`` or
        ``RequestRedirect`` like :meth:`MapAdapter.match` does.
        """
        adapter = self.url_map.bind_to_environ(environ)
        endpoint, params = adapter.match()
        return self._routes[endpoint].bind(params)

    def get(self, endpoint):
        return self._routes.get(endpoint)

    def iter_rules(self):
        return self.url_map.iter_rules()

    def __iter__(self):
        return iter(self._routes.values())

    def __len__(self):
        return len(self._routes)

    def __contains__(self, endpoint):
        return endpoint in self._routes
