"""carafe: controller lifecycle and error pages for WSGI applications."""

__version__ = "0.1.0"

from carafe.app import Carafe
from carafe.collection import DataCollection
from carafe.config import Config
from carafe.controller import Controller, ControllerInterface
from carafe.ctx import RequestContext
from carafe.dispatch import Dispatcher, Failure, Success, run_lifecycle
from carafe.exceptions import (
    CarafeError,
    ConfigKeyError,
    ControllerError,
    NoRequestContext,
    ResponseAlreadySent,
    ResponseFactoryError,
)
from carafe.globals import current_app, has_request_context, request
from carafe.responses import (
    JsonApiResponse,
    Response,
    ResponseFactory,
    TemplateResponse,
    TextResponse,
)
from carafe.routing import Route, RouteMap
from carafe.templating import Template
from carafe.wrappers import Request

__all__ = [
    "__version__",
    "Carafe",
    "CarafeError",
    "Config",
    "ConfigKeyError",
    "Controller",
    "ControllerError",
    "ControllerInterface",
    "DataCollection",
    "Dispatcher",
    "Failure",
    "JsonApiResponse",
    "NoRequestContext",
    "Request",
    "RequestContext",
    "Response",
    "ResponseAlreadySent",
    "ResponseFactory",
    "ResponseFactoryError",
    "Route",
    "RouteMap",
    "Success",
    "Template",
    "TemplateResponse",
    "TextResponse",
    "current_app",
    "has_request_context",
    "request",
    "run_lifecycle",
]
