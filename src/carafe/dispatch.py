"""Drive a controller through its lifecycle and pick the response."""
from dataclasses import dataclass
from typing import Any, Union

from carafe.responses import Response, ResponseFactory


@dataclass(frozen=True)
class Success:
    """The lifecycle completed; ``value`` is what the action returned."""

    value: Any = None


@dataclass(frozen=True)
class Failure:
    """A lifecycle step raised ``error``; later steps did not run."""

    error: Exception
    step: str


Result = Union[Success, Failure]


def run_lifecycle(controller, action="run", params=None) -> Result:
    """Run ``run_before``, the action and ``run_after`` on ``controller``.

    Exceptions are returned as a :class:`Failure` naming the step that
    raised instead of propagating.
    """
    step = "run_before"
    try:
        controller.run_before()
        step = action
        value = getattr(controller, action)(**(params or {}))
        step = "run_after"
        controller.run_after()
    except Exception as exc:
        return Failure(exc, step)
    return Success(value)


class Dispatcher:
    """Build the controller of a matched route and produce its response."""

    def __init__(self, response_factory=ResponseFactory):
        self.response_factory = response_factory

    def dispatch(self, route, context):
        """Handle the request of ``context`` with ``route``'s controller.

        Returns the response installed on the context. When the lifecycle
        fails, any response the controller sent already is dropped and
        :meth:`~carafe.controller.Controller.handle_exception` sends the
        error response instead.
        """
        controller = route.controller(route, context.request, context=context)
        result = run_lifecycle(controller, route.action, route.params)

        if isinstance(result, Success) and context.response is None:
            try:
                self.make_response(result.value).send()
            except Exception as exc:
                result = Failure(exc, "response")

        if isinstance(result, Failure):
            context.app.logger.debug(
                "%s.%s failed in %s", type(controller).__name__, route.action, result.step
            )
            context.discard_response()
            controller.handle_exception(result.error)
        return context.response

    def make_response(self, rv):
        """Convert an action's return value into an unsent response."""
        factory = self.response_factory
        if isinstance(rv, Response):
            return rv
        if rv is None:
            return factory.create(factory.FORMAT_TEXT).set_http_code(204)
        if isinstance(rv, (str, bytes)):
            return factory.create(factory.FORMAT_HTML).set_content(rv)
        if isinstance(rv, (dict, list)):
            return factory.create(factory.FORMAT_JSON, factory.ENGINE_API).set_content(rv)
        raise TypeError(
            f"The action returned {type(rv).__name__!r}; expected a Response,"
            " a string, a dict, a list or None."
        )
