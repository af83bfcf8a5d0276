"""Response classes and the factory choosing them by format and engine."""
from werkzeug.wrappers import Response as _WerkzeugResponse

from carafe.ctx import get_request_context
from carafe.exceptions import ResponseFactoryError


class Response(_WerkzeugResponse):
    """Base response with a fluent, content-first API.

    Controllers set a status and some content, then call :meth:`send`.
    The content is only turned into the body when the response is sent,
    so a template can still receive variables until then.
    """

    default_mimetype = "text/html"

    #: Format and engine names this class was registered for.
    format = None
    engine = None

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.content = None
        self.sent = False

    def set_http_code(self, code):
        self.status_code = code
        return self

    def set_content(self, content):
        self.content = content
        return self

    def get_content(self):
        return self.content

    def render_content(self):
        if self.content is None:
            return ""
        if isinstance(self.content, (str, bytes)):
            return self.content
        return str(self.content)

    def send(self):
        """Render the content into the body and hand the response to the
        active request context as the one to transmit.

        Sending is terminal: a second response for the same request raises
        :class:`~carafe.exceptions.ResponseAlreadySent`.
        """
        ctx = get_request_context()
        self.set_data(self.render_content())
        ctx.install_response(self)
        self.sent = True
        return self


class TextResponse(Response):
    default_mimetype = "text/plain"


class TemplateResponse(Response):
    """HTML response whose content is a :class:`~carafe.templating.Template`."""

    def render_content(self):
        content = self.content
        if hasattr(content, "render"):
            return content.render()
        return super().render_content()


class JsonApiResponse(Response):
    """JSON response for API callers.

    String content is taken to be encoded already and is sent verbatim;
    other values go through the application's JSON provider.
    """

    default_mimetype = "application/json"

    def render_content(self):
        content = self.content
        if isinstance(content, (str, bytes)):
            return content
        from carafe.globals import current_app
        return current_app.json.dumps(content)


class ResponseFactory:
    """Create responses from a (format, engine) pair.

    Pairs registered on this class are seen by every controller of the
    process. A subclass starts from a copy of its parent's pairs, so a
    controller can use its own factory to add or replace pairs without
    affecting the others::

        class XmlFactory(ResponseFactory):
            pass

        XmlFactory.register("xml", ResponseFactory.ENGINE_API, XmlResponse)

        class FeedController(Controller):
            response_factory = XmlFactory
    """

    FORMAT_HTML = "html"
    FORMAT_JSON = "json"
    FORMAT_TEXT = "text"

    ENGINE_DEFAULT = "default"
    ENGINE_TEMPLATE = "template"
    ENGINE_API = "api"

    _registry = {
        (FORMAT_HTML, ENGINE_DEFAULT): Response,
        (FORMAT_HTML, ENGINE_TEMPLATE): TemplateResponse,
        (FORMAT_JSON, ENGINE_API): JsonApiResponse,
        (FORMAT_JSON, ENGINE_DEFAULT): JsonApiResponse,
        (FORMAT_TEXT, ENGINE_DEFAULT): TextResponse,
    }

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._registry = dict(cls._registry)

    @classmethod
    def register(cls, format, engine, response_class):
        cls._registry[(format, engine)] = response_class

    @classmethod
    def create(cls, format, engine=ENGINE_DEFAULT):
        try:
            response_class = cls._registry[(format, engine)]
        except KeyError:
            raise ResponseFactoryError(
                f"No response class registered for format {format!r}"
                f" and engine {engine!r}."
            ) from None
        response = response_class()
        response.format = format
        response.engine = engine
        return response
