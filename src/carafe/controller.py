"""Base class for request-handling controllers."""
import abc

from markupsafe import Markup

from carafe.collection import DataCollection
from carafe.config import ENV, META, PROD, THEME_LAYOUT_PATH, THEME_NAME
from carafe.ctx import get_request_context
from carafe.debughelpers import debug_fragment, format_trace
from carafe.responses import ResponseFactory
from carafe.templating import Template
from carafe.wrappers import Request


def strip_tags(value):
    """Remove markup tags from ``value``.

    Whitespace runs collapse to single spaces and the ends are trimmed.
    Entities stay encoded, so escaped markup never turns back into tags.
    """
    return Markup.escape(Markup(value).striptags())


class ControllerInterface(abc.ABC):
    """The hooks a dispatcher drives, in this order:
    ``run_before``, the action, ``run_after``; ``handle_exception`` instead
    of the remaining steps when one of them raises.
    """

    @abc.abstractmethod
    def run_before(self):
        pass

    @abc.abstractmethod
    def run(self, **params):
        pass

    @abc.abstractmethod
    def run_after(self):
        pass

    @abc.abstractmethod
    def handle_exception(self, exc):
        pass


class Controller(ControllerInterface):
    """Base class of the application's controllers.

    A controller is built for one request by the dispatcher, with the
    matched :class:`~carafe.routing.Route` and usually the request. It
    works against a :class:`~carafe.ctx.RequestContext`: the theme and the
    page metadata come from that context's configuration, and metadata
    overrides are written back there, so they are gone once the request
    is over.

    Subclasses implement :meth:`run` (or the action named by their route)
    and fill the data collection the view is rendered with::

        class ArticleController(Controller):
            def run_before(self):
                super().run_before()
                self.set_module_path("/srv/app/modules/article")

            def show(self, slug):
                article = load_article(slug)
                self.set_metas(article.title, article.summary)
                self.add_data("article", article)
                return self.render("Show")
    """

    request_class = Request
    response_factory = ResponseFactory

    #: Environments in which error pages never show exception details.
    production_environments = (PROD,)

    def __init__(self, route, request=None, context=None):
        self._route = route
        self._request = request
        self._context = context
        self.data_collection = DataCollection()
        self.module_path = ""
        self.theme_name = ""
        self.theme_layout_path = ""
        self.theme_layout_template = "Main"
        self.response = None

    @property
    def route(self):
        return self._route

    @property
    def context(self):
        """The request context worked against; the active one unless given."""
        if self._context is None:
            self._context = get_request_context()
        return self._context

    @property
    def config(self):
        """The configuration of the request being handled."""
        return self.context.config

    @property
    def app(self):
        return self.context.app

    def run_before(self):
        """Resolve the theme from configuration.

        Runs before the action. Every call reads the configuration again.
        """
        self.theme_name = self.config.require(THEME_NAME)
        self.theme_layout_path = self.config.require(THEME_LAYOUT_PATH)

    def run(self, **params):
        raise NotImplementedError(
            f"{type(self).__name__} does not implement the default action."
        )

    def run_after(self):
        """Runs after a successful action."""

    def get_request(self):
        if self._request is None:
            self._request = self.request_class.create_from_global()
        return self._request

    def handle_exception(self, exc):
        """Send a 500 response describing ``exc``.

        AJAX requests get the stack trace as a JSON string. Other requests
        get the theme's ``Main`` layout with the exception details as its
        ``content``, left empty in production.
        """
        request = self.get_request()
        self.app.log_exception(exc, request)

        factory = self.response_factory
        if request.is_ajax:
            format, engine = factory.FORMAT_JSON, factory.ENGINE_API
            content = self.app.json.dumps(format_trace(exc))
        else:
            format, engine = factory.FORMAT_HTML, factory.ENGINE_TEMPLATE
            if self.config.get(ENV, PROD) in self.production_environments:
                details = Markup("")
            else:
                details = debug_fragment(exc)
            layout_path = self.config.require(THEME_LAYOUT_PATH)
            theme_name = self.config.require(THEME_NAME)
            content = Template(f"{layout_path}/Template/{theme_name}/Main")
            content.set_var("content", details)
            content.set_var("meta", self.config.get(META))

        response = factory.create(format, engine)
        response.set_http_code(500).set_content(content).send()

    def render(self, template_name, status=200):
        """Render ``<module_path>/<template_name>`` inside the theme layout.

        The module template receives every item of the data collection;
        the layout receives it as ``content`` along with ``meta``.
        """
        view = Template(f"{self.module_path}/{template_name}")
        for key, value in self.data_collection.items():
            view.set_var(key, value)

        layout = Template(
            f"{self.theme_layout_path}/Template/{self.theme_name}/{self.theme_layout_template}"
        )
        layout.set_var("content", view)
        layout.set_var("meta", self.config.get(META))

        factory = self.response_factory
        self.response = factory.create(factory.FORMAT_HTML, factory.ENGINE_TEMPLATE)
        return self.response.set_http_code(status).set_content(layout)

    def render_json(self, status=200):
        """Return the data collection as a JSON API response."""
        factory = self.response_factory
        self.response = factory.create(factory.FORMAT_JSON, factory.ENGINE_API)
        return self.response.set_http_code(status).set_content(self.data_collection.to_dict())

    def add_data(self, key, value):
        self.data_collection.add(key, value)
        return self

    def get_data(self):
        return self.data_collection

    def get_module_path(self):
        return self.module_path

    def set_module_path(self, module_path):
        self.module_path = module_path
        return self

    def get_theme_layout_template(self):
        return self.theme_layout_template

    def set_theme_layout_template(self, theme_layout_template):
        self.theme_layout_template = theme_layout_template
        return self

    def set_metas(self, title=None, description=None):
        """Override the page metadata of the current request.

        A title is prepended to the configured one (``"Page - Site"``); a
        description replaces the configured one. Tags are stripped from
        both results.
        """
        meta = dict(self.config.require(META))

        if title is not None:
            meta["title"] = strip_tags(f"{title} - {meta.get('title', '')}")

        if description is not None:
            meta["description"] = strip_tags(description)

        self.config.add(META, meta)

        return self
