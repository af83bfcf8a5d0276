"""Jinja2 templates addressed by filesystem path."""
import os

import jinja2
from markupsafe import Markup

DEFAULT_EXTENSION = ".html"


class PathLoader(jinja2.BaseLoader):
    """Load templates by their path on disk.

    Template names are absolute paths (or paths relative to ``root``),
    which is how layouts and module views are addressed.
    """

    def __init__(self, root=None):
        self.root = root

    def get_source(self, environment, template):
        path = template
        if self.root and not os.path.isabs(path):
            path = os.path.join(self.root, path)
        if not os.path.isfile(path):
            raise jinja2.TemplateNotFound(template)
        mtime = os.path.getmtime(path)
        with open(path, encoding="utf-8") as f:
            source = f.read()
        return source, path, lambda: os.path.getmtime(path) == mtime


def create_environment(app=None, **options):
    """Create the Jinja2 environment used to render :class:`Template` objects."""
    root = getattr(app, "root_path", None)
    options.setdefault("loader", PathLoader(root))
    options.setdefault("autoescape", jinja2.select_autoescape(["html", "htm", "xml"]))
    options.setdefault("extensions", ["jinja2.ext.do"])
    if app is not None:
        options.setdefault("auto_reload", app.debug)
    return jinja2.Environment(**options)


_default_env = None


def _get_environment():
    global _default_env
    from carafe.globals import has_request_context, current_app
    if has_request_context():
        return current_app.jinja_env
    if _default_env is None:
        _default_env = create_environment()
    return _default_env


def _get_extension():
    from carafe.globals import has_request_context, config
    if has_request_context():
        return config.get("TEMPLATE_EXTENSION", DEFAULT_EXTENSION)
    return DEFAULT_EXTENSION


class Template:
    """A renderable template file plus the variables bound to it.

    ``path`` names the file without its extension, e.g.
    ``<layout>/Template/Default/Main``. The file is only read when
    :meth:`render` runs. Templates implement ``__html__`` so a template
    bound as a variable of another one renders inline without escaping.
    """

    def __init__(self, path, environment=None, extension=None):
        self.path = os.fspath(path)
        self.environment = environment
        self.extension = extension
        self._vars = {}

    @property
    def vars(self):
        return dict(self._vars)

    def set_var(self, name, value):
        self._vars[name] = value
        return self

    def get_var(self, name, default=None):
        return self._vars.get(name, default)

    @property
    def filename(self):
        extension = self.extension
        if extension is None:
            extension = _get_extension()
        return self.path + extension

    def render(self):
        env = self.environment or _get_environment()
        return env.get_template(self.filename).render(self._vars)

    def __html__(self):
        return Markup(self.render())

    def __repr__(self):
        return f"<{type(self).__name__} {self.path!r}>"
