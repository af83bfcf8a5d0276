"""Application configuration store."""
import json
import os

from carafe.exceptions import ConfigKeyError

#: Name of the active theme (a directory under ``<layout>/Template``).
THEME_NAME = "THEME_NAME"
#: Root directory holding the theme layouts.
THEME_LAYOUT_PATH = "THEME_LAYOUT_PATH"
#: Page metadata (``title``, ``description``) handed to every layout.
META = "META"
#: Deployment environment; ``"prod"`` hides debug details on error pages.
ENV = "ENV"

PROD = "prod"


class Config(dict):
    """A dict subclass holding the configuration of an application.

    Keys are uppercase strings by convention. The application keeps one
    instance; every request works on a :meth:`derive`-d copy so that
    per-request writes (page metadata, theme overrides) stay local to
    that request.
    """

    def __init__(self, root_path=None, defaults=None):
        if defaults is None and root_path is not None and not isinstance(
            root_path, (str, bytes, os.PathLike)
        ):
            defaults = root_path
            root_path = None
        self.root_path = os.fspath(root_path) if root_path else os.getcwd()
        super().__init__(defaults or {})

    def add(self, key, value):
        """Set ``key`` to ``value``, overwriting any previous value."""
        self[key] = value
        return self

    def require(self, key):
        """Return the value of ``key``, raising :class:`ConfigKeyError` if unset."""
        try:
            return self[key]
        except KeyError:
            raise ConfigKeyError(key) from None

    def derive(self):
        """Return a copy for a single request.

        Dict and list values are copied one level deep, which is enough for
        the metadata structure to be rewritten without touching this
        instance.
        """
        rv = type(self)(self.root_path)
        for key, value in self.items():
            if isinstance(value, dict):
                value = dict(value)
            elif isinstance(value, list):
                value = list(value)
            rv[key] = value
        return rv

    def from_mapping(self, mapping=None, **kwargs):
        """Update config from a mapping, an iterable of pairs, or keywords."""
        if mapping is not None:
            if hasattr(mapping, "items"):
                mapping = mapping.items()
            for key, value in mapping:
                self[key] = value
        for key, value in kwargs.items():
            self[key] = value
        return True

    def from_object(self, obj):
        """Update config from the UPPERCASE attributes of an object or module.

        ``obj`` may also be an import string.
        """
        if isinstance(obj, str):
            from werkzeug.utils import import_string
            obj = import_string(obj)
        for key in dir(obj):
            if key.isupper():
                self[key] = getattr(obj, key)
        return True

    def from_pyfile(self, filename, silent=False):
        """Execute a Python file and load its UPPERCASE globals."""
        filename = self._resolve(filename)
        d = {"__file__": filename, "__name__": "__config__"}
        try:
            with open(filename, "rb") as f:
                exec(compile(f.read(), filename, "exec"), d)  # noqa: S102
        except FileNotFoundError:
            if silent:
                return False
            raise OSError(
                f"Unable to load configuration file (No such file or directory): {filename!r}"
            )
        return self.from_object(_Namespace(d))

    def from_file(self, filename, load, silent=False, text=True):
        """Update config from a file parsed by ``load``.

        Usage::

            app.config.from_file("config.json", load=json.load)
        """
        filename = self._resolve(filename)
        try:
            with open(filename, "r" if text else "rb") as f:
                obj = load(f)
        except FileNotFoundError:
            if silent:
                return False
            raise OSError(
                f"Unable to load configuration file (No such file or directory): {filename!r}"
            )
        return self.from_mapping(obj)

    def from_prefixed_env(self, prefix="CARAFE", loads=json.loads):
        """Load environment variables starting with ``<prefix>_``.

        ``CARAFE_THEME_NAME=Dark`` sets ``THEME_NAME``. Values go through
        ``loads`` and are kept as plain strings when that fails. A double
        underscore descends into a dict value, so ``CARAFE_META__title``
        sets ``META["title"]``.
        """
        prefix = f"{prefix}_"
        for key in sorted(os.environ):
            if not key.startswith(prefix):
                continue
            value = os.environ[key]
            try:
                value = loads(value)
            except ValueError:
                pass
            key = key[len(prefix):]
            if "__" not in key:
                self[key] = value
                continue
            current = self
            *parts, tail = key.split("__")
            for part in parts:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[tail] = value
        return True

    def get_namespace(self, namespace, lowercase=True, trim_namespace=True):
        """Return the keys starting with ``namespace`` as a new dict."""
        rv = {}
        for key, value in self.items():
            if not key.startswith(namespace):
                continue
            if trim_namespace:
                key = key[len(namespace):]
            if lowercase:
                key = key.lower()
            rv[key] = value
        return rv

    def _resolve(self, filename):
        filename = os.fspath(filename)
        if not os.path.isabs(filename):
            filename = os.path.join(self.root_path, filename)
        return filename

    def __repr__(self):
        return f"<{type(self).__name__} {dict.__repr__(self)}>"


class _Namespace:
    def __init__(self, d):
        self.__dict__.update(d)
