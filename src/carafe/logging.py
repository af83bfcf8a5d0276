"""Application logger setup.

Records logged while a request is handled carry its ``method``, ``path``
and the ``endpoint`` of the matched route, so a line reads::

    [2024-05-01 12:00:00,000] ERROR GET /articles/1 (ArticleController.show): Exception on ...

Outside of a request, and before a route matched, those fields are ``-``.
"""
import io
import logging
import sys

from carafe.ctx import get_request_context
from carafe.exceptions import NoRequestContext

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(method)s %(path)s (%(endpoint)s): %(message)s"


def _active_context():
    try:
        return get_request_context()
    except NoRequestContext:
        return None


class RequestInfoFilter(logging.Filter):
    """Set ``method``, ``path`` and ``endpoint`` on every record."""

    def filter(self, record):
        ctx = _active_context()
        if ctx is None:
            record.method = record.path = record.endpoint = "-"
        else:
            record.method = ctx.request.method
            record.path = ctx.request.path
            record.endpoint = ctx.route.endpoint if ctx.route is not None else "-"
        return True


class RequestErrorsStream:
    """Writes to the ``wsgi.errors`` stream of the request being handled,
    or to ``sys.stderr`` outside of one."""

    def target(self):
        ctx = _active_context()
        if ctx is None:
            return sys.stderr
        return ctx.environ.get("wsgi.errors", sys.stderr)

    def write(self, data):
        stream = self.target()
        # Werkzeug's test environ uses a BytesIO.
        if isinstance(stream, io.BytesIO) and isinstance(data, str):
            data = data.encode("utf-8")
        return stream.write(data)

    def flush(self):
        return self.target().flush()


request_info = RequestInfoFilter()
errors_stream = RequestErrorsStream()

default_handler = logging.StreamHandler(errors_stream)
default_handler.setFormatter(logging.Formatter(LOG_FORMAT))
# Records from child loggers skip the logger filter.
default_handler.addFilter(request_info)


def _is_handled(logger):
    level = logger.getEffectiveLevel()
    while logger is not None:
        if any(handler.level <= level for handler in logger.handlers):
            return True
        if not logger.propagate:
            return False
        logger = logger.parent
    return False


def create_logger(app):
    """Return the logger named after the application.

    In debug mode the level is lowered to ``DEBUG`` unless one was set.
    The request fields are added to its records, and :data:`default_handler`
    is attached when nothing in the logger's chain would emit them.
    """
    logger = logging.getLogger(app.import_name or "carafe")
    if app.debug and not logger.level:
        logger.setLevel(logging.DEBUG)
    if request_info not in logger.filters:
        logger.addFilter(request_info)
    if not _is_handled(logger):
        logger.addHandler(default_handler)
    return logger
