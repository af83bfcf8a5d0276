"""Helpers for describing exceptions on error pages."""
import traceback

from markupsafe import Markup


def format_trace(exc):
    """Return the stack trace of ``exc`` as text, most recent call last.

    Only the frames are included, not the exception line. An exception
    that was never raised has an empty trace.
    """
    return "".join(traceback.format_tb(exc.__traceback__))


def exception_code(exc):
    code = getattr(exc, "code", 0)
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    return 0


def debug_fragment(exc):
    """HTML describing ``exc`` for non-production error pages."""
    return Markup("<b>Exception[{code}]: {message}</b><pre>{trace}</pre>").format(
        code=exception_code(exc),
        message=str(exc),
        trace=format_trace(exc),
    )
