"""JSON serialization used by API responses."""
import dataclasses
import decimal
import json
import uuid
from datetime import date

from werkzeug.http import http_date


class JSONProvider:
    """Serializes response payloads for an application.

    Besides the types :mod:`json` knows, dates are sent as HTTP dates,
    decimals and UUIDs as strings, dataclasses as dicts and markup objects
    through ``__html__``. Mappings such as a
    :class:`~carafe.collection.DataCollection` become objects.
    """

    mimetype = "application/json"

    def __init__(self, app):
        self.app = app
        self.ensure_ascii = True

    @property
    def sort_keys(self):
        return self.app.config.get("JSON_SORT_KEYS", False)

    def default(self, o):
        if isinstance(o, date):
            return http_date(o)
        if isinstance(o, (decimal.Decimal, uuid.UUID)):
            return str(o)
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return dataclasses.asdict(o)
        if hasattr(o, "__html__"):
            return str(o.__html__())
        if hasattr(o, "keys") and hasattr(o, "__getitem__"):
            return {key: o[key] for key in o.keys()}
        raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")

    def dumps(self, obj, **kwargs):
        kwargs.setdefault("default", self.default)
        kwargs.setdefault("ensure_ascii", self.ensure_ascii)
        kwargs.setdefault("sort_keys", self.sort_keys)
        if self.app.debug:
            kwargs.setdefault("indent", 2)
        else:
            kwargs.setdefault("separators", (",", ":"))
        return json.dumps(obj, **kwargs)

    def loads(self, s, **kwargs):
        return json.loads(s, **kwargs)
