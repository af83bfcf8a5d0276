"""Per-request key/value data handed to the view layer."""
from collections.abc import Mapping


class DataCollection(Mapping):
    """An ordered key/value store used as a template rendering context.

    Writes go through :meth:`add`; the mapping protocol is read-only so a
    collection can be passed straight to ``template.render(**data)``.
    """

    def __init__(self, data=None):
        self._data = {}
        if data:
            for key, value in dict(data).items():
                self.add(key, value)

    def add(self, key, value):
        """Insert ``value`` under ``key``, replacing any previous value."""
        self._data[key] = value
        return self

    def has(self, key):
        return key in self._data

    def remove(self, key):
        self._data.pop(key, None)
        return self

    def to_dict(self):
        return dict(self._data)

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __repr__(self):
        return f"<DataCollection {self._data!r}>"
