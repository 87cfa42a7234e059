"""JSON rendering of config documents."""

import enum
import json


class ConfigJSONEncoder(json.JSONEncoder):
    """Encoder for documents holding values the `json` module can't render.

    Objects providing a `config_to_json()` method are rendered from what it
    returns. Enum members render as their value, sets and frozensets as
    lists. Anything else is a `TypeError`, as with the plain encoder.
    """

    def default(self, obj):  # noqa: D102
        hook = getattr(obj, "config_to_json", None)
        if callable(hook):
            return hook()
        if isinstance(obj, enum.Enum):
            return obj.value
        if isinstance(obj, (set, frozenset)):
            return sorted(obj, key=repr)
        raise TypeError(
            f"Object of type {type(obj).__name__} is not JSON serializable. "
            f"Give {type(obj).__name__} a `config_to_json()` method returning "
            "a JSON compatible value, or store a plain value in the config."
        )


def dumps_json(obj, indent: int | None = None) -> str:
    """Render ``obj`` as JSON text, keeping non-ASCII characters."""
    return json.dumps(obj, cls=ConfigJSONEncoder, indent=indent, ensure_ascii=False)
