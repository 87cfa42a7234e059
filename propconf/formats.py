"""Text formats config documents can be read from and written to."""

import dataclasses
import json
import logging
import re
import typing
from pathlib import Path

import json5
import yaml

from propconf.errors import DocumentError, UnsupportedFormatError
from propconf.json import ConfigJSONEncoder, dumps_json
from propconf.types import Document

logger = logging.getLogger(__name__)

JSON_INDENT = 3


@dataclasses.dataclass(frozen=True)
class Format:
    """A named text format with its file suffixes and codec functions.

    Attributes:
        name: Token used to select the format explicitly, e.g. ``"yaml"``.
        suffixes: File suffixes mapped to the format, with leading dot.
        loads: Parses text into a python object.
        dumps: Renders a document as text.
        errors: Exceptions `loads` raises on malformed input.

    """

    name: str
    suffixes: tuple[str, ...]
    loads: typing.Callable[[str], typing.Any]
    dumps: typing.Callable[[Document], str]
    errors: tuple[type[Exception], ...] = (ValueError,)

    def parse(self, text: str) -> Document:
        """Parse text into a document, which must be a mapping at the top level."""
        try:
            document = self.loads(text)
        except self.errors as e:
            raise DocumentError(f"Could not parse {self.name} document: {e}") from e
        if document is None:
            # Empty YAML file
            return {}
        if not isinstance(document, dict):
            raise DocumentError(
                f"{self.name} document must contain a mapping at the top level, "
                f"got {type(document).__name__}"
            )
        return document

    def render(self, document: Document) -> str:
        """Render a document as text."""
        return self.dumps(document)


class _JsonCompatibleLoader(yaml.SafeLoader):
    """YAML loader resolving only the JSON schema scalars.

    YAML 1.1 extras such as ``yes``/``no``/``on``/``off`` booleans,
    sexagesimal numbers (``12:30``), timestamps and merge keys stay strings.
    """

    yaml_implicit_resolvers: dict = {}


for _tag, _pattern, _first in (
    ("tag:yaml.org,2002:null", r"^(?:~|null|Null|NULL|)$", ["~", "n", "N", ""]),
    ("tag:yaml.org,2002:bool", r"^(?:true|True|TRUE|false|False|FALSE)$", "tTfF"),
    ("tag:yaml.org,2002:int", r"^-?(?:0|[1-9][0-9]*)$", "-0123456789"),
    (
        "tag:yaml.org,2002:float",
        r"^-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?$",
        "-0123456789",
    ),
):
    _JsonCompatibleLoader.add_implicit_resolver(
        _tag, re.compile(_pattern), list(_first)
    )


def _yaml_load(text: str):
    return yaml.load(text, Loader=_JsonCompatibleLoader)  # noqa: S506


def _yaml_dump(document: Document) -> str:
    return yaml.safe_dump(
        document, sort_keys=False, allow_unicode=True, default_flow_style=False
    )


def _json_dump(document: Document) -> str:
    return dumps_json(document, indent=JSON_INDENT) + "\n"


def _json5_dump(document: Document) -> str:
    return json5.dumps(
        document,
        indent=JSON_INDENT,
        ensure_ascii=False,
        default=ConfigJSONEncoder().default,
    )


JSON = Format("json", (".json",), json.loads, _json_dump, (json.JSONDecodeError,))
JSON5 = Format("json5", (".json5",), json5.loads, _json5_dump, (ValueError,))
YAML = Format("yaml", (".yaml", ".yml"), _yaml_load, _yaml_dump, (yaml.YAMLError,))

_FORMATS: dict[str, Format] = {}


def register_format(fmt: Format) -> None:
    """Add a format to the table, replacing any format with the same name."""
    _FORMATS[fmt.name.lower()] = fmt


def supported_tokens() -> tuple[str, ...]:
    """All names and suffixes accepted by `get_format`."""
    return tuple(
        token for fmt in _FORMATS.values() for token in (fmt.name, *fmt.suffixes)
    )


def get_format(token: str) -> Format:
    """Find the format for a name or file suffix.

    The lookup is case insensitive and the leading dot of a suffix is
    optional, so ``"YAML"``, ``".yml"`` and ``"yml"`` all resolve to YAML.

    Raises:
        UnsupportedFormatError: If no format matches ``token``.

    """
    key = token.lower().lstrip(".")
    if key in _FORMATS:
        return _FORMATS[key]
    for fmt in _FORMATS.values():
        if f".{key}" in fmt.suffixes:
            return fmt
    raise UnsupportedFormatError(token, supported_tokens())


def format_for_path(
    path: str | Path, format: str | None = None, fallback: str | None = None
) -> Format:
    """Choose the format for a file.

    Args:
        path: The file path, its suffix is used when ``format`` is not given.
        format: Explicit format token, always wins over the suffix.
        fallback: Format token used when the suffix matches no format.

    Raises:
        UnsupportedFormatError: If ``format`` is unknown, or the suffix is
            unknown and no ``fallback`` is given.

    """
    if format:
        return get_format(format)
    try:
        return get_format(Path(path).suffix)
    except UnsupportedFormatError:
        if fallback is None:
            raise
        logger.debug("No format for %r, falling back to %s", str(path), fallback)
        return get_format(fallback)


for _fmt in (JSON, JSON5, YAML):
    register_format(_fmt)
