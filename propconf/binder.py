"""Binding documents to config class instances and back."""

import enum
import inspect
import logging
import typing
from collections.abc import Mapping
from pathlib import Path

from propconf import io
from propconf.errors import ConstructionError, DocumentError, ValidationError
from propconf.formats import Format, format_for_path, get_format
from propconf.registry import Registry, Schema
from propconf.registry import registry as default_registry
from propconf.types import Annotation, Document, GenericAliasTypes, UnionTypes
from propconf.utils import isclasssubclass

logger = logging.getLogger(__name__)

C = typing.TypeVar("C")


def bind(
    factory: type[C],
    document: Mapping[str, typing.Any],
    args: typing.Sequence[typing.Any] | None = None,
    kwargs: Mapping[str, typing.Any] | None = None,
    *,
    schema: Schema | None = None,
    registry: Registry | None = None,
    legacy_falsy_defaults: bool = False,
) -> C:
    """Create an instance of ``factory`` populated from ``document``.

    Args:
        factory: The config class.
        document: Mapping from serialized names to values.
        args: Positional constructor arguments.
        kwargs: Keyword constructor arguments.
        schema: Schema to bind with, looked up in ``registry`` when omitted.
        registry: Registry used for ``factory`` and nested config classes.
        legacy_falsy_defaults: Replace present but falsy values (``0``,
            ``""``, ``False``, empty containers, ``None``) by the default.
            By default any value present in the document is kept.

    Raises:
        DocumentError: If ``document`` is not a mapping.
        ConstructionError: If ``factory`` could not be called with the
            given arguments.
        ValidationError: If required fields are missing, listing all of them.

    Example::

     class Credentials:
         username: str = ConfigProp(required=True)
         is_admin: bool = ConfigProp(default=False, name="isAdmin")

     creds = bind(Credentials, {"username": "testUser"})
     assert creds.is_admin is False

    """
    if not isinstance(document, Mapping):
        raise DocumentError(
            f"Source data must be a mapping, got {type(document).__name__}"
        )
    registry = registry if registry is not None else default_registry
    if schema is None:
        schema = registry.lookup(factory)

    try:
        instance = factory(*(args or ()), **(kwargs or {}))
    except TypeError as e:
        raise ConstructionError(
            f"Could not construct {_name(factory)}: {e}. "
            "Pass the constructor arguments along with the source data."
        ) from e

    missing = [
        d.serialized_name
        for d in schema
        if d.required and d.serialized_name not in document
    ]
    if missing:
        raise ValidationError(missing, _name(factory), schema)

    for descriptor in schema:
        present = descriptor.serialized_name in document
        value = document.get(descriptor.serialized_name)
        if present and (value or not legacy_falsy_defaults):
            value = _handle_field_from(
                descriptor.declared_type, value, registry, legacy_falsy_defaults
            )
        elif descriptor.has_default:
            value = descriptor.make_default()
        else:
            continue
        setattr(instance, descriptor.source_key, value)
    return instance


def serialize(
    instance: object,
    *,
    schema: Schema | None = None,
    registry: Registry | None = None,
) -> Document:
    """Convert a config instance to a document, in schema order.

    Nothing is validated: attributes that were never set and have no
    default are left out of the document.
    """
    registry = registry if registry is not None else default_registry
    if schema is None:
        schema = registry.lookup(type(instance))
    document: Document = {}
    for descriptor in schema:
        try:
            value = getattr(instance, descriptor.source_key)
        except AttributeError:
            continue
        document[descriptor.serialized_name] = _handle_field_to(value, registry)
    return document


def serialize_defaults(
    schema: Schema, *, registry: Registry | None = None
) -> Document:
    """Build a document to scaffold a new config file.

    Fields with a default get the default. Required fields without one get
    their placeholder text, or a generated one naming the declared type.
    Optional fields without a default are left out.
    """
    registry = registry if registry is not None else default_registry
    document: Document = {}
    for descriptor in schema:
        if descriptor.has_default:
            document[descriptor.serialized_name] = _handle_field_to(
                descriptor.make_default(), registry
            )
        elif descriptor.required:
            document[descriptor.serialized_name] = descriptor.placeholder()
    return document


def is_valid(
    instance: object,
    *,
    schema: Schema | None = None,
    registry: Registry | None = None,
) -> bool:
    """Check that every field of the schema is set on ``instance``."""
    if schema is None:
        registry = registry if registry is not None else default_registry
        schema = registry.lookup(type(instance))
    return all(hasattr(instance, d.source_key) for d in schema)


def _name(factory: typing.Any) -> str:
    return getattr(factory, "__name__", type(factory).__name__)


def _handle_field_from(
    annot: Annotation | None,
    value: typing.Any,
    registry: Registry,
    legacy_falsy_defaults: bool,
) -> typing.Any:
    """Convert a document value to the declared type of the field."""
    if value is None or annot is None or isinstance(annot, str):
        return value

    if isclasssubclass(annot, enum.Enum):
        return value if isinstance(value, annot) else annot(value)

    if inspect.isclass(annot) and annot in registry and isinstance(value, Mapping):
        return bind(
            annot,
            value,
            registry=registry,
            legacy_falsy_defaults=legacy_falsy_defaults,
        )

    if isinstance(annot, UnionTypes):
        options = [t for t in typing.get_args(annot) if t is not type(None)]
        if len(options) == 1:
            return _handle_field_from(
                options[0], value, registry, legacy_falsy_defaults
            )
        return value

    if isinstance(annot, GenericAliasTypes):
        origin = typing.get_origin(annot)
        args = typing.get_args(annot)
        if isclasssubclass(origin, list) and args and isinstance(value, list):
            return [
                _handle_field_from(args[0], element, registry, legacy_falsy_defaults)
                for element in value
            ]
        if isclasssubclass(origin, dict) and len(args) == 2 and isinstance(value, dict):
            return {
                key: _handle_field_from(args[1], val, registry, legacy_falsy_defaults)
                for key, val in value.items()
            }

    return value


def _handle_field_to(value: typing.Any, registry: Registry) -> typing.Any:
    """Convert an attribute value to a document value."""
    if type(value) in registry:
        return serialize(value, registry=registry)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_handle_field_to(element, registry) for element in value]
    if isinstance(value, dict):
        return {
            _handle_field_to(key, registry): _handle_field_to(val, registry)
            for key, val in value.items()
        }
    return value


class ConfigBinder(typing.Generic[C]):
    """Reads, writes and validates instances of a config class.

    Note:
        The schema is taken from the registry when the binder is created, so
        create binders after the config class has been defined. An explicit
        ``schema`` may be given instead, in which case the class needs no
        `ConfigProp` fields at all.

    Args:
        config_cls: The config class, called to create new instances.
        schema: Explicit schema, overrides the registered one.
        registry: Registry holding the schemas of the class and nested classes.
        legacy_falsy_defaults: See `bind`.
        default_format: Format used for writing when neither an explicit
            format nor a known file suffix is given.

    Example::

     binder = ConfigBinder(Credentials)
     binder.write_default("credentials.yaml")
     # ... user fills in the file ...
     creds = binder.read("credentials.yaml")

    """

    def __init__(
        self,
        config_cls: type[C],
        schema: Schema | None = None,
        *,
        registry: Registry | None = None,
        legacy_falsy_defaults: bool = False,
        default_format: str = "json",
    ):
        self.config_cls = config_cls
        self.registry = registry if registry is not None else default_registry
        self.schema = schema if schema is not None else self.registry.lookup(config_cls)
        self.legacy_falsy_defaults = legacy_falsy_defaults
        self.default_format = get_format(default_format).name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config_cls.__name__}, {self.schema!r})"

    def from_dict(self, document: Mapping[str, typing.Any], *args, **kwargs) -> C:
        """Bind an already parsed document, extra arguments go to the constructor."""
        return bind(
            self.config_cls,
            document,
            args,
            kwargs,
            schema=self.schema,
            registry=self.registry,
            legacy_falsy_defaults=self.legacy_falsy_defaults,
        )

    def to_dict(self, instance: C) -> Document:
        """Serialize an instance to a document."""
        return serialize(instance, schema=self.schema, registry=self.registry)

    def default_dict(self) -> Document:
        """Document with defaults and placeholders for required fields."""
        return serialize_defaults(self.schema, registry=self.registry)

    def is_valid(self, instance: C) -> bool:
        """Check that every field is set on ``instance``."""
        return is_valid(instance, schema=self.schema)

    def loads(self, text: str, format: str, *args, **kwargs) -> C:
        """Parse text in the given format and bind it."""
        return self.from_dict(get_format(format).parse(text), *args, **kwargs)

    def dumps(self, instance: C, format: str | None = None) -> str:
        """Serialize an instance to text, in ``default_format`` unless given."""
        return get_format(format or self.default_format).render(self.to_dict(instance))

    def dumps_default(self, format: str | None = None) -> str:
        """Render the default document as text."""
        return get_format(format or self.default_format).render(self.default_dict())

    def read(self, path: str | Path, *args, format: str | None = None, **kwargs) -> C:
        """Read a config file and bind it.

        The format comes from ``format`` or the file suffix. Extra arguments
        are passed to the config class constructor.

        Raises:
            UnsupportedFormatError: If no format matches, before the file is read.
            FileNotFoundError: If there is no file at ``path``.
            DocumentError: If the file does not hold a mapping.
            ValidationError: If required fields are missing.

        """
        fmt = self._read_format(path, format)
        return self.from_dict(fmt.parse(io.read_text(path)), *args, **kwargs)

    async def aread(
        self, path: str | Path, *args, format: str | None = None, **kwargs
    ) -> C:
        """Asynchronous `read`."""
        fmt = self._read_format(path, format)
        return self.from_dict(fmt.parse(await io.aread_text(path)), *args, **kwargs)

    def write(self, instance: C, path: str | Path, format: str | None = None) -> None:
        """Write an instance to a file, overwriting it.

        The format comes from ``format``, else the file suffix, else
        ``default_format``.
        """
        text = self._write_format(path, format).render(self.to_dict(instance))
        io.write_text(path, text)

    async def awrite(
        self, instance: C, path: str | Path, format: str | None = None
    ) -> None:
        """Asynchronous `write`."""
        text = self._write_format(path, format).render(self.to_dict(instance))
        await io.awrite_text(path, text)

    def write_default(self, path: str | Path, format: str | None = None) -> None:
        """Write a default document, to be filled in by hand, to a file."""
        text = self._write_format(path, format).render(self.default_dict())
        io.write_text(path, text)

    async def awrite_default(self, path: str | Path, format: str | None = None) -> None:
        """Asynchronous `write_default`."""
        text = self._write_format(path, format).render(self.default_dict())
        await io.awrite_text(path, text)

    def _read_format(self, path: str | Path, format: str | None) -> Format:
        fmt = format_for_path(path, format)
        logger.debug("Reading %s as %s", self.config_cls.__name__, fmt.name)
        return fmt

    def _write_format(self, path: str | Path, format: str | None) -> Format:
        fmt = format_for_path(path, format, fallback=self.default_format)
        logger.debug("Writing %s as %s", self.config_cls.__name__, fmt.name)
        return fmt
