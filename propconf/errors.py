"""Exceptions raised by propconf."""

from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    from propconf.registry import Schema


class ConfigError(Exception):
    """Base class of every error raised by propconf."""


class SchemaDefinitionError(ConfigError, TypeError):
    """Raised when a config class declares an invalid schema.

    Two fields of one class mapping onto the same serialized name is the
    usual cause; it is reported while the class body is being created.
    """


class UnsupportedFormatError(ConfigError, ValueError):
    """Raised when no parser or serializer exists for a format token."""

    def __init__(self, token: str, supported: typing.Iterable[str] = ()):
        self.token = token
        self.supported = tuple(supported)
        message = f"Unsupported file format: {token!r}."
        if self.supported:
            message += f" Please use one of {self.supported}"
        super().__init__(message)


class DocumentError(ConfigError, ValueError):
    """Raised when source text does not parse into a key/value mapping."""


class ValidationError(ConfigError, ValueError):
    """Raised when required fields are absent from the source document.

    Attributes:
        missing: Serialized names of every missing field, in schema order.
        owner: Name of the config class being bound.

    """

    def __init__(
        self, missing: list[str], owner: str = "", schema: Schema | None = None
    ):
        self.missing = list(missing)
        self.owner = owner
        lines = [f"Missing properties in source data: {', '.join(self.missing)}"]
        if schema is not None:
            for name in self.missing:
                descriptor = schema.get(name)
                if descriptor is None:
                    continue
                lines.append(
                    f"| loc: {owner}.{descriptor.source_key}\n"
                    f"| expects: {descriptor.type_name}\n"
                    f"| description: {descriptor.description or 'No description given'}"
                )
        super().__init__("\n".join(lines))


class ConstructionError(ConfigError, TypeError):
    """Raised when the config class could not be instantiated."""
