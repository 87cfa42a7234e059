"""Declarative configuration classes with JSON, JSON5 and YAML binding."""

import logging

from .binder import ConfigBinder, bind, is_valid, serialize, serialize_defaults
from .errors import (
    ConfigError,
    ConstructionError,
    DocumentError,
    SchemaDefinitionError,
    UnsupportedFormatError,
    ValidationError,
)
from .fields import ConfigProp
from .registry import MISSING, PropertyDescriptor, Registry, Schema, registry

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "MISSING",
    "ConfigBinder",
    "ConfigError",
    "ConfigProp",
    "ConstructionError",
    "DocumentError",
    "PropertyDescriptor",
    "Registry",
    "Schema",
    "SchemaDefinitionError",
    "UnsupportedFormatError",
    "ValidationError",
    "bind",
    "is_valid",
    "registry",
    "serialize",
    "serialize_defaults",
]
