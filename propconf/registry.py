"""Schema metadata for config classes and the registry that stores it."""

from __future__ import annotations

import copy
import dataclasses
import typing
from collections.abc import Iterable, Iterator

from propconf.errors import SchemaDefinitionError
from propconf.types import Annotation
from propconf.utils import type_to_view_string


class _Missing:
    """Marks a field declared without a default."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: typing.Any = _Missing()


@dataclasses.dataclass(frozen=True)
class PropertyDescriptor:
    """Metadata for a single configurable field of a config class.

    Attributes:
        source_key: The attribute name used on the class.
        serialized_name: The key used in the document. Equals `source_key`
            unless an explicit name override was given.
        default: Value applied when the document lacks the field, or `MISSING`.
        required: Whether binding fails when the document lacks the field.
        placeholder_text: Text written in place of a required field without
            a default when generating a default document.
        declared_type: The annotation of the attribute, `None` if not annotated.
        description: Free text describing the field.

    """

    source_key: str
    serialized_name: str = ""
    default: typing.Any = MISSING
    required: bool = False
    placeholder_text: str | None = None
    declared_type: Annotation | None = None
    description: str = ""

    def __post_init__(self):
        if not self.serialized_name:
            object.__setattr__(self, "serialized_name", self.source_key)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def type_name(self) -> str:
        if self.declared_type is None:
            return "any"
        return type_to_view_string(self.declared_type)

    def make_default(self) -> typing.Any:
        """Return a fresh copy of the default so instances never share it."""
        return copy.deepcopy(self.default)

    def placeholder(self) -> str:
        """Text used for this field in a generated default document."""
        return self.placeholder_text or f"REQUIRED FIELD ({self.type_name})"


class Schema:
    """Ordered, immutable sequence of ``PropertyDescriptor`` entries.

    The order of the entries is the order of the keys in serialized
    documents. Serialized names are unique within a schema.

    Example::

     schema = Schema.build(
         PropertyDescriptor("username", required=True, declared_type=str),
         PropertyDescriptor("is_admin", "isAdmin", default=False),
     )
     assert schema.names() == ("username", "isAdmin")

    """

    __slots__ = ("_descriptors", "_by_name")

    def __init__(self, descriptors: Iterable[PropertyDescriptor] = ()):
        self._descriptors: tuple[PropertyDescriptor, ...] = ()
        self._by_name: dict[str, PropertyDescriptor] = {}
        for descriptor in descriptors:
            self._append(descriptor)

    @classmethod
    def build(cls, *descriptors: PropertyDescriptor) -> "Schema":
        """Build a schema from descriptors given in document order."""
        return cls(descriptors)

    def _append(self, descriptor: PropertyDescriptor) -> None:
        if descriptor.serialized_name in self._by_name:
            other = self._by_name[descriptor.serialized_name]
            raise SchemaDefinitionError(
                f"Fields `{other.source_key}` and `{descriptor.source_key}` "
                f"both serialize to `{descriptor.serialized_name}`"
            )
        self._descriptors += (descriptor,)
        self._by_name[descriptor.serialized_name] = descriptor

    def extend(self, descriptor: PropertyDescriptor) -> "Schema":
        """Return a new schema with ``descriptor`` appended."""
        return Schema((*self._descriptors, descriptor))

    def merge(self, other: "Schema") -> "Schema":
        """Return a new schema where ``other`` overrides same-named attributes.

        Entries of ``other`` whose ``source_key`` already exists replace the
        existing entry in place; the rest are appended.
        """
        overrides = {d.source_key: d for d in other}
        merged = [overrides.pop(d.source_key, d) for d in self._descriptors]
        return Schema([*merged, *overrides.values()])

    def get(self, serialized_name: str) -> PropertyDescriptor | None:
        return self._by_name.get(serialized_name)

    def names(self) -> tuple[str, ...]:
        """Serialized names in schema order."""
        return tuple(d.serialized_name for d in self._descriptors)

    def __iter__(self) -> Iterator[PropertyDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, serialized_name: object) -> bool:
        return serialized_name in self._by_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self._descriptors == other._descriptors

    def __repr__(self) -> str:
        return f"Schema({list(self.names())})"


class Registry:
    """Maps config classes to the schema declared in their class body.

    Registration appends to the class's schema and happens while the class
    is created, before any instance exists. Lookups merge the schemas of
    base classes, so subclasses inherit their parents' fields.
    """

    def __init__(self):
        self._schemas: dict[type, Schema] = {}

    def register(self, owner: type, descriptor: PropertyDescriptor) -> None:
        """Append ``descriptor`` to the schema of ``owner``.

        Raises:
            SchemaDefinitionError: If ``owner`` or one of its base classes
                already has a field with the same serialized name.

        """
        own = self._schemas.get(owner, Schema()).extend(descriptor)
        # Inherited fields count too, unless the same attribute is redefined.
        self.lookup(owner).merge(Schema((descriptor,)))
        self._schemas[owner] = own

    def lookup(self, owner: type) -> Schema:
        """Return the schema of ``owner``, empty if it declares no fields."""
        schema = Schema()
        for klass in reversed(owner.__mro__):
            if klass in self._schemas:
                schema = schema.merge(self._schemas[klass])
        return schema

    def __contains__(self, owner: object) -> bool:
        return isinstance(owner, type) and any(
            klass in self._schemas for klass in owner.__mro__
        )


# Default registry used by `ConfigProp` fields.
registry = Registry()
