"""Types shared by the propconf modules."""

import typing
from types import GenericAlias, UnionType
from typing import ForwardRef, TypeAlias, Union

UnionTypes = (UnionType, typing._UnionGenericAlias)  # type: ignore[name-defined, attr-defined]
GenericAliasTypes = (GenericAlias, typing._GenericAlias)  # type: ignore[name-defined, attr-defined]

# Anything a field may be annotated with; strings come from postponed annotations.
Annotation: TypeAlias = (
    type
    | UnionType
    | GenericAlias
    | ForwardRef
    | str
    | typing._UnionGenericAlias  # type: ignore[name-defined, attr-defined]
    | typing._GenericAlias  # type: ignore[name-defined, attr-defined]
)

# The closed set of values a parsed document holds.
JsonValue: TypeAlias = Union[
    str, int, float, bool, None, list["JsonValue"], dict[str, "JsonValue"]
]
Document: TypeAlias = dict[str, JsonValue]
