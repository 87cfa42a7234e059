"""Utility functions for the propconf package."""

import inspect
from enum import EnumMeta
from typing import ForwardRef, Literal, get_args, get_origin

from propconf.types import Annotation, GenericAliasTypes, UnionTypes


def isclasssubclass(obj: object, cls: type[object] | tuple[type[object], ...]) -> bool:
    """Check if the object is a subclass of the class, return `False` if not a class."""
    return inspect.isclass(obj) and issubclass(obj, cls)


def type_to_view_string(annot: Annotation | None) -> str:
    """Convert the type hint to a view string.

    Examples::
    >>> type_to_view_string(str)
    'str'
    >>> type_to_view_string(list[int] | None)
    'list[int] | None'

    """
    if annot is None or annot is type(None):
        return str(None)
    if isinstance(annot, str):
        return annot
    if isinstance(annot, EnumMeta):
        return str(set(annot._value2member_map_.keys())).replace("'", "")
    if isinstance(annot, UnionTypes):
        return " | ".join([type_to_view_string(t) for t in get_args(annot)])
    if isinstance(annot, GenericAliasTypes):
        origin = get_origin(annot)
        args = get_args(annot)
        if isclasssubclass(origin, (list, set, frozenset, tuple)) and args:
            return f"{origin.__name__}[{type_to_view_string(args[0])}]"
        if isclasssubclass(origin, dict) and len(args) == 2:
            return (
                f"dict[{type_to_view_string(args[0])}, {type_to_view_string(args[1])}]"
            )
        if origin is Literal:
            return " | ".join(repr(a) for a in args)
        return str(annot)
    if isinstance(annot, ForwardRef):
        return annot.__forward_arg__
    return getattr(annot, "__name__", str(annot))
