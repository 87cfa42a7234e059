"""Declarative fields for propconf config classes."""

import ast
import inspect
import textwrap
import typing
import weakref

from propconf.registry import MISSING, PropertyDescriptor, Registry
from propconf.registry import registry as default_registry

T = typing.TypeVar("T")


class ConfigProp(typing.Generic[T]):
    """Class attribute declaring a configurable field.

    The field is registered with its owner class as soon as the class body
    has been executed. The declared type is taken from the annotation and
    the description, when not given, from the attribute docstring.

    Example::

     class Credentials:
         username: str = ConfigProp(required=True)
         password: str = ConfigProp(required=True)
         is_admin: bool = ConfigProp(default=False, name="isAdmin")
         \"\"\"Grants access to the admin pages.\"\"\"

    Args:
        name: Key used in documents, defaults to the attribute name.
        default: Value used when the document lacks the field.
        required: Fail binding when the document lacks the field.
        placeholder_text: Written for a required field without a default
            when generating a default document.
        description: Free text describing the field.
        registry: Registry to register with, the package-wide one by default.

    """

    def __init__(
        self,
        *,
        name: str | None = None,
        default: T = MISSING,  # type: ignore[assignment]
        required: bool = False,
        placeholder_text: str | None = None,
        description: str = "",
        registry: Registry | None = None,
    ):
        self.name = name
        self.default = default
        self.required = required
        self.placeholder_text = placeholder_text
        self.description = description
        self.registry = registry if registry is not None else default_registry
        self.attr_name = ""
        self.descriptor: PropertyDescriptor | None = None

    def __set_name__(self, owner: type, attr_name: str) -> None:
        self.attr_name = attr_name
        self.descriptor = PropertyDescriptor(
            source_key=attr_name,
            serialized_name=self.name or attr_name,
            default=self.default,
            required=self.required,
            placeholder_text=self.placeholder_text,
            declared_type=_get_annotations(owner).get(attr_name),
            description=self.description
            or get_attr_descriptions(owner).get(attr_name, ""),
        )
        self.registry.register(owner, self.descriptor)

    @typing.overload
    def __get__(self, instance: None, owner: type | None = None) -> "ConfigProp[T]": ...
    @typing.overload
    def __get__(self, instance: object, owner: type | None = None) -> T: ...

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        try:
            return instance.__dict__[self.attr_name]
        except KeyError:
            pass
        if self.descriptor is not None and self.descriptor.has_default:
            value = self.descriptor.make_default()
            instance.__dict__[self.attr_name] = value
            return value
        raise AttributeError(
            f"`{type(instance).__name__}.{self.attr_name}` has not been set"
        )

    def __set__(self, instance: object, value: T) -> None:
        instance.__dict__[self.attr_name] = value

    def __delete__(self, instance: object) -> None:
        try:
            del instance.__dict__[self.attr_name]
        except KeyError:
            raise AttributeError(self.attr_name) from None

    def __repr__(self) -> str:
        return f"ConfigProp({self.descriptor!r})"


def _get_annotations(owner: type) -> dict[str, typing.Any]:
    # Unresolvable names leave the field untyped.
    try:
        return inspect.get_annotations(owner)
    except NameError:
        return {}


class DescriptionVisitor(ast.NodeVisitor):
    """Extracts attribute docstrings as descriptions from a class definition."""

    def __init__(self):  # noqa: D107
        super().__init__()
        self.descriptions: dict[str, str] = {}
        self._seen_class = False

    def visit_ClassDef(self, node):  # noqa: D102
        # Only the outermost class; nested classes have their own fields.
        if self._seen_class:
            return
        self._seen_class = True
        target: str | None = None
        for stmt in node.body:
            if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
                target = stmt.target.id
                self.descriptions.setdefault(target, "")
            elif (
                target is not None
                and isinstance(stmt, ast.Expr)
                and isinstance(stmt.value, ast.Constant)
                and isinstance(stmt.value.value, str)
            ):
                desc = inspect.cleandoc(stmt.value.value)
                self.descriptions[target] = desc.replace("\n", " ")
                target = None
            else:
                target = None


# Weak keys, so parsing a class never keeps it alive.
_descriptions_cache: "weakref.WeakKeyDictionary[type, dict[str, str]]" = (
    weakref.WeakKeyDictionary()
)


def get_attr_descriptions(cls: type[object]) -> dict[str, str]:
    """Goes through the class definition and extracts attribute docstrings.

    Args:
        cls: The class to extract the attribute docstrings from.

    Returns:
        A dictionary with the attribute names as keys and the docstrings as values.
    """
    if cls in _descriptions_cache:
        return _descriptions_cache[cls]
    try:
        source = inspect.getsource(cls)
        tree = ast.parse(textwrap.dedent(source))
    except (OSError, TypeError, SyntaxError):
        descriptions = {}
    else:
        visitor = DescriptionVisitor()
        visitor.visit(tree)
        descriptions = visitor.descriptions
    _descriptions_cache[cls] = descriptions
    return descriptions
