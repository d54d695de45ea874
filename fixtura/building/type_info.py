"""
Type descriptors for fixture classes.

Wraps Python classes and parameterized ``typing`` generics behind a small
reflection API: method enumeration, constructor lookup by argument types,
generic specialization, and the naming used for suites built from a type.
"""

import builtins
import importlib
import inspect
import logging
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

logger = logging.getLogger(__name__)

# Bases whose members are never reported as fixture methods.
_PLUMBING_MODULES = frozenset({"builtins", "typing", "abc", "collections.abc"})

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


# =============================================================================
# Helpers
# =============================================================================


def is_type_reference(value: Any) -> bool:
    """Check whether a value is itself a type (a class or parameterized alias)."""
    if isinstance(value, type):
        return True
    return get_origin(value) is not None


def type_display_name(type_: Any) -> str:
    """Render a type for display, e.g. ``Repo[int]`` or ``dict[str, list[int]]``."""
    if isinstance(type_, TypeInfo):
        return type_.display_name
    if isinstance(type_, TypeVar):
        return type_.__name__
    if type_ is None or type_ is type(None):
        return "None"
    origin = get_origin(type_)
    if origin is None:
        return getattr(type_, "__name__", repr(type_))
    args = get_args(type_)
    name = getattr(origin, "__name__", None) or repr(origin)
    if not args:
        return name
    return f"{name}[{', '.join(type_display_name(arg) for arg in args)}]"


def positional_parameters(signature: inspect.Signature) -> list[inspect.Parameter]:
    """Return the parameters of a signature that can be filled positionally."""
    return [p for p in signature.parameters.values() if p.kind in _POSITIONAL_KINDS]


def resolve_type(name: str) -> Any:
    """
    Resolve a type name such as ``"int"`` or ``"package.module.Outer.Inner"``.

    Args:
        name: A builtin type name or a dotted import path.

    Returns:
        The resolved type.

    Raises:
        ValueError: If the name does not resolve to a type.
    """
    if "." not in name:
        candidate = getattr(builtins, name, None)
        if isinstance(candidate, type):
            return candidate
        raise ValueError(f"Unknown type name: {name}")

    parts = name.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError:
            continue
        for attr in parts[split:]:
            obj = getattr(obj, attr, None)
            if obj is None:
                break
        if is_type_reference(obj):
            return obj
        break

    raise ValueError(f"Unknown type name: {name}")


def _substitute(annotation: Any, substitutions: dict[Any, Any]) -> Any:
    """Replace bound type variables inside an annotation."""
    if not substitutions:
        return annotation
    if isinstance(annotation, TypeVar):
        return substitutions.get(annotation, annotation)
    parameters = getattr(annotation, "__parameters__", ())
    if parameters and get_origin(annotation) is not None:
        if all(p in substitutions for p in parameters):
            return annotation[tuple(substitutions[p] for p in parameters)]
    return annotation


def _base_substitutions(
    klass: type, declaring_type: type, substitutions: dict[Any, Any]
) -> dict[Any, Any]:
    """Compose type-variable bindings along the bases leading to ``declaring_type``."""
    if klass is declaring_type:
        return substitutions
    for base in vars(klass).get("__orig_bases__", klass.__bases__):
        base_origin = get_origin(base) or base
        if not isinstance(base_origin, type) or not issubclass(base_origin, declaring_type):
            continue
        parameters = getattr(base_origin, "__parameters__", ())
        args = get_args(base)
        if parameters and len(parameters) == len(args):
            bound = {p: _substitute(arg, substitutions) for p, arg in zip(parameters, args)}
        else:
            bound = substitutions
        return _base_substitutions(base_origin, declaring_type, bound)
    return substitutions


def _annotation_accepts(annotation: Any, arg_type: type) -> bool:
    """Exact-type check of one argument type against a parameter annotation."""
    if annotation is inspect.Parameter.empty or annotation is Any:
        return True
    if annotation is None:
        annotation = type(None)
    origin = get_origin(annotation)
    if origin in (Union, types.UnionType):
        return any(_annotation_accepts(member, arg_type) for member in get_args(annotation))
    # The runtime type of a class argument is its metaclass
    if origin is type:
        return issubclass(arg_type, type)
    return annotation is arg_type


# =============================================================================
# MethodInfo
# =============================================================================


class MethodKind(str, Enum):
    """How a method is bound on its class."""

    INSTANCE = "instance"
    STATIC = "static"
    CLASS = "class"


@dataclass(frozen=True)
class MethodInfo:
    """A method found on a fixture class."""

    name: str
    function: Any
    kind: MethodKind
    declaring_type: type

    @property
    def is_public(self) -> bool:
        return not self.name.startswith("_")

    @property
    def is_dunder(self) -> bool:
        return self.name.startswith("__") and self.name.endswith("__")

    @property
    def is_abstract(self) -> bool:
        return bool(getattr(self.function, "__isabstractmethod__", False))

    @property
    def parameters(self) -> list[inspect.Parameter]:
        """Parameters of the method, excluding ``self``/``cls``."""
        params = list(inspect.signature(self.function).parameters.values())
        if self.kind is not MethodKind.STATIC and params:
            params = params[1:]
        return params

    @property
    def required_parameters(self) -> list[inspect.Parameter]:
        """Parameters that have no default and are not variadic."""
        variadic = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        return [
            p for p in self.parameters if p.default is p.empty and p.kind not in variadic
        ]

    def __repr__(self) -> str:
        return f"MethodInfo({self.declaring_type.__name__}.{self.name}, {self.kind.value})"


def _method_kind(member: Any) -> MethodKind | None:
    if isinstance(member, staticmethod):
        return MethodKind.STATIC
    if isinstance(member, classmethod):
        return MethodKind.CLASS
    if inspect.isfunction(member):
        return MethodKind.INSTANCE
    return None


# =============================================================================
# TypeInfo
# =============================================================================


class TypeInfo:
    """
    Read-only descriptor of a fixture class.

    Accepts a plain class (``Calculator``), an open generic class
    (``Repo`` deriving from ``Generic[T]``) or a parameterized alias
    (``Repo[int]``). The wrapped object is never modified.

    Example:
        >>> info = TypeInfo.of(Repo)
        >>> info.contains_generic_parameters
        True
        >>> info.make_generic_type([int]).display_name
        'Repo[int]'
    """

    def __init__(self, type_: Any) -> None:
        origin = get_origin(type_) or type_
        if not isinstance(origin, type):
            raise TypeError(f"Not a class: {type_!r}")
        self._type = type_
        self._origin: type = origin

    @classmethod
    def of(cls, type_: Any) -> "TypeInfo":
        """Wrap a class or alias, passing existing descriptors through."""
        if isinstance(type_, TypeInfo):
            return type_
        return cls(type_)

    @property
    def type(self) -> Any:
        return self._type

    @property
    def origin(self) -> type:
        """The unparameterized class."""
        return self._origin

    @property
    def name(self) -> str:
        return self._origin.__name__

    @property
    def display_name(self) -> str:
        return type_display_name(self._type)

    @property
    def namespace(self) -> str:
        return self._origin.__module__ or ""

    @property
    def full_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.display_name}"
        return self.display_name

    @property
    def type_args(self) -> tuple[Any, ...]:
        if self._type is self._origin:
            return ()
        return get_args(self._type)

    @property
    def type_parameters(self) -> tuple[TypeVar, ...]:
        """Type variables that are still open on this type."""
        return tuple(getattr(self._type, "__parameters__", ()))

    @property
    def arity(self) -> int:
        """Number of type parameters declared by the generic class."""
        return len(getattr(self._origin, "__parameters__", ()))

    @property
    def contains_generic_parameters(self) -> bool:
        return len(self.type_parameters) > 0

    @property
    def is_abstract(self) -> bool:
        return inspect.isabstract(self._origin)

    @property
    def is_sealed(self) -> bool:
        return bool(getattr(self._origin, "__final__", False))

    @property
    def is_static_class(self) -> bool:
        """A class that can be neither instantiated nor subclassed."""
        return self.is_abstract and self.is_sealed

    def make_generic_type(self, type_args: typing.Sequence[Any]) -> "TypeInfo":
        """
        Close the open type parameters with concrete type arguments.

        Raises:
            ValueError: If the type is not open or the argument count is wrong.
        """
        parameters = self.type_parameters
        if not parameters:
            raise ValueError(f"{self.display_name} has no open type parameters")
        if len(type_args) != len(parameters):
            raise ValueError(
                f"{self.display_name} expects {len(parameters)} type arguments, "
                f"got {len(type_args)}"
            )
        return TypeInfo(self._type[tuple(type_args)])

    def get_methods(self) -> list[MethodInfo]:
        """
        List all methods: instance, static and class methods, public or not.

        The most-derived class comes first and each class reports its members
        in declaration order. Overridden names are reported once.
        """
        methods: list[MethodInfo] = []
        seen: set[str] = set()
        for klass in inspect.getmro(self._origin):
            if klass.__module__ in _PLUMBING_MODULES:
                continue
            for name, member in vars(klass).items():
                if name in seen:
                    continue
                seen.add(name)
                kind = _method_kind(member)
                if kind is None:
                    continue
                function = member if kind is MethodKind.INSTANCE else member.__func__
                methods.append(MethodInfo(name, function, kind, klass))
        return methods

    def get_constructors(self) -> list[inspect.Signature]:
        """
        List constructor signatures, without ``self``.

        ``typing.overload`` variants of ``__init__`` count as separate
        constructors. Type variables bound by this type's arguments, or by the
        parameterized bases leading to the class that defines ``__init__``, are
        substituted into the parameter annotations.
        """
        init = self._origin.__init__
        if init is object.__init__:
            return [inspect.Signature()]

        declaring_type = next(
            klass for klass in inspect.getmro(self._origin) if "__init__" in vars(klass)
        )
        substitutions = self._substitutions(declaring_type)
        signatures = []
        for variant in typing.get_overloads(init) or [init]:
            signature = self._constructor_signature(variant, substitutions)
            if signature is not None:
                signatures.append(signature)
        return signatures

    def get_constructor(self, arg_types: typing.Sequence[type]) -> inspect.Signature | None:
        """
        Find the constructor whose positional parameters match ``arg_types``.

        Parameter counts must be equal and every annotation must name the
        argument's type exactly. Unannotated and ``Any`` parameters accept
        any type; a union accepts any one of its members.
        """
        for signature in self.get_constructors():
            if self._signature_matches(signature, arg_types):
                return signature
        return None

    def _substitutions(self, declaring_type: type) -> dict[Any, Any]:
        """
        Map type variables seen by ``declaring_type`` to this type's arguments.

        Follows the parameterized bases (``__orig_bases__``) from the wrapped
        class down to ``declaring_type``, so an ``__init__`` inherited from
        ``Box[T]`` by ``class IntBox(Box[int])`` sees ``T`` as ``int``.
        """
        substitutions: dict[Any, Any] = {}
        parameters = getattr(self._origin, "__parameters__", ())
        args = self.type_args
        if parameters and len(parameters) == len(args):
            substitutions = dict(zip(parameters, args))
        return _base_substitutions(self._origin, declaring_type, substitutions)

    def _constructor_signature(
        self, function: Any, substitutions: dict[Any, Any]
    ) -> inspect.Signature | None:
        try:
            signature = inspect.signature(function)
        except ValueError:
            logger.debug("No signature available for %s.__init__", self.name)
            return None
        try:
            hints = get_type_hints(function)
        except (NameError, TypeError) as e:
            logger.debug("Unresolved annotations on %s.__init__: %s", self.name, e)
            hints = {}

        params = list(signature.parameters.values())[1:]
        params = [
            p.replace(annotation=_substitute(hints.get(p.name, p.annotation), substitutions))
            for p in params
        ]
        return signature.replace(parameters=params, return_annotation=inspect.Signature.empty)

    @staticmethod
    def _signature_matches(signature: inspect.Signature, arg_types: typing.Sequence[type]) -> bool:
        for param in signature.parameters.values():
            if param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is param.empty:
                return False
        positional = positional_parameters(signature)
        if len(positional) != len(arg_types):
            return False
        return all(
            _annotation_accepts(param.annotation, arg_type)
            for param, arg_type in zip(positional, arg_types)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeInfo):
            return NotImplemented
        return self._type == other._type

    def __hash__(self) -> int:
        return hash(self._type)

    def __repr__(self) -> str:
        return f"TypeInfo({self.full_name})"
