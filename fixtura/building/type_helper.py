"""
Type-argument deduction and display names for parameterized fixtures.

Both are collaborators of the fixture builder and can be replaced by any
object implementing the matching protocol.
"""

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar, get_args, get_origin, runtime_checkable

from fixtura.building.type_info import (
    TypeInfo,
    is_type_reference,
    positional_parameters,
    type_display_name,
)

# Sequences longer than this are cut short in display names.
MAX_DISPLAYED_ITEMS = 5

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\0": "\\0",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


# =============================================================================
# Type-argument deduction
# =============================================================================


@runtime_checkable
class TypeArgumentDeducer(Protocol):
    """Infers type arguments of an open generic fixture from argument values."""

    def try_deduce(
        self, type_info: TypeInfo, arguments: Sequence[Any]
    ) -> tuple[bool, list[Any]]:
        """
        Try to infer one type argument per open type parameter.

        Returns:
            ``(True, type_args)`` on success, ``(False, [])`` otherwise.
            Never raises.
        """
        ...


class ConstructorTypeArgumentDeducer:
    """
    Deduces type arguments from constructor parameter annotations.

    A parameter annotated ``T`` binds ``T`` to its argument's runtime type; a
    parameter annotated ``type[T]`` binds ``T`` to the argument itself. When
    two arguments bind the same variable to related classes the common base
    wins; unrelated classes reject that constructor. The first constructor
    with the right parameter count that binds every open variable is used.

    Example:
        >>> deducer = ConstructorTypeArgumentDeducer()
        >>> deducer.try_deduce(TypeInfo.of(Box), [3])  # Box.__init__(self, item: T)
        (True, [<class 'int'>])
    """

    def try_deduce(
        self, type_info: TypeInfo, arguments: Sequence[Any]
    ) -> tuple[bool, list[Any]]:
        parameters = type_info.type_parameters
        if not parameters:
            return False, []

        for signature in type_info.get_constructors():
            positional = positional_parameters(signature)
            if len(positional) != len(arguments):
                continue
            bindings: dict[TypeVar, type] = {}
            if not all(
                self._bind(param.annotation, arg, bindings)
                for param, arg in zip(positional, arguments)
            ):
                continue
            if all(parameter in bindings for parameter in parameters):
                return True, [bindings[parameter] for parameter in parameters]

        return False, []

    def _bind(self, annotation: Any, arg: Any, bindings: dict[TypeVar, type]) -> bool:
        if isinstance(annotation, TypeVar):
            if arg is None:
                return True
            return self._record(annotation, type(arg), bindings)
        if get_origin(annotation) is type:
            inner = get_args(annotation)
            if inner and isinstance(inner[0], TypeVar) and isinstance(arg, type):
                return self._record(inner[0], arg, bindings)
        return True

    @staticmethod
    def _record(variable: TypeVar, candidate: type, bindings: dict[TypeVar, type]) -> bool:
        current = bindings.get(variable)
        if current is None or issubclass(candidate, current):
            bindings.setdefault(variable, candidate)
            return True
        if issubclass(current, candidate):
            bindings[variable] = candidate
            return True
        return False


# =============================================================================
# Display names
# =============================================================================


@runtime_checkable
class DisplayNameRenderer(Protocol):
    """Renders the name of a fixture built with constructor arguments."""

    def render(self, type_info: TypeInfo, arguments: Sequence[Any]) -> str:
        """Return a deterministic, human-readable name."""
        ...


class DefaultDisplayNameRenderer:
    """
    Renders ``Repo[int]("seed",42)``-style names.

    Strings are double-quoted with control characters escaped and are cut to
    ``max_string_length`` characters. Objects without a custom ``repr`` are
    shown by class name so names stay stable between runs.
    """

    def __init__(self, max_string_length: int = 40) -> None:
        self.max_string_length = max_string_length

    def render(self, type_info: TypeInfo, arguments: Sequence[Any]) -> str:
        name = type_info.display_name
        if not arguments:
            return name
        return f"{name}({','.join(self.format_value(arg) for arg in arguments)})"

    def format_value(self, value: Any) -> str:
        if value is None:
            return "None"
        if isinstance(value, str):
            return self._format_string(value)
        if is_type_reference(value):
            return type_display_name(value)
        if isinstance(value, (list, tuple)):
            items = [self.format_value(item) for item in value[:MAX_DISPLAYED_ITEMS]]
            if len(value) > MAX_DISPLAYED_ITEMS:
                items.append("...")
            opening, closing = ("[", "]") if isinstance(value, list) else ("(", ")")
            return f"{opening}{','.join(items)}{closing}"
        if type(value).__repr__ is object.__repr__:
            return type(value).__name__
        return repr(value)

    def _format_string(self, value: str) -> str:
        if 3 < self.max_string_length < len(value):
            value = value[: self.max_string_length - 3] + "..."
        return '"' + "".join(_ESCAPES.get(char, char) for char in value) + '"'
