"""
Declarative markers for fixture classes and test methods.

Decorators attach markers to a class or function; the applier later copies
them onto the Test built from that class or function. Class markers are
inherited: markers of base classes are applied before those of subclasses.

Example:
    @category("integration")
    @description("Repository round trips")
    class RepoTests:
        @test
        def saves(self) -> None: ...

        @ignore("needs a live database")
        def test_migrates(self) -> None: ...
"""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar, runtime_checkable

from fixtura.building.models import PropertyNames, RunState, Test

MARKERS_ATTR = "__fixtura_markers__"

_T = TypeVar("_T")


# =============================================================================
# Markers
# =============================================================================


class Marker(ABC):
    """Base class for all markers."""

    @abstractmethod
    def apply_to_test(self, test: Test) -> None:
        """Modify a test according to this marker."""


@dataclass(frozen=True)
class TestMarker(Marker):
    """Marks a method as a test regardless of its name."""

    __test__ = False

    def apply_to_test(self, test: Test) -> None:
        pass


@dataclass(frozen=True)
class DescriptionMarker(Marker):
    text: str

    def apply_to_test(self, test: Test) -> None:
        test.properties.set(PropertyNames.DESCRIPTION, self.text)


@dataclass(frozen=True)
class CategoryMarker(Marker):
    name: str

    def apply_to_test(self, test: Test) -> None:
        test.properties.add(PropertyNames.CATEGORY, self.name)


@dataclass(frozen=True)
class PropertyMarker(Marker):
    name: str
    value: Any

    def apply_to_test(self, test: Test) -> None:
        test.properties.add(self.name, self.value)


@dataclass(frozen=True)
class IgnoreMarker(Marker):
    reason: str

    def apply_to_test(self, test: Test) -> None:
        if test.run_state is not RunState.NOT_RUNNABLE:
            test.run_state = RunState.IGNORED
            test.properties.set(PropertyNames.SKIP_REASON, self.reason)


@dataclass(frozen=True)
class ExplicitMarker(Marker):
    reason: str = ""

    def apply_to_test(self, test: Test) -> None:
        if test.run_state not in (RunState.NOT_RUNNABLE, RunState.IGNORED):
            test.run_state = RunState.EXPLICIT
            if self.reason:
                test.properties.set(PropertyNames.SKIP_REASON, self.reason)


# =============================================================================
# Decorators
# =============================================================================


def add_marker(target: _T, marker: Marker) -> _T:
    """Attach a marker to a class or function and return the target."""
    holder: Any = target
    if isinstance(holder, (staticmethod, classmethod)):
        holder = holder.__func__
    if isinstance(holder, type):
        own = holder.__dict__.get(MARKERS_ATTR, ())
    else:
        own = getattr(holder, MARKERS_ATTR, ())
    setattr(holder, MARKERS_ATTR, (*own, marker))
    return target


def get_markers(target: Any) -> tuple[Marker, ...]:
    """Return the markers of a class (base classes first) or a function."""
    if isinstance(target, (staticmethod, classmethod)):
        target = target.__func__
    if isinstance(target, type):
        markers: list[Marker] = []
        for klass in reversed(inspect.getmro(target)):
            markers.extend(klass.__dict__.get(MARKERS_ATTR, ()))
        return tuple(markers)
    return tuple(getattr(target, MARKERS_ATTR, ()))


def _marking(marker: Marker) -> Callable[[_T], _T]:
    def decorator(target: _T) -> _T:
        return add_marker(target, marker)

    return decorator


def test(target: _T) -> _T:
    """Mark a method as a test."""
    return add_marker(target, TestMarker())


test.__test__ = False  # type: ignore[attr-defined]


def is_marked_test(function: Any) -> bool:
    return any(isinstance(marker, TestMarker) for marker in get_markers(function))


def description(text: str) -> Callable[[_T], _T]:
    return _marking(DescriptionMarker(text))


def category(name: str) -> Callable[[_T], _T]:
    return _marking(CategoryMarker(name))


def fixture_property(name: str, value: Any) -> Callable[[_T], _T]:
    return _marking(PropertyMarker(name, value))


def ignore(reason: str) -> Callable[[_T], _T]:
    return _marking(IgnoreMarker(reason))


def explicit(reason: str = "") -> Callable[[_T], _T]:
    return _marking(ExplicitMarker(reason))


# =============================================================================
# Applier
# =============================================================================


@runtime_checkable
class AnnotationApplier(Protocol):
    """Applies declarative metadata of a class or function to a test."""

    def apply(self, test: Test, target: Any) -> None:
        """Mutate ``test`` with the metadata declared on ``target``."""
        ...


class MarkerApplier:
    """Applies the markers attached by this module's decorators."""

    def apply(self, test: Test, target: Any) -> None:
        for marker in get_markers(target):
            marker.apply_to_test(test)
