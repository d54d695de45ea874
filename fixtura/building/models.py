"""
Models for fixture construction.

This module provides the run-state enumeration, the multi-valued property
bag, the test hierarchy produced by the fixture builder (TestFixture holding
TestMethod children), and FixtureData, the validated input describing how a
parameterized fixture should be built.

Inputs are frozen pydantic models; the test hierarchy is made of mutable
dataclasses, filled in step by step while a fixture is built.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from fixtura.building.type_info import (
    MethodInfo,
    TypeInfo,
    is_type_reference,
    resolve_type,
    type_display_name,
)


class RunState(str, Enum):
    """Execution disposition of a test or fixture."""

    RUNNABLE = "runnable"
    NOT_RUNNABLE = "not_runnable"
    SKIPPED = "skipped"
    EXPLICIT = "explicit"
    IGNORED = "ignored"


class PropertyNames:
    """Well-known property keys."""

    SKIP_REASON = "_SKIPREASON"
    DESCRIPTION = "Description"
    CATEGORY = "Category"


# =============================================================================
# PropertyBag
# =============================================================================


class PropertyBag:
    """
    Ordered multi-valued property storage.

    Each key maps to a list of values. ``add`` appends, ``set`` replaces.

    Example:
        >>> bag = PropertyBag()
        >>> bag.add("Category", "fast")
        >>> bag.add("Category", "db")
        >>> bag["Category"]
        ['fast', 'db']
    """

    def __init__(self, items: Mapping[str, Iterable[Any]] | None = None) -> None:
        self._items: dict[str, list[Any]] = {}
        if items:
            for key, values in items.items():
                for value in values:
                    self.add(key, value)

    def add(self, key: str, value: Any) -> None:
        """Append a value under a key."""
        self._items.setdefault(key, []).append(value)

    def set(self, key: str, value: Any) -> None:
        """Replace all values under a key with a single value."""
        self._items[key] = [value]

    def get(self, key: str, default: Any = None) -> Any:
        """Return the first value stored under a key."""
        values = self._items.get(key)
        return values[0] if values else default

    def keys(self) -> list[str]:
        return list(self._items)

    def to_dict(self) -> dict[str, list[Any]]:
        return {key: list(values) for key, values in self._items.items()}

    def __getitem__(self, key: str) -> list[Any]:
        return list(self._items.get(key, []))

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyBag):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"PropertyBag({self._items!r})"


# =============================================================================
# Test hierarchy
# =============================================================================


@dataclass(eq=False)
class Test:
    """Base for everything the builder produces."""

    __test__ = False

    name: str
    full_name: str = ""
    run_state: RunState = RunState.RUNNABLE
    properties: PropertyBag = field(default_factory=PropertyBag)

    @property
    def skip_reason(self) -> str | None:
        """Reason the test is skipped or not runnable, if any."""
        reason: str | None = self.properties.get(PropertyNames.SKIP_REASON)
        return reason

    @property
    def is_runnable(self) -> bool:
        return self.run_state is RunState.RUNNABLE

    def make_not_runnable(self, reason: str) -> None:
        """Disqualify the test, recording why."""
        self.run_state = RunState.NOT_RUNNABLE
        self.properties.set(PropertyNames.SKIP_REASON, reason)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON/YAML output."""
        return {
            "name": self.name,
            "full_name": self.full_name,
            "run_state": self.run_state.value,
            "properties": {
                key: [_plain(value) for value in values]
                for key, values in self.properties.to_dict().items()
            },
        }


@dataclass(eq=False)
class TestMethod(Test):
    """A single test case built from a fixture method."""

    __test__ = False

    method: MethodInfo | None = None


@dataclass(eq=False)
class TestFixture(Test):
    """
    A suite built from a fixture class.

    Holds the (possibly specialized) type it was built from, the constructor
    arguments it will be instantiated with, and its test cases in method
    enumeration order.
    """

    __test__ = False

    type_info: TypeInfo | None = None
    arguments: tuple[Any, ...] = ()
    tests: list[Test] = field(default_factory=list)

    @classmethod
    def for_type(cls, type_info: TypeInfo) -> "TestFixture":
        """
        Create a fixture named after its type.

        Abstract classes that are not static containers can never be
        instantiated, so their fixture starts out not runnable.
        """
        fixture = cls(
            name=type_info.display_name,
            full_name=type_info.full_name,
            type_info=type_info,
        )
        if type_info.is_abstract and not type_info.is_static_class:
            fixture.make_not_runnable("Fixture is an abstract class")
        return fixture

    @property
    def test_count(self) -> int:
        return len(self.tests)

    def add(self, test: Test) -> None:
        self.tests.append(test)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["type"] = self.type_info.full_name if self.type_info else None
        result["arguments"] = [_plain(arg) for arg in self.arguments]
        result["tests"] = [test.to_dict() for test in self.tests]
        return result

    def to_yaml(self) -> str:
        """Serialize to YAML format."""
        result: str = yaml.dump(
            self.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        return result


def _plain(value: Any) -> Any:
    """Reduce a value to something JSON and YAML can represent."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if is_type_reference(value):
        return type_display_name(value)
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return repr(value)


# =============================================================================
# FixtureData
# =============================================================================


class FixtureData(BaseModel):
    """
    Caller-supplied data for building a parameterized fixture.

    Example:
        >>> data = FixtureData(arguments=[int, "seed"])
        >>> data.ignore("flaky on CI").run_state
        <RunState.IGNORED: 'ignored'>
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    arguments: list[Any] = Field(
        default_factory=list,
        description="Constructor arguments, optionally led by type arguments",
    )
    type_args: list[Any] = Field(
        default_factory=list,
        description="Explicit type arguments for a generic fixture",
    )
    run_state: RunState = Field(
        default=RunState.RUNNABLE,
        description="Run state to apply unless the fixture is disqualified",
    )
    properties: dict[str, list[Any]] = Field(
        default_factory=dict,
        description="Properties copied onto the fixture, one entry per value",
    )

    @field_validator("type_args")
    @classmethod
    def type_args_are_types(cls, v: list[Any]) -> list[Any]:
        """Validate that every type argument is a type."""
        for arg in v:
            if not is_type_reference(arg):
                raise ValueError(f"Type argument is not a type: {arg!r}")
        return v

    @field_validator("properties", mode="before")
    @classmethod
    def properties_are_lists(cls, v: Any) -> Any:
        """Accept single values as one-element lists."""
        if isinstance(v, Mapping):
            return {
                key: list(values) if isinstance(values, (list, tuple)) else [values]
                for key, values in v.items()
            }
        return v

    def ignore(self, reason: str) -> "FixtureData":
        """Return a copy marked as ignored."""
        return self._with_run_state(RunState.IGNORED, reason)

    def explicit(self, reason: str | None = None) -> "FixtureData":
        """Return a copy marked as explicit."""
        return self._with_run_state(RunState.EXPLICIT, reason)

    def _with_run_state(self, run_state: RunState, reason: str | None) -> "FixtureData":
        properties = {key: list(values) for key, values in self.properties.items()}
        if reason:
            properties[PropertyNames.SKIP_REASON] = [reason]
        return self.model_copy(update={"run_state": run_state, "properties": properties})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FixtureData":
        """
        Create fixture data from plain configuration values.

        Type arguments may be given as names (``"int"``,
        ``"package.module.Class"``); an argument written as ``{type: name}``
        is a type-valued argument.
        """
        type_args = [
            resolve_type(arg) if isinstance(arg, str) else arg
            for arg in data.get("type_args") or []
        ]
        arguments = [
            resolve_type(arg["type"])
            if isinstance(arg, Mapping) and set(arg) == {"type"}
            else arg
            for arg in data.get("arguments") or []
        ]
        fixture_data = cls(
            arguments=arguments,
            type_args=type_args,
            run_state=RunState(data.get("run_state", RunState.RUNNABLE.value)),
            properties=data.get("properties") or {},
        )
        if data.get("ignore"):
            fixture_data = fixture_data.ignore(str(data["ignore"]))
        return fixture_data

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "FixtureData":
        """Deserialize from YAML format."""
        data = yaml.safe_load(yaml_str) or {}
        return cls.from_dict(data)
