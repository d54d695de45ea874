"""
Fixtura Building Engine.

Turns fixture classes into test fixtures.

Components:
- type_info: Reflection over classes and typing generics
- models: Run states, property bags, the test hierarchy and FixtureData
- annotations: Class and method markers and their applier
- test_case_builder: Per-method test recognition
- type_helper: Type-argument deduction and display names
- validator: Runnability checks
- fixture_builder: Orchestrates the full build
"""

from fixtura.building.annotations import (
    AnnotationApplier,
    MarkerApplier,
    category,
    description,
    explicit,
    fixture_property,
    get_markers,
    ignore,
    test,
)
from fixtura.building.fixture_builder import FixtureBuilder
from fixtura.building.models import (
    FixtureData,
    PropertyBag,
    PropertyNames,
    RunState,
    Test,
    TestFixture,
    TestMethod,
)
from fixtura.building.test_case_builder import DefaultTestCaseBuilder, TestCaseBuilder
from fixtura.building.type_helper import (
    ConstructorTypeArgumentDeducer,
    DefaultDisplayNameRenderer,
    DisplayNameRenderer,
    TypeArgumentDeducer,
)
from fixtura.building.type_info import (
    MethodInfo,
    MethodKind,
    TypeInfo,
    is_type_reference,
    resolve_type,
)
from fixtura.building.validator import (
    NO_FIXTURE_TYPE_MSG,
    NO_SUITABLE_CONSTRUCTOR_MSG,
    NO_TYPE_ARGS_MSG,
    FixtureValidator,
)

__all__ = [
    # Builder
    "FixtureBuilder",
    "FixtureValidator",
    "NO_FIXTURE_TYPE_MSG",
    "NO_SUITABLE_CONSTRUCTOR_MSG",
    "NO_TYPE_ARGS_MSG",
    # Models
    "FixtureData",
    "PropertyBag",
    "PropertyNames",
    "RunState",
    "Test",
    "TestFixture",
    "TestMethod",
    # Type descriptors
    "MethodInfo",
    "MethodKind",
    "TypeInfo",
    "is_type_reference",
    "resolve_type",
    # Collaborators
    "AnnotationApplier",
    "ConstructorTypeArgumentDeducer",
    "DefaultDisplayNameRenderer",
    "DefaultTestCaseBuilder",
    "DisplayNameRenderer",
    "MarkerApplier",
    "TestCaseBuilder",
    "TypeArgumentDeducer",
    # Markers
    "category",
    "description",
    "explicit",
    "fixture_property",
    "get_markers",
    "ignore",
    "test",
]
