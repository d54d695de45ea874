"""
FixtureBuilder - builds a TestFixture from a fixture class.

Orchestrates the full construction flow:
1. Generic resolution (explicit type arguments, leading type-valued
   arguments, or deduction from argument values)
2. Naming and run-state propagation from caller-supplied FixtureData
3. Validation (open type parameters, constructor matching)
4. Class-level markers
5. Test case population through a pluggable TestCaseBuilder

A fixture is always returned. Anything that keeps it from running is
recorded on it as a not-runnable run state with a reason.
"""

import logging
from typing import Any

from fixtura.building.annotations import AnnotationApplier, MarkerApplier
from fixtura.building.models import FixtureData, RunState, Test, TestFixture
from fixtura.building.test_case_builder import DefaultTestCaseBuilder, TestCaseBuilder
from fixtura.building.type_helper import (
    ConstructorTypeArgumentDeducer,
    DefaultDisplayNameRenderer,
    DisplayNameRenderer,
    TypeArgumentDeducer,
)
from fixtura.building.type_info import MethodInfo, TypeInfo, is_type_reference
from fixtura.building.validator import NO_TYPE_ARGS_MSG, FixtureValidator
from fixtura.config import BuilderConfig

logger = logging.getLogger(__name__)

NOT_RUNNABLE_BY_CALLER_MSG = "Fixture was marked not runnable"


class FixtureBuilder:
    """
    Builds test fixtures from classes.

    Collaborators are injected and never reassigned, so one builder can be
    shared by concurrent callers as long as the collaborators are reentrant.

    Usage:
        builder = FixtureBuilder()
        fixture = builder.build_from(Calculator)
        fixture = builder.build_from_data(Repo, FixtureData(arguments=[int, "seed"]))
    """

    def __init__(
        self,
        test_case_builder: TestCaseBuilder | None = None,
        annotation_applier: AnnotationApplier | None = None,
        deducer: TypeArgumentDeducer | None = None,
        renderer: DisplayNameRenderer | None = None,
        config: BuilderConfig | None = None,
    ) -> None:
        """Initialize the builder, creating default collaborators as needed."""
        self.config = config or BuilderConfig()
        self._annotation_applier = annotation_applier or MarkerApplier()
        self._test_builder = test_case_builder or DefaultTestCaseBuilder(
            self.config, self._annotation_applier
        )
        self._deducer = deducer or ConstructorTypeArgumentDeducer()
        self._renderer = renderer or DefaultDisplayNameRenderer(self.config.max_string_length)
        self._validator = FixtureValidator()

    def build_from(self, type_: Any) -> TestFixture:
        """
        Build a fixture for a class used as-is, without arguments.

        Args:
            type_: A class, parameterized alias or TypeInfo.

        Returns:
            The fixture, possibly marked not runnable.
        """
        type_info = TypeInfo.of(type_)
        fixture = TestFixture.for_type(type_info)

        if fixture.run_state is not RunState.NOT_RUNNABLE:
            self._validator.check_fixture_is_valid(fixture)

        self._annotation_applier.apply(fixture, type_info.origin)
        self.add_test_cases_to_fixture(fixture)

        self._log_built(fixture)
        return fixture

    def build_from_data(self, type_: Any, fixture_data: FixtureData) -> TestFixture:
        """
        Build a fixture using caller-supplied arguments, type arguments,
        run state and properties.

        Args:
            type_: A class, parameterized alias or TypeInfo.
            fixture_data: How to parameterize the fixture.

        Returns:
            The fixture, possibly marked not runnable.

        Raises:
            ValueError: If fixture_data is None.
        """
        if fixture_data is None:
            raise ValueError("fixture_data must not be None")

        type_info = TypeInfo.of(type_)
        arguments = list(fixture_data.arguments)

        if type_info.contains_generic_parameters:
            type_info, arguments = self._resolve_generic_type(
                type_info, list(fixture_data.type_args), arguments
            )

        fixture = TestFixture.for_type(type_info)

        if arguments:
            name = fixture.name = self._renderer.render(type_info, arguments)
            namespace = type_info.namespace
            fixture.full_name = f"{namespace}.{name}" if namespace else name
            fixture.arguments = tuple(arguments)

        # A caller's run state never revives a disqualified fixture
        if fixture.run_state is not RunState.NOT_RUNNABLE:
            fixture.run_state = fixture_data.run_state

        for key, values in fixture_data.properties.items():
            for value in values:
                fixture.properties.add(key, value)

        if fixture.run_state is RunState.NOT_RUNNABLE and not fixture.skip_reason:
            fixture.make_not_runnable(NOT_RUNNABLE_BY_CALLER_MSG)

        if fixture.run_state is not RunState.NOT_RUNNABLE:
            self._validator.check_fixture_is_valid(fixture)

        self._annotation_applier.apply(fixture, type_info.origin)
        self.add_test_cases_to_fixture(fixture)

        self._log_built(fixture)
        return fixture

    def add_test_cases_to_fixture(self, fixture: TestFixture) -> None:
        """
        Add a test for every method the test case builder recognizes.

        Tests are added in method enumeration order. A fixture whose type
        still has open type parameters is marked not runnable instead.
        """
        type_info = fixture.type_info
        if type_info is None:
            raise ValueError("Fixture has no type to scan")

        if type_info.contains_generic_parameters:
            fixture.make_not_runnable(NO_TYPE_ARGS_MSG)
            return

        for method in type_info.get_methods():
            test = self._build_test_case(method, fixture)
            if test is not None:
                fixture.add(test)

    def _build_test_case(self, method: MethodInfo, fixture: TestFixture) -> Test | None:
        if not self._test_builder.can_build_from(method, fixture):
            return None
        return self._test_builder.build_from(method, fixture)

    def _resolve_generic_type(
        self, type_info: TypeInfo, type_args: list[Any], arguments: list[Any]
    ) -> tuple[TypeInfo, list[Any]]:
        """
        Close an open generic type.

        Explicit type arguments are used as-is. Otherwise the leading run of
        type-valued arguments becomes the type arguments and is removed from
        the constructor arguments; failing that, the deducer is consulted.
        When nothing resolves, the type is returned still open.
        """
        if not type_args:
            count = 0
            for arg in arguments:
                if not is_type_reference(arg):
                    break
                count += 1
            type_args = arguments[:count]
            arguments = arguments[count:]

        if not type_args:
            deduced, type_args = self._deducer.try_deduce(type_info, arguments)
            if not deduced:
                logger.debug("Could not deduce type arguments for %s", type_info.full_name)
                return type_info, arguments

        expected = len(type_info.type_parameters)
        if len(type_args) != expected:
            logger.debug(
                "Ignoring %d type arguments for %s, which expects %d",
                len(type_args),
                type_info.full_name,
                expected,
            )
            return type_info, arguments

        specialized = type_info.make_generic_type(type_args)
        logger.debug("Specialized %s as %s", type_info.full_name, specialized.display_name)
        return specialized, arguments

    @staticmethod
    def _log_built(fixture: TestFixture) -> None:
        if fixture.run_state is RunState.NOT_RUNNABLE:
            logger.debug("Fixture %s is not runnable: %s", fixture.full_name, fixture.skip_reason)
        logger.debug(
            "Built fixture %s (%s, %d tests)",
            fixture.full_name,
            fixture.run_state.value,
            fixture.test_count,
        )
