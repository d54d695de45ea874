"""
Runnability checks for a freshly constructed fixture.
"""

from fixtura.building.models import TestFixture

NO_TYPE_ARGS_MSG = (
    "Fixture type contains unresolved type parameters. Supply type arguments "
    "or constructor arguments from which they can be deduced."
)
NO_SUITABLE_CONSTRUCTOR_MSG = "No suitable constructor was found"
NO_FIXTURE_TYPE_MSG = "Fixture has no type to instantiate"


class FixtureValidator:
    """
    Marks a fixture not runnable when it could never be instantiated.

    Checks, in order: a missing type, open type parameters, then (for
    classes that are not static containers) a constructor matching the
    runtime types of the fixture's arguments. Only the fixture's run state
    and skip reason are changed; nothing is raised.
    """

    def check_fixture_is_valid(self, fixture: TestFixture) -> None:
        type_info = fixture.type_info
        if type_info is None:
            fixture.make_not_runnable(NO_FIXTURE_TYPE_MSG)
        elif type_info.contains_generic_parameters:
            fixture.make_not_runnable(NO_TYPE_ARGS_MSG)
        elif not type_info.is_static_class:
            arg_types = [type(arg) for arg in fixture.arguments]
            if type_info.get_constructor(arg_types) is None:
                fixture.make_not_runnable(NO_SUITABLE_CONSTRUCTOR_MSG)
