"""
Tests for fixtura.building.type_info module.

Covers type references, display names, generic specialization, method
enumeration and constructor matching.
"""

import inspect

import pytest
from fixture_samples import (
    AbstractChecks,
    Box,
    Calculator,
    Counter,
    DerivedChecks,
    Flexible,
    Gadget,
    IntBox,
    IntKeyed,
    KeywordOnly,
    Pair,
    Repo,
    Settings,
    T,
    Utils,
    V,
    Widget,
)

from fixtura.building.type_info import (
    MethodKind,
    TypeInfo,
    is_type_reference,
    resolve_type,
    type_display_name,
)

# =============================================================================
# Helper Function Tests
# =============================================================================


class TestIsTypeReference:
    """Tests for is_type_reference."""

    def test_classes_are_type_references(self) -> None:
        assert is_type_reference(int)
        assert is_type_reference(Calculator)

    def test_parameterized_aliases_are_type_references(self) -> None:
        assert is_type_reference(list[int])
        assert is_type_reference(Repo[int])

    def test_values_are_not_type_references(self) -> None:
        assert not is_type_reference(42)
        assert not is_type_reference("int")
        assert not is_type_reference(None)
        assert not is_type_reference(Calculator())


class TestTypeDisplayName:
    """Tests for type_display_name."""

    def test_plain_class(self) -> None:
        assert type_display_name(int) == "int"

    def test_parameterized(self) -> None:
        assert type_display_name(Repo[int]) == "Repo[int]"
        assert type_display_name(dict[str, list[int]]) == "dict[str, list[int]]"

    def test_type_variable(self) -> None:
        assert type_display_name(T) == "T"

    def test_none(self) -> None:
        assert type_display_name(None) == "None"


class TestResolveType:
    """Tests for resolve_type."""

    def test_builtin_name(self) -> None:
        assert resolve_type("int") is int
        assert resolve_type("str") is str

    def test_dotted_path(self) -> None:
        assert resolve_type("fixture_samples.Calculator") is Calculator

    def test_dotted_path_into_stdlib(self) -> None:
        assert resolve_type("pathlib.Path").__name__ == "Path"

    def test_unknown_builtin_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown type name"):
            resolve_type("nosuchtype")

    def test_non_type_builtin_raises(self) -> None:
        with pytest.raises(ValueError):
            resolve_type("len")

    def test_unknown_attribute_raises(self) -> None:
        with pytest.raises(ValueError):
            resolve_type("fixture_samples.NoSuchClass")


# =============================================================================
# TypeInfo Tests
# =============================================================================


class TestTypeInfoBasics:
    """Tests for TypeInfo naming and flags."""

    def test_of_passes_type_info_through(self) -> None:
        info = TypeInfo.of(Calculator)
        assert TypeInfo.of(info) is info

    def test_rejects_non_class(self) -> None:
        with pytest.raises(TypeError):
            TypeInfo(42)

    def test_names(self) -> None:
        info = TypeInfo.of(Calculator)
        assert info.name == "Calculator"
        assert info.display_name == "Calculator"
        assert info.namespace == "fixture_samples"
        assert info.full_name == "fixture_samples.Calculator"

    def test_specialized_names(self) -> None:
        info = TypeInfo.of(Repo[int])
        assert info.name == "Repo"
        assert info.display_name == "Repo[int]"
        assert info.full_name == "fixture_samples.Repo[int]"
        assert info.origin is Repo

    def test_equality(self) -> None:
        assert TypeInfo.of(Repo[int]) == TypeInfo.of(Repo[int])
        assert TypeInfo.of(Repo[int]) != TypeInfo.of(Repo[str])
        assert len({TypeInfo.of(Box), TypeInfo.of(Box)}) == 1

    def test_abstract_and_sealed(self) -> None:
        assert TypeInfo.of(AbstractChecks).is_abstract
        assert not TypeInfo.of(AbstractChecks).is_sealed
        assert not TypeInfo.of(Calculator).is_abstract

    def test_static_class(self) -> None:
        assert TypeInfo.of(Utils).is_static_class
        assert not TypeInfo.of(AbstractChecks).is_static_class
        assert not TypeInfo.of(Calculator).is_static_class


class TestTypeInfoGenerics:
    """Tests for generic parameters and specialization."""

    def test_open_generic_contains_parameters(self) -> None:
        info = TypeInfo.of(Box)
        assert info.contains_generic_parameters
        assert info.type_parameters == (T,)
        assert info.arity == 1
        assert info.type_args == ()

    def test_closed_generic(self) -> None:
        info = TypeInfo.of(Box[int])
        assert not info.contains_generic_parameters
        assert info.type_args == (int,)
        assert info.arity == 1

    def test_non_generic(self) -> None:
        info = TypeInfo.of(Calculator)
        assert not info.contains_generic_parameters
        assert info.arity == 0

    def test_make_generic_type(self) -> None:
        closed = TypeInfo.of(Pair).make_generic_type([str, int])
        assert closed.display_name == "Pair[str, int]"
        assert not closed.contains_generic_parameters

    def test_make_generic_type_wrong_arity(self) -> None:
        with pytest.raises(ValueError, match="expects 2 type arguments"):
            TypeInfo.of(Pair).make_generic_type([int])

    def test_make_generic_type_on_closed_type(self) -> None:
        with pytest.raises(ValueError, match="no open type parameters"):
            TypeInfo.of(Calculator).make_generic_type([int])


class TestTypeInfoMethods:
    """Tests for method enumeration."""

    def test_lists_all_kinds_in_declaration_order(self) -> None:
        methods = TypeInfo.of(Calculator).get_methods()
        names = [m.name for m in methods]
        assert names == [
            "test_add",
            "test_subtract",
            "helper",
            "test_static",
            "test_class",
            "_test_private",
            "checks_marked",
            "__repr__",
        ]

    def test_method_kinds(self) -> None:
        kinds = {m.name: m.kind for m in TypeInfo.of(Calculator).get_methods()}
        assert kinds["test_add"] is MethodKind.INSTANCE
        assert kinds["test_static"] is MethodKind.STATIC
        assert kinds["test_class"] is MethodKind.CLASS

    def test_visibility_flags(self) -> None:
        methods = {m.name: m for m in TypeInfo.of(Calculator).get_methods()}
        assert methods["test_add"].is_public
        assert not methods["_test_private"].is_public
        assert methods["__repr__"].is_dunder

    def test_derived_first_overrides_once(self) -> None:
        methods = TypeInfo.of(DerivedChecks).get_methods()
        assert [m.name for m in methods] == ["test_derived", "test_overridden", "test_base"]
        overridden = methods[1]
        assert overridden.declaring_type is DerivedChecks

    def test_skips_typing_and_abc_plumbing(self) -> None:
        names = [m.name for m in TypeInfo.of(Repo).get_methods()]
        assert names == ["__init__", "test_stores"]

    def test_abstract_method_flag(self) -> None:
        methods = {m.name: m for m in TypeInfo.of(AbstractChecks).get_methods()}
        assert methods["test_abstract"].is_abstract
        assert not methods["test_concrete"].is_abstract

    def test_parameters_exclude_self_and_cls(self) -> None:
        methods = {m.name: m for m in TypeInfo.of(Calculator).get_methods()}
        assert methods["test_add"].parameters == []
        assert methods["test_class"].parameters == []
        assert methods["test_static"].parameters == []


class TestTypeInfoConstructors:
    """Tests for constructor lookup by argument types."""

    def test_default_constructor(self) -> None:
        signatures = TypeInfo.of(Calculator).get_constructors()
        assert len(signatures) == 1
        assert signatures[0] == inspect.Signature()
        assert TypeInfo.of(Calculator).get_constructor([]) is not None

    def test_exact_match(self) -> None:
        info = TypeInfo.of(Counter)
        assert info.get_constructor([int]) is not None
        assert info.get_constructor([str]) is None
        assert info.get_constructor([]) is None
        assert info.get_constructor([int, int]) is None

    def test_subclass_is_not_exact(self) -> None:
        assert TypeInfo.of(Counter).get_constructor([bool]) is None

    def test_zero_arg_constructor_rejects_arguments(self) -> None:
        assert TypeInfo.of(Widget).get_constructor([int]) is None
        assert TypeInfo.of(Widget).get_constructor([]) is not None

    def test_overloads_are_separate_constructors(self) -> None:
        info = TypeInfo.of(Gadget)
        assert len(info.get_constructors()) == 3
        assert info.get_constructor([]) is not None
        assert info.get_constructor([int]) is not None
        assert info.get_constructor([int, str]) is not None
        assert info.get_constructor([str]) is None

    def test_unannotated_any_and_union(self) -> None:
        info = TypeInfo.of(Flexible)
        assert info.get_constructor([type(None), str, float]) is not None
        assert info.get_constructor([int, bytes, list]) is not None
        assert info.get_constructor([str, str, str]) is None

    def test_required_keyword_only_never_matches(self) -> None:
        assert TypeInfo.of(KeywordOnly).get_constructor([]) is None

    def test_dataclass_constructor_uses_full_arity(self) -> None:
        info = TypeInfo.of(Settings)
        assert info.get_constructor([int, str]) is not None
        assert info.get_constructor([int]) is None

    def test_type_variables_are_substituted(self) -> None:
        closed = TypeInfo.of(Box[int])
        (signature,) = closed.get_constructors()
        assert signature.parameters["item"].annotation is int
        assert closed.get_constructor([int]) is not None
        assert closed.get_constructor([str]) is None

    def test_open_type_keeps_type_variables(self) -> None:
        (signature,) = TypeInfo.of(Box).get_constructors()
        assert signature.parameters["item"].annotation is T

    def test_inherited_constructor_of_closed_base(self) -> None:
        info = TypeInfo.of(IntBox)
        (signature,) = info.get_constructors()
        assert signature.parameters["item"].annotation is int
        assert info.get_constructor([int]) is not None
        assert info.get_constructor([str]) is None

    def test_inherited_constructor_of_partially_closed_base(self) -> None:
        closed = TypeInfo.of(IntKeyed).make_generic_type([str])
        (signature,) = closed.get_constructors()
        assert signature.parameters["key"].annotation is int
        assert signature.parameters["value"].annotation is str
        assert closed.get_constructor([int, str]) is not None
        assert closed.get_constructor([str, str]) is None

    def test_partially_closed_base_keeps_open_variables(self) -> None:
        (signature,) = TypeInfo.of(IntKeyed).get_constructors()
        assert signature.parameters["key"].annotation is int
        assert signature.parameters["value"].annotation is V
