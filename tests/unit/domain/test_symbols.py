"""Unit tests for symbol variants and declared_type."""

import pytest

from dict_views_linter.domain.symbols import (
    Capability,
    FieldSymbol,
    LocalSymbol,
    MethodSymbol,
    ParameterSymbol,
    PropertySymbol,
    TypeRef,
    declared_type,
)

DICT = TypeRef("builtins.dict")


class TestDeclaredType:
    @pytest.mark.parametrize("kind", [LocalSymbol, FieldSymbol, PropertySymbol, ParameterSymbol])
    def test_value_symbols_answer_with_their_type(self, kind) -> None:
        assert declared_type(kind("data", DICT)) == DICT

    def test_method_answers_with_its_return_type(self) -> None:
        assert declared_type(MethodSymbol("get", "pkg.Config", DICT)) == DICT

    def test_untyped_and_missing(self) -> None:
        assert declared_type(LocalSymbol("data")) is None
        assert declared_type(MethodSymbol("get", "pkg.Config")) is None
        assert declared_type(None) is None

    def test_unknown_kind_is_unresolved(self) -> None:
        assert declared_type(object()) is None  # type: ignore[arg-type]


class TestCapability:
    def test_from_qname(self) -> None:
        capability = Capability.from_qname("collections.abc.Mapping")
        assert capability == Capability("Mapping", "collections.abc")
        assert capability.qname == "collections.abc.Mapping"

    def test_unqualified(self) -> None:
        assert Capability.from_qname("Mapping").qname == "Mapping"

    def test_type_ref_ignores_node_in_equality(self) -> None:
        assert TypeRef("builtins.dict", node=object()) == DICT  # type: ignore[arg-type]
        assert MethodSymbol("map", "builtins").qname == "builtins.map"
