"""
Resolver answers about what an expression denotes.

A Symbol is one of five tagged variants. ``declared_type`` is the single
extraction point for the type a symbol carries; callables answer with their
return type.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

import astroid  # type: ignore[import-untyped]


@dataclass(frozen=True)
class Capability:
    """A class a type implements, identified by name and declaring module."""

    name: str
    namespace: str

    @classmethod
    def from_qname(cls, qname: str) -> "Capability":
        """Split 'collections.abc.Mapping' into ('Mapping', 'collections.abc')."""
        namespace, _, name = qname.rpartition(".")
        return cls(name=name, namespace=namespace)

    @property
    def qname(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name


@dataclass(frozen=True)
class TypeRef:
    """A resolved class. ``node`` is the astroid ClassDef it was resolved from."""

    qname: str
    node: Optional[astroid.nodes.ClassDef] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class LocalSymbol:
    name: str
    type: Optional[TypeRef] = None


@dataclass(frozen=True)
class FieldSymbol:
    name: str
    type: Optional[TypeRef] = None


@dataclass(frozen=True)
class PropertySymbol:
    name: str
    type: Optional[TypeRef] = None


@dataclass(frozen=True)
class ParameterSymbol:
    name: str
    type: Optional[TypeRef] = None


@dataclass(frozen=True)
class MethodSymbol:
    """A callable: function, method or class (calling a class returns an instance)."""

    name: str
    namespace: str
    return_type: Optional[TypeRef] = None

    @property
    def qname(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name


Symbol = Union[LocalSymbol, FieldSymbol, PropertySymbol, ParameterSymbol, MethodSymbol]


def declared_type(symbol: Optional[Symbol]) -> Optional[TypeRef]:
    """Type of a symbol's value; the return type for callables."""
    if symbol is None:
        return None
    if isinstance(symbol, MethodSymbol):
        return symbol.return_type
    if isinstance(symbol, (LocalSymbol, FieldSymbol, PropertySymbol, ParameterSymbol)):
        return symbol.type
    # Unknown kinds from a foreign resolver count as unresolved.
    return None
