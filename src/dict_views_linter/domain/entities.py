from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

import astroid  # type: ignore[import-untyped]

from dict_views_linter.domain.errors import FixerInconsistencyError

RULE_CODE: str = "W9701"
RULE_ID: str = "prefer-dict-view"
VIEW_PAYLOAD_KEY: str = "view"


class ViewKind(Enum):
    """Structure-native views a mapping exposes."""

    KEYS = "keys"
    VALUES = "values"

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, str]]) -> "ViewKind":
        """Read the view out of a Finding payload. Raises on missing/malformed payloads."""
        if not payload or VIEW_PAYLOAD_KEY not in payload:
            raise FixerInconsistencyError(f"Finding payload has no '{VIEW_PAYLOAD_KEY}' entry: {payload!r}")
        raw = payload[VIEW_PAYLOAD_KEY]
        try:
            return cls(raw)
        except ValueError as exc:
            raise FixerInconsistencyError(f"Unknown view in finding payload: {raw!r}") from exc


class PairComponent(Enum):
    """Item tuple components, valued by their subscript index."""

    KEY = 0
    VALUE = 1

    @property
    def label(self) -> str:
        return self.name.lower()

    @property
    def view(self) -> ViewKind:
        return _COMPONENT_VIEWS[self]

    @classmethod
    def from_index(cls, index: object) -> Optional["PairComponent"]:
        """Return the component for a literal subscript index, None for anything else."""
        # bool is an int subclass; pair[True] is not a recognised spelling.
        if type(index) is not int:
            return None
        for component in cls:
            if component.value == index:
                return component
        return None


_COMPONENT_VIEWS: dict[PairComponent, ViewKind] = {
    PairComponent.KEY: ViewKind.KEYS,
    PairComponent.VALUE: ViewKind.VALUES,
}

# Human-readable table for message rendering: {"key": "keys", "value": "values"}.
COMPONENT_VIEW_NAMES: Mapping[str, str] = MappingProxyType(
    {component.label: component.view.value for component in PairComponent}
)


@dataclass(frozen=True)
class SourceSpan:
    """Location of a node: 1-based lines, 0-based UTF-8 byte columns (as in ``ast``)."""

    line: int
    column: int
    end_line: int
    end_column: int

    @classmethod
    def from_node(cls, node: astroid.nodes.NodeNG) -> Optional["SourceSpan"]:
        """Span of an astroid node, or None when the node carries no end position."""
        if node.lineno is None or node.end_lineno is None:
            return None
        if node.col_offset is None or node.end_col_offset is None:
            return None
        return cls(node.lineno, node.col_offset, node.end_lineno, node.end_col_offset)

    def start(self) -> tuple[int, int]:
        return (self.line, self.column)

    def end(self) -> tuple[int, int]:
        return (self.end_line, self.end_column)

    def overlaps(self, other: "SourceSpan") -> bool:
        return self.start() < other.end() and other.start() < self.end()

    def __str__(self) -> str:
        return f"{self.line}:{self.column}-{self.end_line}:{self.end_column}"


@dataclass(frozen=True)
class Finding:
    """
    A detected item projection that can be rewritten into a mapping view.

    The view is carried as a ViewKind. ``payload`` exposes the same fact as a
    one-entry string mapping for hosts that only transport string properties.
    """

    rule_id: str
    location: SourceSpan
    view: ViewKind
    message_args: tuple[str, ...] = ()

    @property
    def payload(self) -> Mapping[str, str]:
        return MappingProxyType({VIEW_PAYLOAD_KEY: self.view.value})

    @classmethod
    def from_payload(
        cls,
        rule_id: str,
        location: SourceSpan,
        payload: Optional[Mapping[str, str]],
        message_args: tuple[str, ...] = (),
    ) -> "Finding":
        """Rebuild a Finding from its string payload (e.g. after crossing a host boundary)."""
        return cls(rule_id, location, ViewKind.from_payload(payload), tuple(message_args))

    def describe(self) -> str:
        return f"Prefer using the {self.view.value} view instead."
