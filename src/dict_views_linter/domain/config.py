"""Configuration for the dict-views rule, built from [tool.dict-views]."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from dict_views_linter.domain.errors import ConfigurationError
from dict_views_linter.domain.symbols import Capability

logger = logging.getLogger(__name__)

DEFAULT_COMBINATORS: frozenset[str] = frozenset({"builtins.map"})

# builtins.dict does not list Mapping among its bases (it is registered
# virtually), so it has to be named on its own. typing aliases resolve to
# classes declared in the typing module.
DEFAULT_MAPPING_TYPES: frozenset[str] = frozenset({
    "builtins.dict",
    "_collections_abc.Mapping",
    "_collections_abc.MutableMapping",
    "collections.abc.Mapping",
    "collections.abc.MutableMapping",
    "typing.Mapping",
    "typing.MutableMapping",
})

DEFAULT_ITEMS_METHOD: str = "items"


@dataclass(frozen=True)
class RuleConfig:
    """Immutable settings consulted by the detector."""

    combinators: frozenset[str] = DEFAULT_COMBINATORS
    mapping_capabilities: frozenset[Capability] = field(
        default_factory=lambda: frozenset(Capability.from_qname(q) for q in DEFAULT_MAPPING_TYPES)
    )
    items_method: str = DEFAULT_ITEMS_METHOD

    def is_combinator(self, qname: str) -> bool:
        return qname in self.combinators

    def is_mapping(self, capabilities: frozenset[Capability]) -> bool:
        return not self.mapping_capabilities.isdisjoint(capabilities)


class ConfigurationLoader:
    """
    Turns the [tool.dict-views] table into a RuleConfig.

    Invalid entries are logged and skipped; a bad entry never disables the
    defaults.
    """

    SECTION: str = "dict-views"

    def __init__(self, config: Optional[dict[str, object]] = None) -> None:
        self._config: dict[str, object] = dict(config or {})
        self._rule_config: Optional[RuleConfig] = None

    def get_rule_config(self) -> RuleConfig:
        if self._rule_config is None:
            self._rule_config = self._build()
        return self._rule_config

    def _build(self) -> RuleConfig:
        combinators = set(DEFAULT_COMBINATORS)
        combinators.update(self._qualified_names("combinators"))

        mapping_types = set(DEFAULT_MAPPING_TYPES)
        mapping_types.update(self._qualified_names("mapping-types"))

        items_method = self._config.get("items-method", DEFAULT_ITEMS_METHOD)
        if not isinstance(items_method, str) or not items_method.isidentifier():
            logger.warning(
                "Configuration Warning: 'items-method' must be an identifier, got %r; using %r.",
                items_method,
                DEFAULT_ITEMS_METHOD,
            )
            items_method = DEFAULT_ITEMS_METHOD

        return RuleConfig(
            combinators=frozenset(combinators),
            mapping_capabilities=frozenset(Capability.from_qname(q) for q in mapping_types),
            items_method=items_method,
        )

    def _qualified_names(self, key: str) -> list[str]:
        raw = self._config.get(key, [])
        if not isinstance(raw, (list, tuple)):
            logger.warning("Configuration Warning: '%s' must be a list of qualified names; ignoring it.", key)
            return []
        names: list[str] = []
        for entry in raw:
            try:
                names.append(self.validate_qualified_name(entry))
            except ConfigurationError as exc:
                logger.warning("Configuration Warning: %s", exc)
        return names

    @staticmethod
    def validate_qualified_name(value: object) -> str:
        """Return ``value`` if it looks like 'package.module.Name'. Raises ConfigurationError."""
        if not isinstance(value, str) or "." not in value:
            raise ConfigurationError(f"expected a dotted qualified name, got {value!r}")
        if not all(part.isidentifier() for part in value.split(".")):
            raise ConfigurationError(f"not a valid qualified name: {value!r}")
        return value
