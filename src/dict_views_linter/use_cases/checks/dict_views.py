"""Dictionary view checks (W9701)."""

from typing import TYPE_CHECKING, Optional

import astroid  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from pylint.checkers import BaseChecker

from dict_views_linter.domain.config import ConfigurationLoader
from dict_views_linter.domain.entities import RULE_CODE, RULE_ID
from dict_views_linter.domain.protocols import DetectorProtocol
from dict_views_linter.domain.rules import DictViewDetector
from dict_views_linter.infrastructure.config_file_loader import ConfigFileLoader
from dict_views_linter.infrastructure.gateways.astroid_gateway import AstroidResolver


class DictViewsChecker(BaseChecker):
    """W9701: item projections through map() that a mapping view replaces."""

    name: str = "dict-views"

    def __init__(self, linter: "PyLinter", detector: Optional[DetectorProtocol] = None) -> None:
        self.msgs = {
            RULE_CODE: (
                "Use the mapping's %s view instead of projecting each item's %s with map().",
                RULE_ID,
                "map(lambda pair: pair[0], mapping.items()) re-implements mapping.keys() "
                "(pair[1] re-implements mapping.values()). Run 'dict-views fix' to rewrite it.",
            )
        }
        super().__init__(linter)
        if detector is None:
            config_loader = ConfigurationLoader(ConfigFileLoader.load_config_from_fs())
            detector = DictViewDetector(AstroidResolver(), config_loader.get_rule_config())
        self._detector = detector

    def visit_call(self, node: astroid.nodes.Call) -> None:
        finding = self._detector.check(node)
        if finding is None:
            return
        component = finding.message_args[0] if finding.message_args else ""
        self.add_message(RULE_ID, node=node, args=(finding.view.value, component))
