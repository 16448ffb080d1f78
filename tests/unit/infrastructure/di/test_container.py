"""Unit tests for DictViewsContainer."""

import pytest

from dict_views_linter.domain.config import ConfigurationLoader
from dict_views_linter.domain.rules import DictViewDetector
from dict_views_linter.infrastructure.di.container import DictViewsContainer
from dict_views_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from dict_views_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from dict_views_linter.infrastructure.gateways.libcst_fixer_gateway import LibCSTFixerGateway
from dict_views_linter.interface.telemetry import TyperTelemetry


class TestDictViewsContainer:
    def test_registers_defaults(self) -> None:
        container = DictViewsContainer(config={"items-method": "iteritems"})

        assert isinstance(container.get_config_loader(), ConfigurationLoader)
        assert container.get_config_loader().get_rule_config().items_method == "iteritems"
        assert isinstance(container.get_telemetry_port(), TyperTelemetry)
        assert isinstance(container.get_astroid_gateway(), AstroidGateway)
        assert isinstance(container.get_filesystem_gateway(), FileSystemGateway)
        assert isinstance(container.get_detector(), DictViewDetector)
        assert isinstance(container.get_fixer_gateway(), LibCSTFixerGateway)

    def test_register_and_get(self) -> None:
        container = DictViewsContainer(config={})
        marker = object()

        container.register_singleton("Marker", marker)

        assert container.get("Marker") is marker

    def test_unknown_key(self) -> None:
        with pytest.raises(ValueError, match="not registered"):
            DictViewsContainer(config={}).get("Missing")
