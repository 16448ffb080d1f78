from typing import TYPE_CHECKING, Any, Optional, cast

from dict_views_linter.domain.config import ConfigurationLoader
from dict_views_linter.domain.rules import DictViewDetector
from dict_views_linter.infrastructure.config_file_loader import ConfigFileLoader
from dict_views_linter.infrastructure.gateways.astroid_gateway import AstroidGateway, AstroidResolver
from dict_views_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from dict_views_linter.infrastructure.gateways.libcst_fixer_gateway import LibCSTFixerGateway
from dict_views_linter.interface.telemetry import TyperTelemetry

if TYPE_CHECKING:
    from dict_views_linter.domain.protocols import (
        AstroidProtocol,
        DetectorProtocol,
        FileSystemProtocol,
        FixerGatewayProtocol,
        TelemetryPort,
    )


class DictViewsContainer:
    """Dependency Injection Container for the dict-views linter."""

    def __init__(self, config: Optional[dict[str, object]] = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config)

    def _register_defaults(self, config: Optional[dict[str, object]]) -> None:
        """Register default implementations for protocols."""
        if config is None:
            config = ConfigFileLoader.load_config_from_fs()
        config_loader = ConfigurationLoader(config)
        self.register_singleton("ConfigurationLoader", config_loader)

        self.register_singleton("TelemetryPort", TyperTelemetry())
        self.register_singleton("AstroidGateway", AstroidGateway())
        filesystem = FileSystemGateway()
        self.register_singleton("FileSystemGateway", filesystem)
        self.register_singleton(
            "DictViewDetector",
            DictViewDetector(AstroidResolver(), config_loader.get_rule_config()),
        )
        self.register_singleton("LibCSTFixerGateway", LibCSTFixerGateway(filesystem=filesystem))

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_astroid_gateway(self) -> "AstroidProtocol":
        """Return the Astroid gateway."""
        return cast("AstroidProtocol", self.get("AstroidGateway"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_detector(self) -> "DetectorProtocol":
        return cast("DetectorProtocol", self.get("DictViewDetector"))

    def get_fixer_gateway(self) -> "FixerGatewayProtocol":
        """Return the LibCST fixer gateway."""
        return cast("FixerGatewayProtocol", self.get("LibCSTFixerGateway"))
