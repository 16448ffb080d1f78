"""Use Case: Detect dict-view findings in source files."""

import logging

import astroid  # type: ignore[import-untyped]

from dict_views_linter.domain.entities import Finding
from dict_views_linter.domain.protocols import (
    AstroidProtocol,
    DetectorProtocol,
    FileSystemProtocol,
)

logger = logging.getLogger(__name__)


class CheckUseCase:
    """Parse each Python file under a path and run the detector on every call."""

    def __init__(
        self,
        astroid_gateway: AstroidProtocol,
        detector: DetectorProtocol,
        filesystem: FileSystemProtocol,
    ) -> None:
        self.astroid_gateway = astroid_gateway
        self.detector = detector
        self.filesystem = filesystem

    def execute(self, target_path: str) -> dict[str, list[Finding]]:
        """Return findings per file; files without findings are left out."""
        results: dict[str, list[Finding]] = {}
        for file_path in self.filesystem.glob_python_files(target_path):
            findings = self.check_file(file_path)
            if findings:
                results[file_path] = findings
        return results

    def check_file(self, file_path: str) -> list[Finding]:
        module = self.astroid_gateway.parse_file(file_path)
        if module is None:
            return []
        return self.check_module(module)

    def check_module(self, module: astroid.nodes.Module) -> list[Finding]:
        findings: list[Finding] = []
        for call in module.nodes_of_class(astroid.nodes.Call):
            finding = self.detector.check(call)
            if finding is not None:
                logger.debug("%s: %s at %s", module.name, finding.rule_id, finding.location)
                findings.append(finding)
        return findings
