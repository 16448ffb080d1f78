"""Use Case: Apply dict-view fixes to source code."""

from typing import Optional

from dict_views_linter.domain.entities import Finding
from dict_views_linter.domain.protocols import (
    AstroidProtocol,
    FixerGatewayProtocol,
    TelemetryPort,
)
from dict_views_linter.use_cases.check import CheckUseCase


class ApplyFixesUseCase:
    """Detect findings per file and rewrite them into mapping views."""

    def __init__(
        self,
        check_use_case: CheckUseCase,
        fixer_gateway: FixerGatewayProtocol,
        telemetry: Optional[TelemetryPort] = None,
        astroid_gateway: Optional[AstroidProtocol] = None,
    ) -> None:
        self.check_use_case = check_use_case
        self.fixer_gateway = fixer_gateway
        self.telemetry = telemetry
        self.astroid_gateway = astroid_gateway

    def execute(self, target_path: str, dry_run: bool = False) -> int:
        """Fix every file under target_path. Returns the number of files (that would be) modified."""
        if self.telemetry:
            self.telemetry.step(f"Starting fixes on {target_path}")

        modified_count: int = 0
        for file_path, findings in self.check_use_case.execute(target_path).items():
            if self._fix_file(file_path, findings, dry_run):
                modified_count += 1

        # Cached inference describes the files as they were before rewriting.
        if modified_count and not dry_run and self.astroid_gateway is not None:
            self.astroid_gateway.clear_inference_cache()

        if self.telemetry:
            verb = "would be modified" if dry_run else "modified"
            self.telemetry.step(f"Fixes complete. Files {verb}: {modified_count}")
        return modified_count

    def _fix_file(self, file_path: str, findings: list[Finding], dry_run: bool) -> bool:
        if self.fixer_gateway.apply_fixes(file_path, findings, dry_run=dry_run):
            if self.telemetry:
                verb = "Would fix" if dry_run else "Fixed"
                self.telemetry.step(f"{verb} {len(findings)} finding(s) in {file_path}")
            return True
        if self.telemetry:
            self.telemetry.warning(f"No changes made to {file_path}")
        return False
