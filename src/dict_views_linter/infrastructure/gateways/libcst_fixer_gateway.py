"""LibCST based Fixer Gateway."""

import logging
from typing import Optional

import libcst as cst

from dict_views_linter.domain.entities import Finding
from dict_views_linter.domain.protocols import FileSystemProtocol, FixerGatewayProtocol
from dict_views_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from dict_views_linter.infrastructure.gateways.transformers import DictViewFixer, DictViewTransformer

logger = logging.getLogger(__name__)


class LibCSTFixerGateway(FixerGatewayProtocol):
    """Gateway for applying dict-view findings to source files using LibCST."""

    def __init__(
        self,
        filesystem: Optional[FileSystemProtocol] = None,
        fixer: Optional[DictViewFixer] = None,
    ) -> None:
        self._filesystem = filesystem or FileSystemGateway()
        self._fixer = fixer or DictViewFixer()

    def preview_fixes(self, source: str, findings: list[Finding]) -> str:
        """
        Return ``source`` with every applicable finding rewritten.

        Raises libcst.ParserSyntaxError when ``source`` does not parse.
        """
        module = cst.parse_module(source)
        transformer = DictViewTransformer(findings, fixer=self._fixer)
        module = module.visit(transformer)
        for finding, reason in transformer.skipped:
            logger.warning("Skipped %s at %s: %s", finding.rule_id, finding.location, reason)
        return module.code

    def apply_fixes(self, file_path: str, findings: list[Finding], dry_run: bool = False) -> bool:
        """
        Apply findings to a file.

        Args:
            file_path: Path to the file to modify
            findings: Findings produced for the file's current content
            dry_run: Compute the rewrite but leave the file untouched

        Returns:
            True if the file was (or would be) modified, False otherwise
        """
        if not findings:
            return False
        try:
            source = self._filesystem.read_text(file_path)
            new_source = self.preview_fixes(source, findings)
            if new_source == source:
                return False
            if dry_run:
                return True
            self._filesystem.write_text(file_path, new_source)
            return True
        except (OSError, UnicodeDecodeError, cst.ParserSyntaxError) as exc:
            logger.warning("Could not fix %s: %s", file_path, exc)
            return False
