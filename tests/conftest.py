"""Pytest configuration and shared fixtures.

pythonpath in pyproject.toml puts src/ and the project root on sys.path so
``dict_views_linter`` and the ``tests.linter_test_utils`` helpers import
without installation.
"""

from unittest.mock import MagicMock

import pytest

from dict_views_linter.domain.rules import DictViewDetector
from dict_views_linter.infrastructure.gateways.astroid_gateway import AstroidGateway, AstroidResolver
from dict_views_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from dict_views_linter.infrastructure.gateways.libcst_fixer_gateway import LibCSTFixerGateway
from dict_views_linter.interface.cli import CLIDependencies
from tests.linter_test_utils import PermissiveResolver


@pytest.fixture
def detector() -> DictViewDetector:
    return DictViewDetector(AstroidResolver())


@pytest.fixture
def permissive_detector() -> DictViewDetector:
    return DictViewDetector(PermissiveResolver())


@pytest.fixture
def cli_deps(detector: DictViewDetector) -> CLIDependencies:
    """Real gateways and detector; telemetry is a mock."""
    filesystem = FileSystemGateway()
    return CLIDependencies(
        telemetry=MagicMock(),
        astroid_gateway=AstroidGateway(),
        filesystem=filesystem,
        detector=detector,
        fixer_gateway=LibCSTFixerGateway(filesystem=filesystem),
    )
