"""Unit tests for CheckUseCase."""

from unittest.mock import MagicMock

from dict_views_linter.domain.entities import ViewKind
from dict_views_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from dict_views_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from dict_views_linter.use_cases.check import CheckUseCase


def _use_case(detector) -> CheckUseCase:
    return CheckUseCase(
        astroid_gateway=AstroidGateway(),
        detector=detector,
        filesystem=FileSystemGateway(),
    )


class TestCheckUseCase:
    def test_collects_findings_per_file(self, tmp_path, detector) -> None:
        (tmp_path / "inventory.py").write_text(
            "stock = {'apples': 3}\n"
            "names = list(map(lambda p: p[0], stock.items()))\n"
            "counts = list(map(lambda p: p[1], stock.items()))\n",
            encoding="utf-8",
        )
        (tmp_path / "clean.py").write_text("stock = {}\nnames = list(stock)\n", encoding="utf-8")

        results = _use_case(detector).execute(str(tmp_path))

        assert list(results) == [str(tmp_path / "inventory.py")]
        findings = results[str(tmp_path / "inventory.py")]
        assert [f.view for f in findings] == [ViewKind.KEYS, ViewKind.VALUES]
        assert [f.location.line for f in findings] == [2, 3]

    def test_unparsable_files_are_skipped(self, tmp_path, detector) -> None:
        (tmp_path / "broken.py").write_text("def broken(:\n", encoding="utf-8")

        assert _use_case(detector).execute(str(tmp_path)) == {}

    def test_detector_sees_every_call(self) -> None:
        detector = MagicMock()
        detector.check.return_value = None
        gateway = AstroidGateway()
        use_case = CheckUseCase(astroid_gateway=gateway, detector=detector, filesystem=MagicMock())

        findings = use_case.check_module(gateway.parse_source("f(g(), h())\n"))

        assert findings == []
        assert detector.check.call_count == 3
