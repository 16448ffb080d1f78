"""Unit tests for the LibCST dict-view fixer."""

import libcst as cst
import pytest
from libcst.metadata import MetadataWrapper

from dict_views_linter.domain.entities import RULE_ID, Finding, SourceSpan, ViewKind
from dict_views_linter.domain.errors import FixerInconsistencyError
from dict_views_linter.infrastructure.gateways.transformers import (
    DictViewFixer,
    DictViewTransformer,
    InvocationLocator,
    is_transform_invocation,
)
from tests.linter_test_utils import findings_for


def _fix(source: str, detector) -> str:
    findings = findings_for(source, detector)
    assert len(findings) == 1
    return DictViewFixer().fix(cst.parse_module(source), findings[0]).code


class TestDictViewFixer:
    def test_keys(self, permissive_detector) -> None:
        source = "names = map(lambda pair: pair[0], d.items())\n"
        assert _fix(source, permissive_detector) == "names = d.keys()\n"

    def test_values(self, permissive_detector) -> None:
        source = "totals = sum(map(lambda p: p[1], d.items()))\n"
        assert _fix(source, permissive_detector) == "totals = sum(d.values())\n"

    def test_chained_receiver_is_kept_verbatim(self, permissive_detector) -> None:
        source = "keys = map(lambda p: p[0], client . context.get_dictionary( ).items())\n"
        assert _fix(source, permissive_detector) == "keys = client . context.get_dictionary( ).keys()\n"

    def test_parenthesized_invocation(self, permissive_detector) -> None:
        source = "keys = (map(lambda p: p[0], d.items()))\n"
        assert _fix(source, permissive_detector) == "keys = (d.keys())\n"

    def test_multiline_invocation(self, permissive_detector) -> None:
        source = (
            "def names(d):\n"
            "    return list(map(\n"
            "        lambda p: p[0],\n"
            "        d.items(),\n"
            "    ))\n"
        )
        assert _fix(source, permissive_detector) == "def names(d):\n    return list(d.keys())\n"

    def test_non_ascii_prefix(self, permissive_detector) -> None:
        source = 'label = "été"; keys = map(lambda p: p[0], d.items())\n'
        assert _fix(source, permissive_detector) == 'label = "été"; keys = d.keys()\n'

    def test_rewrite_is_not_detected_again(self, permissive_detector) -> None:
        fixed = _fix("keys = map(lambda p: p[0], d.items())\n", permissive_detector)
        assert findings_for(fixed, permissive_detector) == []

    def test_input_module_is_not_mutated(self, permissive_detector) -> None:
        source = "keys = map(lambda p: p[0], d.items())\n"
        module = cst.parse_module(source)
        finding = findings_for(source, permissive_detector)[0]

        DictViewFixer().fix(module, finding)

        assert module.code == source

    def test_span_without_invocation_raises(self) -> None:
        finding = Finding(RULE_ID, SourceSpan(1, 0, 1, 5), ViewKind.KEYS)
        with pytest.raises(FixerInconsistencyError):
            DictViewFixer().fix(cst.parse_module("x = 1\n"), finding)

    def test_span_on_enclosing_statement(self) -> None:
        source = "keys = map(lambda p: p[0], d.items())\n"
        finding = Finding(RULE_ID, SourceSpan(1, 0, 1, len(source) - 1), ViewKind.VALUES)

        assert DictViewFixer().fix(cst.parse_module(source), finding).code == "keys = d.values()\n"

    def test_enclosing_span_ignores_calls_without_a_lambda(self) -> None:
        source = "keys = map(str, d.items())\n"
        finding = Finding(RULE_ID, SourceSpan(1, 0, 1, len(source) - 1), ViewKind.KEYS)

        with pytest.raises(FixerInconsistencyError):
            DictViewFixer().fix(cst.parse_module(source), finding)

    def test_string_view_is_accepted(self, permissive_detector) -> None:
        source = "keys = map(lambda p: p[0], d.items())\n"
        located = findings_for(source, permissive_detector)[0]
        finding = Finding(RULE_ID, located.location, "keys")  # type: ignore[arg-type]

        assert DictViewFixer().fix(cst.parse_module(source), finding).code == "keys = d.keys()\n"

    @pytest.mark.parametrize("view", ["items", None, 0])
    def test_malformed_view_raises(self, permissive_detector, view) -> None:
        source = "keys = map(lambda p: p[0], d.items())\n"
        located = findings_for(source, permissive_detector)[0]
        finding = Finding(RULE_ID, located.location, view)  # type: ignore[arg-type]

        with pytest.raises(FixerInconsistencyError):
            DictViewFixer().fix(cst.parse_module(source), finding)


class TestDictViewTransformer:
    def test_applies_all_findings(self, permissive_detector) -> None:
        source = (
            "keys = map(lambda p: p[0], first.items())\n"
            "values = map(lambda p: p[1], second.items()); again = map(lambda p: p[0], third.items())\n"
        )
        findings = findings_for(source, permissive_detector)
        transformer = DictViewTransformer(findings)

        code = cst.parse_module(source).visit(transformer).code

        assert code == (
            "keys = first.keys()\n"
            "values = second.values(); again = third.keys()\n"
        )
        assert len(transformer.applied) == 3
        assert transformer.skipped == []

    def test_overlapping_findings_are_skipped(self, permissive_detector) -> None:
        source = "keys = map(lambda p: p[0], d.items())\n"
        finding = findings_for(source, permissive_detector)[0]
        transformer = DictViewTransformer([finding, finding])

        code = cst.parse_module(source).visit(transformer).code

        assert code == "keys = d.keys()\n"
        assert transformer.applied == [finding]
        assert transformer.skipped == [(finding, "overlaps an applied fix")]

    def test_stale_findings_are_skipped(self) -> None:
        finding = Finding(RULE_ID, SourceSpan(3, 0, 3, 4), ViewKind.KEYS)
        transformer = DictViewTransformer([finding])

        code = cst.parse_module("x = 1\n").visit(transformer).code

        assert code == "x = 1\n"
        assert transformer.applied == []
        assert transformer.skipped[0][0] == finding


class TestIsTransformInvocation:
    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("map(lambda p: p[0], d.items())", True),
            ("map(f, d.items())", False),
            ("map(lambda p: p[0], d.items(), e)", False),
            ("map(lambda p: p[0], items())", False),
            ("map(lambda p: p[0], d.items(1))", False),
            ("map(lambda p: p[0], iterable=d.items())", False),
            ("map(*f, d.items())", False),
            ("d.items()", False),
        ],
    )
    def test_shapes(self, expression: str, expected: bool) -> None:
        assert is_transform_invocation(cst.parse_expression(expression)) is expected


class TestInvocationLocator:
    def test_finds_nested_call(self) -> None:
        source = (
            "class Store:\n"
            "    def names(self):\n"
            "        return sorted(map(lambda p: p[0], self.data.items()))\n"
        )
        wrapper = MetadataWrapper(cst.parse_module(source))
        locator = InvocationLocator(SourceSpan(3, 22, 3, 60), source.split("\n"))

        wrapper.visit(locator)

        assert locator.invocation is not None
        assert is_transform_invocation(locator.invocation)

    def test_span_outside_any_call(self) -> None:
        source = "x = 1\ny = 2\n"
        wrapper = MetadataWrapper(cst.parse_module(source))
        locator = InvocationLocator(SourceSpan(2, 0, 2, 5), source.split("\n"))

        wrapper.visit(locator)

        assert locator.invocation is None


class TestDetectAndFix:
    """Real astroid resolution feeding the libcst rewrite."""

    def test_method_return_receiver(self, detector) -> None:
        source = (
            "class Repo:\n"
            "    def table(self) -> dict:\n"
            "        return {}\n"
            "\n"
            "repo = Repo()\n"
            "totals = list(map(lambda p: p[1], repo.table().items()))\n"
        )
        findings = findings_for(source, detector)
        assert [f.view for f in findings] == [ViewKind.VALUES]

        fixed = DictViewFixer().fix(cst.parse_module(source), findings[0]).code

        assert fixed.endswith("totals = list(repo.table().values())\n")
        assert findings_for(fixed, detector) == []

    def test_local_dict_round_trip(self, detector) -> None:
        source = "scores = {'ada': 3}\nnames = map(lambda p: p[0], scores.items())\n"
        findings = findings_for(source, detector)

        code = cst.parse_module(source).visit(DictViewTransformer(findings)).code

        assert code == "scores = {'ada': 3}\nnames = scores.keys()\n"
