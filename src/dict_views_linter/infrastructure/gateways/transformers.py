"""LibCST rewrite for dict-view findings."""

import re
from typing import Optional, cast

import libcst as cst
from libcst.metadata import CodePosition, CodeRange, MetadataWrapper, PositionProvider

from dict_views_linter.domain.entities import VIEW_PAYLOAD_KEY, Finding, SourceSpan, ViewKind
from dict_views_linter.domain.errors import FixerInconsistencyError
from dict_views_linter.domain.protocols import FixerProtocol


def is_transform_invocation(node: cst.CSTNode) -> bool:
    """True for ``f(lambda ...: ..., receiver.attr())`` - the shape a dict-view finding points at."""
    if not isinstance(node, cst.Call) or len(node.args) != 2:
        return False
    if any(arg.keyword is not None or arg.star for arg in node.args):
        return False
    if not isinstance(node.args[0].value, cst.Lambda):
        return False
    items_call = node.args[1].value
    return (
        isinstance(items_call, cst.Call)
        and not items_call.args
        and isinstance(items_call.func, cst.Attribute)
    )


class InvocationLocator(cst.CSTVisitor):
    """
    Find the call at a byte-column span using libcst positions.

    libcst reports character columns and includes a node's own parentheses in
    its range, while the span comes from ``ast``: byte columns, parentheses
    excluded. A call therefore sits at the span when its callee starts at the
    span start and the span end falls between its last argument and the end
    of its range.
    """

    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self, span: SourceSpan, lines: list[str]) -> None:
        super().__init__()
        self._start = CodePosition(span.line, _char_column(lines, span.line, span.column))
        self._end = CodePosition(span.end_line, _char_column(lines, span.end_line, span.end_column))
        self.invocation: Optional[cst.Call] = None
        self.enclosing: list[cst.CSTNode] = []

    def on_visit(self, node: cst.CSTNode) -> bool:
        if self.invocation is not None:
            return False
        position = self._position(node)
        if position is None:
            return True
        if isinstance(node, cst.Call) and self._call_at_span(node, position):
            self.invocation = node
            return False
        if position.start == self._start and position.end == self._end:
            self.enclosing.append(node)
        return _key(position.start) <= _key(self._start) and _key(self._end) <= _key(position.end)

    def _call_at_span(self, node: cst.Call, position: CodeRange) -> bool:
        callee = self._position(node.func)
        if callee is None or callee.start != self._start:
            return False
        if position.end == self._end:
            return True
        last = self._position(node.args[-1].value) if node.args else callee
        if last is None or not node.rpar:
            return False
        return _key(last.end) <= _key(self._end) <= _key(position.end)

    def _position(self, node: cst.CSTNode) -> Optional[CodeRange]:
        return self.get_metadata(PositionProvider, node, None)


class DictViewFixer(FixerProtocol):
    """
    Replace ``map(lambda pair: pair[i], receiver.items())`` with ``receiver.keys()``
    or ``receiver.values()``.

    The receiver and the dot after it are reused verbatim. The input module is
    never mutated; a new module is returned.
    """

    def fix(self, module: cst.Module, finding: Finding) -> cst.Module:
        view = self._view_of(finding)

        wrapper = MetadataWrapper(module)
        locator = InvocationLocator(finding.location, _source_lines(wrapper.module.code))
        wrapper.visit(locator)

        target = locator.invocation
        if target is None:
            # The span may name a node wrapping the invocation, e.g. its statement.
            target = next(
                (
                    child
                    for node in locator.enclosing
                    for child in node.children
                    if is_transform_invocation(child)
                ),
                None,
            )
        if target is None or not is_transform_invocation(target):
            raise FixerInconsistencyError(
                f"No transform invocation at {finding.location} for finding {finding.rule_id}"
            )

        replacement = self.build_view_access(cast(cst.Call, target), view)
        return cast(cst.Module, wrapper.module.deep_replace(target, replacement))

    @staticmethod
    def _view_of(finding: Finding) -> ViewKind:
        view = finding.view
        if isinstance(view, ViewKind):
            return view
        # Hosts that rebuild findings by hand may pass the raw payload string.
        return ViewKind.from_payload({VIEW_PAYLOAD_KEY: view} if isinstance(view, str) else None)

    @staticmethod
    def build_view_access(invocation: cst.Call, view: ViewKind) -> cst.Call:
        """``receiver.<view>()`` built from the invocation's ``receiver.items()`` argument."""
        items_call = cast(cst.Call, invocation.args[1].value)
        accessor = cast(cst.Attribute, items_call.func)
        return items_call.with_changes(
            func=accessor.with_changes(attr=cst.Name(view.value)),
            lpar=[*invocation.lpar, *items_call.lpar],
            rpar=[*items_call.rpar, *invocation.rpar],
        )


class DictViewTransformer(cst.CSTTransformer):
    """
    Apply several findings to one module, last in source order first.

    Findings whose spans overlap one that was already applied are skipped, as
    are findings the fixer cannot re-locate; both end up in ``skipped``.
    """

    def __init__(self, findings: list[Finding], fixer: Optional[DictViewFixer] = None) -> None:
        self.findings = sorted(findings, key=lambda f: f.location.start(), reverse=True)
        self.fixer = fixer or DictViewFixer()
        self.applied: list[Finding] = []
        self.skipped: list[tuple[Finding, str]] = []

    def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
        module = updated_node
        for finding in self.findings:
            if any(finding.location.overlaps(done.location) for done in self.applied):
                self.skipped.append((finding, "overlaps an applied fix"))
                continue
            try:
                module = self.fixer.fix(module, finding)
            except FixerInconsistencyError as exc:
                self.skipped.append((finding, str(exc)))
                continue
            self.applied.append(finding)
        return module


def _key(position: CodePosition) -> tuple[int, int]:
    # CodePosition defines equality only.
    return (position.line, position.column)


def _source_lines(code: str) -> list[str]:
    # str.splitlines also breaks on form feeds and unicode separators; the tokenizer does not.
    return re.split(r"\r\n|\r|\n", code)


def _char_column(lines: list[str], line: int, byte_column: int) -> int:
    """Convert a UTF-8 byte column on a 1-based line into a character column."""
    if not 1 <= line <= len(lines):
        return byte_column
    encoded = lines[line - 1].encode("utf-8")
    return len(encoded[:byte_column].decode("utf-8", errors="ignore"))
