"""Dict View Rule (W9701) - detect item projections that a mapping view replaces."""

from dataclasses import dataclass
from typing import Optional

import astroid  # type: ignore[import-untyped]

from dict_views_linter.domain.config import RuleConfig
from dict_views_linter.domain.entities import RULE_CODE, RULE_ID, Finding, PairComponent, SourceSpan
from dict_views_linter.domain.protocols import SemanticResolverProtocol
from dict_views_linter.domain.symbols import MethodSymbol, declared_type


@dataclass(frozen=True)
class LambdaShape:
    """The single parameter of a transform lambda and the expression it returns."""

    parameter: str
    return_expression: astroid.nodes.NodeNG

    @classmethod
    def classify(cls, node: astroid.nodes.NodeNG) -> Optional["LambdaShape"]:
        """Return the shape of a one-parameter lambda, None for anything else."""
        if not isinstance(node, astroid.nodes.Lambda):
            return None
        args = node.args
        if len(args.args or []) != 1:
            return None
        if args.posonlyargs or args.kwonlyargs or args.vararg or args.kwarg or args.defaults:
            return None
        return cls(parameter=args.args[0].name, return_expression=node.body)


@dataclass(frozen=True)
class TransformInvocation:
    """Syntactic pieces of ``combinator(function, receiver.items())``."""

    function: astroid.nodes.NodeNG
    receiver: astroid.nodes.NodeNG


class DictViewDetector:
    """
    Rule for W9701: projecting one side of every mapping item.

    Flags ``map(lambda pair: pair[0], mapping.items())`` (and ``pair[1]``)
    when the callee is a configured combinator and the receiver's type
    implements a mapping capability. Every failed precondition is a silent
    non-match; the detector keeps no state between calls.
    """

    code: str = RULE_CODE
    description: str = (
        "Dictionary view: projecting item keys or values through map() re-implements "
        "a built-in view. Auto-fix: Replace with mapping.keys() or mapping.values()."
    )

    def __init__(self, resolver: SemanticResolverProtocol, config: Optional[RuleConfig] = None) -> None:
        self._resolver = resolver
        self._config = config or RuleConfig()

    def check(self, node: astroid.nodes.NodeNG) -> Optional[Finding]:
        """Return a Finding if ``node`` is a replaceable item projection."""
        invocation = self._split_invocation(node)
        if invocation is None:
            return None
        shape = LambdaShape.classify(invocation.function)
        if shape is None:
            return None
        component = self._projected_component(shape)
        if component is None:
            return None

        # Syntax is settled; inference only runs for candidate calls.
        if not self._is_combinator(node.func):
            return None
        if not self._is_mapping(invocation.receiver):
            return None

        span = SourceSpan.from_node(node)
        if span is None:
            return None
        return Finding(
            rule_id=RULE_ID,
            location=span,
            view=component.view,
            message_args=(component.label,),
        )

    def get_fix_instructions(self, finding: Finding) -> str:
        """Provide human/AI instructions for a manual fix."""
        return (
            f"Replace the map() call with the mapping's {finding.view.value}() view: "
            f"{finding.describe()}"
        )

    def _split_invocation(self, node: astroid.nodes.NodeNG) -> Optional[TransformInvocation]:
        if not isinstance(node, astroid.nodes.Call):
            return None
        if node.keywords or len(node.args) != 2:
            return None
        function, iterable = node.args
        if isinstance(function, astroid.nodes.Starred) or not isinstance(iterable, astroid.nodes.Call):
            return None
        if iterable.args or iterable.keywords:
            return None
        accessor = iterable.func
        if not isinstance(accessor, astroid.nodes.Attribute):
            return None
        if accessor.attrname != self._config.items_method:
            return None
        return TransformInvocation(function=function, receiver=accessor.expr)

    def _is_combinator(self, callee: astroid.nodes.NodeNG) -> bool:
        symbol = self._resolver.symbol_of(callee)
        return isinstance(symbol, MethodSymbol) and self._config.is_combinator(symbol.qname)

    def _is_mapping(self, receiver: astroid.nodes.NodeNG) -> bool:
        type_ref = declared_type(self._resolver.symbol_of(receiver))
        if type_ref is None:
            return False
        return self._config.is_mapping(self._resolver.implemented_capabilities(type_ref))

    def _projected_component(self, shape: LambdaShape) -> Optional[PairComponent]:
        """``pair[0]`` / ``pair[1]`` on the lambda's own parameter, else None."""
        expr = shape.return_expression
        if not isinstance(expr, astroid.nodes.Subscript):
            return None
        if not isinstance(expr.value, astroid.nodes.Name) or expr.value.name != shape.parameter:
            return None
        if not isinstance(expr.slice, astroid.nodes.Const):
            return None
        return PairComponent.from_index(expr.slice.value)
