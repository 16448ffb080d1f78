import logging
from pathlib import Path
from typing import Optional, Union

import astroid  # type: ignore[import-untyped]
from astroid import bases, helpers

from dict_views_linter.domain.protocols import AstroidProtocol, SemanticResolverProtocol
from dict_views_linter.domain.symbols import (
    Capability,
    FieldSymbol,
    LocalSymbol,
    MethodSymbol,
    ParameterSymbol,
    PropertySymbol,
    Symbol,
    TypeRef,
)

logger = logging.getLogger(__name__)

# Deep or cyclic inference surfaces as RecursionError; StopIteration leaks from
# some brain plugins.
_RESOLUTION_ERRORS = (
    astroid.InferenceError,
    astroid.AttributeInferenceError,
    StopIteration,
    RecursionError,
)

_PROPERTY_DECORATORS: frozenset[str] = frozenset({"builtins.property", "functools.cached_property"})


class AstroidGateway(AstroidProtocol):
    """Parses files and source text into astroid modules."""

    def parse_file(self, file_path: str) -> Optional[astroid.nodes.Module]:
        """Parse a file and return the astroid Module node."""
        path = Path(file_path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read %s: %s", file_path, exc)
            return None
        return self.parse_source(source, module_name=path.stem, path=str(path))

    def parse_source(
        self, source: str, module_name: str = "", path: Optional[str] = None
    ) -> Optional[astroid.nodes.Module]:
        """Parse source text and return the astroid Module node."""
        try:
            return astroid.parse(source, module_name=module_name, path=path)
        except astroid.AstroidSyntaxError as exc:
            logger.warning("Cannot parse %s: %s", path or module_name or "<source>", exc)
            return None

    def clear_inference_cache(self) -> None:
        """Clear the astroid inference cache to force fresh inference after code changes."""
        astroid.MANAGER.clear_cache()


class AstroidResolver(SemanticResolverProtocol):
    """
    Semantic resolver on top of astroid.

    Declared types (annotations) win over inferred ones. Inference that yields
    more than one type, or anything Uninferable, leaves the symbol untyped.
    Resolution errors never escape: they mean "unresolved".
    """

    def symbol_of(self, expr: astroid.nodes.NodeNG) -> Optional[Symbol]:
        try:
            if isinstance(expr, astroid.nodes.Name):
                return self._symbol_for_name(expr)
            if isinstance(expr, astroid.nodes.Attribute):
                return self._symbol_for_attribute(expr)
            if isinstance(expr, astroid.nodes.Call):
                return self._symbol_for_call(expr)
        except _RESOLUTION_ERRORS as exc:
            logger.debug("Could not resolve %s: %s", expr.as_string(), exc)
        return None

    def implemented_capabilities(self, type_ref: TypeRef) -> frozenset[Capability]:
        cls = type_ref.node if type_ref.node is not None else self._lookup_class(type_ref.qname)
        if cls is None:
            return frozenset({Capability.from_qname(type_ref.qname)})
        classes = [cls]
        try:
            classes.extend(cls.ancestors())
        except _RESOLUTION_ERRORS as exc:
            logger.debug("Could not walk ancestors of %s: %s", type_ref.qname, exc)
        return frozenset(Capability.from_qname(c.qname()) for c in classes)

    # Symbol kinds

    def _symbol_for_name(self, expr: astroid.nodes.Name) -> Optional[Symbol]:
        _scope, assignments = expr.lookup(expr.name)
        if not assignments:
            return None
        origin = assignments[0]
        if not isinstance(origin, astroid.nodes.AssignName):
            # def / class / import bindings denote callables or modules
            return self._callable_symbol(expr)
        if isinstance(origin.parent, astroid.nodes.Arguments):
            return ParameterSymbol(
                expr.name, self._parameter_annotation(origin) or self._value_type(expr)
            )
        declared = self._assignment_annotation(origin) or self._value_type(expr)
        if isinstance(origin.scope(), astroid.nodes.ClassDef):
            return FieldSymbol(expr.name, declared)
        return LocalSymbol(expr.name, declared)

    def _symbol_for_attribute(self, expr: astroid.nodes.Attribute) -> Optional[Symbol]:
        owner = self._infer_single(expr.expr)
        lookup = getattr(owner, "getattr", None)
        if lookup is None:
            return None
        definitions = lookup(expr.attrname)
        for definition in definitions:
            if isinstance(definition, astroid.nodes.FunctionDef):
                if _PROPERTY_DECORATORS & set(definition.decoratornames()):
                    return PropertySymbol(
                        expr.attrname,
                        self._annotation_type(definition.returns) or self._value_type(expr),
                    )
                return self._callable_symbol(expr)
            if isinstance(definition, astroid.nodes.ClassDef):
                return self._callable_symbol(expr)
        declared = None
        for definition in definitions:
            declared = self._assignment_annotation(definition)
            if declared is not None:
                break
        return FieldSymbol(expr.attrname, declared or self._value_type(expr))

    def _symbol_for_call(self, expr: astroid.nodes.Call) -> Optional[Symbol]:
        callee = self._callable_symbol(expr.func)
        if callee is None:
            return None
        return MethodSymbol(callee.name, callee.namespace, callee.return_type or self._value_type(expr))

    def _callable_symbol(self, expr: astroid.nodes.NodeNG) -> Optional[MethodSymbol]:
        value = self._infer_single(expr)
        if isinstance(value, astroid.nodes.ClassDef):
            namespace, _, name = value.qname().rpartition(".")
            return MethodSymbol(name, namespace, TypeRef(value.qname(), value))
        # BoundMethod may wrap an UnboundMethod that wraps the FunctionDef.
        while isinstance(value, bases.UnboundMethod):
            value = value._proxied
        if isinstance(value, astroid.nodes.FunctionDef):
            namespace, _, name = value.qname().rpartition(".")
            return MethodSymbol(name, namespace, self._annotation_type(value.returns))
        return None

    # Types

    def _infer_single(self, expr: astroid.nodes.NodeNG) -> Optional[object]:
        """The one value ``expr`` infers to, or None when inference is empty or ambiguous."""
        try:
            values = list(expr.infer())
        except _RESOLUTION_ERRORS:
            return None
        if len(values) != 1 or values[0] is astroid.Uninferable:
            return None
        return values[0]

    def _value_type(self, expr: astroid.nodes.NodeNG) -> Optional[TypeRef]:
        """The class of every value ``expr`` infers to, if they all agree."""
        try:
            values = list(expr.infer())
        except _RESOLUTION_ERRORS:
            return None
        classes: dict[str, astroid.nodes.ClassDef] = {}
        for value in values:
            if value is astroid.Uninferable:
                return None
            cls = helpers.object_type(value)
            if not isinstance(cls, astroid.nodes.ClassDef):
                return None
            classes[cls.qname()] = cls
        if len(classes) != 1:
            return None
        qname, cls = classes.popitem()
        return TypeRef(qname, cls)

    def _annotation_type(self, annotation: Optional[astroid.nodes.NodeNG]) -> Optional[TypeRef]:
        """Resolve ``dict``, ``dict[str, int]``, ``Mapping[str, int]`` etc. to their class."""
        if annotation is None:
            return None
        if isinstance(annotation, astroid.nodes.Subscript):
            annotation = annotation.value
        value = self._infer_single(annotation)
        if isinstance(value, astroid.nodes.ClassDef):
            return TypeRef(value.qname(), value)
        return None

    def _assignment_annotation(self, node: astroid.nodes.NodeNG) -> Optional[TypeRef]:
        parent = node.parent
        if isinstance(parent, astroid.nodes.AnnAssign) and parent.target is node:
            return self._annotation_type(parent.annotation)
        return None

    def _parameter_annotation(self, param: astroid.nodes.AssignName) -> Optional[TypeRef]:
        args: astroid.nodes.Arguments = param.parent
        groups: list[tuple[list, list]] = [
            (args.posonlyargs or [], args.posonlyargs_annotations or []),
            (args.args or [], args.annotations or []),
            (args.kwonlyargs or [], args.kwonlyargs_annotations or []),
        ]
        for params, annotations in groups:
            for candidate, annotation in zip(params, annotations):
                if candidate is param:
                    return self._annotation_type(annotation)
        return None

    def _lookup_class(self, qname: str) -> Optional[astroid.nodes.ClassDef]:
        module_name, _, name = qname.rpartition(".")
        if not module_name:
            return None
        try:
            module = astroid.MANAGER.ast_from_module_name(module_name)
            candidates: list[Union[astroid.nodes.NodeNG, object]] = module.getattr(name)
        except (astroid.AstroidBuildingError, astroid.AttributeInferenceError):
            return None
        for candidate in candidates:
            if isinstance(candidate, astroid.nodes.ClassDef):
                return candidate
        return None
