from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    import astroid  # type: ignore[import-untyped]
    import libcst as cst

    from dict_views_linter.domain.entities import Finding
    from dict_views_linter.domain.symbols import Capability, Symbol, TypeRef


class SemanticResolverProtocol(Protocol):
    """Answers what an expression denotes. Implemented on astroid by AstroidResolver."""

    def symbol_of(self, expr: "astroid.nodes.NodeNG") -> Optional["Symbol"]:
        """Resolve an expression to a Symbol, or None when resolution fails."""
        ...

    def implemented_capabilities(self, type_ref: "TypeRef") -> frozenset["Capability"]:
        """All classes the type implements, itself included."""
        ...


class DetectorProtocol(Protocol):
    """Produces at most one Finding for one syntax node."""

    code: str
    description: str

    def check(self, node: "astroid.nodes.NodeNG") -> Optional["Finding"]:
        ...


class FixerProtocol(Protocol):
    """Rewrites the invocation a Finding points at. Never mutates its input."""

    def fix(self, module: "cst.Module", finding: "Finding") -> "cst.Module":
        ...


class AstroidProtocol(Protocol):
    def parse_file(self, file_path: str) -> Optional["astroid.nodes.Module"]:
        """Parse a file and return the astroid Module node."""
        ...

    def parse_source(
        self, source: str, module_name: str = "", path: Optional[str] = None
    ) -> Optional["astroid.nodes.Module"]:
        """Parse source text and return the astroid Module node."""
        ...

    def clear_inference_cache(self) -> None:
        """Drop cached inference results after files changed on disk."""
        ...


class FixerGatewayProtocol(Protocol):
    """Protocol for applying findings to files."""

    def apply_fixes(self, file_path: str, findings: list["Finding"], dry_run: bool = False) -> bool:
        """Apply findings to a file. Returns True if modified (or, with dry_run, if it would be)."""
        ...

    def preview_fixes(self, source: str, findings: list["Finding"]) -> str:
        """Return the rewritten source without touching the filesystem."""
        ...


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python files in path (recursive if directory)."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        ...
