"""CLI entry points for dict-views - Thin Controller using Typer."""

import logging
from dataclasses import dataclass
from pathlib import Path

import typer

from dict_views_linter import __version__
from dict_views_linter.domain.entities import Finding
from dict_views_linter.domain.protocols import (
    AstroidProtocol,
    DetectorProtocol,
    FileSystemProtocol,
    FixerGatewayProtocol,
    TelemetryPort,
)
from dict_views_linter.use_cases.apply_fixes import ApplyFixesUseCase
from dict_views_linter.use_cases.check import CheckUseCase

_PATH_ARGUMENT = typer.Argument(Path("."), help="File or directory to process (default: .)")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    telemetry: TelemetryPort
    astroid_gateway: AstroidProtocol
    filesystem: FileSystemProtocol
    detector: DetectorProtocol
    fixer_gateway: FixerGatewayProtocol


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def format_finding(file_path: str, finding: Finding, message: str) -> str:
        """``path:line:col: W9701 message``, with a 1-based column."""
        location = finding.location
        return f"{file_path}:{location.line}:{location.column + 1}: {message}"

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="dict-views",
            help="Rewrite map(lambda pair: pair[0], mapping.items()) into mapping.keys().",
            add_completion=False,
        )

        def build_check_use_case() -> CheckUseCase:
            return CheckUseCase(
                astroid_gateway=deps.astroid_gateway,
                detector=deps.detector,
                filesystem=deps.filesystem,
            )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
        ) -> None:
            """dict-views: prefer mapping views over item projections."""
            logging.basicConfig(
                level=logging.DEBUG if verbose else logging.WARNING,
                format="%(levelname)s %(name)s: %(message)s",
            )

        @app.command()
        def check(path: Path = _PATH_ARGUMENT) -> None:
            """Report item projections that a mapping view replaces. Exits 1 on findings."""
            results = build_check_use_case().execute(str(path))
            count = 0
            for file_path, findings in results.items():
                for finding in findings:
                    message = f"{deps.detector.code} {finding.rule_id}: {finding.describe()}"
                    typer.echo(CLIAppFactory.format_finding(file_path, finding, message))
                    count += 1
            if count:
                deps.telemetry.warning(f"{count} finding(s) in {len(results)} file(s).")
                raise typer.Exit(code=1)
            deps.telemetry.step("No findings.")

        @app.command()
        def fix(
            path: Path = _PATH_ARGUMENT,
            dry_run: bool = typer.Option(False, "--dry-run", help="Report what would change without writing."),
        ) -> None:
            """Rewrite item projections into keys()/values() views in place."""
            use_case = ApplyFixesUseCase(
                check_use_case=build_check_use_case(),
                fixer_gateway=deps.fixer_gateway,
                telemetry=deps.telemetry,
                astroid_gateway=deps.astroid_gateway,
            )
            use_case.execute(str(path), dry_run=dry_run)

        @app.command()
        def version() -> None:
            """Print the installed version."""
            typer.echo(__version__)

        return app


def create_app(deps: CLIDependencies) -> typer.Typer:
    """Create the Typer app (delegates to CLIAppFactory)."""
    return CLIAppFactory.create_app(deps)
