"""Terminal telemetry adapter for TelemetryPort."""

import typer


class TyperTelemetry:
    """Prints progress, warnings and errors through typer.secho."""

    def __init__(self, project_name: str = "dict-views", color: str = typer.colors.CYAN) -> None:
        self.project_name = project_name
        self.color = color

    def step(self, message: str) -> None:
        typer.secho(f"[{self.project_name}] {message}", fg=self.color)

    def warning(self, message: str) -> None:
        typer.secho(f"[{self.project_name}] WARNING: {message}", fg=typer.colors.YELLOW, err=True)

    def error(self, message: str) -> None:
        typer.secho(f"[{self.project_name}] ERROR: {message}", fg=typer.colors.RED, err=True)
