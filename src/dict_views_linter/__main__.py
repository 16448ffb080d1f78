"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from dict_views_linter.infrastructure.di.container import DictViewsContainer
from dict_views_linter.interface.cli import CLIDependencies, create_app


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = DictViewsContainer()

    deps = CLIDependencies(
        telemetry=container.get_telemetry_port(),
        astroid_gateway=container.get_astroid_gateway(),
        filesystem=container.get_filesystem_gateway(),
        detector=container.get_detector(),
        fixer_gateway=container.get_fixer_gateway(),
    )

    app = create_app(deps)
    app()


if __name__ == "__main__":
    main()
