"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from rls_linter.infrastructure.di.container import RlsContainer
from rls_linter.interface.cli import CLIDependencies, create_app


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = RlsContainer.get_instance()

    deps = CLIDependencies(
        config=container.get_config(),
        astroid_gateway=container.get_astroid_gateway(),
    )

    app = create_app(deps)
    app()


if __name__ == "__main__":
    main()
