"""
Pylint plugin entry point - composition root for the checker plugin.
Lives in infrastructure as it creates the container and wires dependencies.
"""

from pylint.lint import PyLinter

from rls_linter.infrastructure.di.container import RlsContainer
from rls_linter.use_cases.checks.rls import RlsChecker


def register(linter: PyLinter) -> None:
    """Register checkers."""
    container = RlsContainer.get_instance()
    linter.register_checker(
        RlsChecker(
            linter,
            config=container.get_config(),
            ast_gateway=container.get_astroid_gateway(),
        )
    )
