"""rlslinter: flags session calls that read rows after the org-scoped transaction commits.

Load as a pylint plugin with ``pylint --load-plugins rls_linter`` or run the
standalone ``rlslinter`` command.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pylint.lint import PyLinter

__version__ = "1.0.0"


def register(linter: "PyLinter") -> None:
    """Pylint plugin hook."""
    # JUSTIFICATION: Lazy import keeps `import rls_linter` free of pylint for the CLI.
    from rls_linter.infrastructure.checker import register as register_checkers

    register_checkers(linter)
