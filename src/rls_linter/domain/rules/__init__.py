"""Domain rules: the pieces of the call-site detection pipeline."""

from typing import Protocol

import astroid  # type: ignore[import-untyped]

from rls_linter.domain.entities import Diagnostic


class Checkable(Protocol):
    """A rule that interrogates one node and reports what it finds."""

    code: str
    description: str

    def check(self, node: astroid.nodes.NodeNG) -> list[Diagnostic]:
        """Interrogate a node for a specific breach."""
        ...
