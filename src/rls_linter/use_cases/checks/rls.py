"""RLS-unsafe session calls (W9801)."""

from typing import TYPE_CHECKING, Optional

import astroid  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from pylint.checkers import BaseChecker
from pylint.interfaces import INFERENCE

from rls_linter.domain.config import AnalyzerConfig
from rls_linter.domain.constants import ANALYZER_NAME, MESSAGE_ID, MESSAGE_SYMBOL
from rls_linter.domain.entities import Diagnostic
from rls_linter.domain.protocols import AstroidProtocol
from rls_linter.domain.rules.emitter import DiagnosticEmitter
from rls_linter.domain.rules.suppression import SuppressionIndex
from rls_linter.domain.rules.unsafe_calls import UnsafeCallRule


class RlsChecker(BaseChecker):
    """W9801: guarded session methods. Thin: delegates to UnsafeCallRule."""

    name: str = ANALYZER_NAME
    msgs = {
        MESSAGE_ID: (
            "%s",
            MESSAGE_SYMBOL,
            "Used when a method that reads rows after the org-scoped transaction "
            "has committed is called on a guarded session type. Row-Level Security "
            "no longer filters those rows.",
        ),
    }

    def __init__(
        self,
        linter: "PyLinter",
        config: AnalyzerConfig,
        ast_gateway: AstroidProtocol,
    ) -> None:
        super().__init__(linter)
        self._ast_gateway = ast_gateway
        self._rule = UnsafeCallRule(config, ast_gateway, DiagnosticEmitter(self._add_diagnostic))
        self._current_call: Optional[astroid.nodes.Call] = None

    def visit_module(self, node: astroid.nodes.Module) -> None:
        self._rule.use_suppressions(SuppressionIndex(self._ast_gateway.collect_comments(node)))

    def leave_module(self, node: astroid.nodes.Module) -> None:
        self._rule.use_suppressions(SuppressionIndex.empty())

    def visit_call(self, node: astroid.nodes.Call) -> None:
        """Delegate W9801 to domain rule."""
        self._current_call = node
        try:
            self._rule.check(node)
        finally:
            self._current_call = None

    def _add_diagnostic(self, diagnostic: Diagnostic) -> None:
        self.add_message(
            MESSAGE_SYMBOL,
            node=self._current_call,
            args=(diagnostic.message,),
            line=diagnostic.line,
            col_offset=diagnostic.column,
            end_lineno=diagnostic.end_line,
            end_col_offset=diagnostic.end_column,
            confidence=INFERENCE,
        )
