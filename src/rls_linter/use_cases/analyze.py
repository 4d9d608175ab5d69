"""Analyze one module: the single entry point of the detection pipeline."""

import logging
from typing import TYPE_CHECKING

import astroid  # type: ignore[import-untyped]

from rls_linter.domain.entities import Diagnostic
from rls_linter.domain.rules.emitter import DiagnosticEmitter
from rls_linter.domain.rules.suppression import SuppressionIndex
from rls_linter.domain.rules.unsafe_calls import CallSiteScanner, UnsafeCallRule

if TYPE_CHECKING:
    from rls_linter.domain.config import AnalyzerConfig
    from rls_linter.domain.protocols import AstroidProtocol

logger = logging.getLogger(__name__)


class AnalyzeUnitUseCase:
    """
    analyze(module) -> diagnostics, in source order.

    Holds only the immutable config and the gateway; every call builds its
    own comment index and result list, so instances can be reused across
    modules.
    """

    def __init__(self, config: "AnalyzerConfig", astroid_gateway: "AstroidProtocol") -> None:
        self._config = config
        self._astroid_gateway = astroid_gateway

    def execute(self, module: astroid.nodes.Module) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        suppressions = SuppressionIndex(self._astroid_gateway.collect_comments(module))
        rule = UnsafeCallRule(
            self._config,
            self._astroid_gateway,
            DiagnosticEmitter(diagnostics.append),
            suppressions,
        )
        CallSiteScanner(rule).scan(module)
        logger.debug("%s: %d diagnostic(s)", module.name, len(diagnostics))
        return diagnostics

    def execute_file(self, file_path: str) -> list[Diagnostic]:
        """Parse and analyze one file. Parse errors propagate to the caller."""
        return self.execute(self._astroid_gateway.parse_file(file_path))
