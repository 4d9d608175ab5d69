"""Call-Site Scanner: guarded methods invoked on guarded session types (W9801)."""

import logging
from typing import TYPE_CHECKING, Optional

import astroid  # type: ignore[import-untyped]

from rls_linter.domain.constants import MESSAGE_ID
from rls_linter.domain.entities import Diagnostic
from rls_linter.domain.rules import Checkable
from rls_linter.domain.rules.emitter import DiagnosticEmitter
from rls_linter.domain.rules.suppression import SuppressionIndex, SuppressionResolver
from rls_linter.domain.rules.type_classifier import GuardedTypeClassifier

if TYPE_CHECKING:
    from rls_linter.domain.config import AnalyzerConfig
    from rls_linter.domain.protocols import TypeResolverProtocol

logger = logging.getLogger(__name__)


class UnsafeCallRule:
    """
    Rule for W9801: a guarded method called on a guarded type.

    Pipeline per call: member access -> rule lookup -> receiver type ->
    suppression -> report. The rule lookup runs before any inference, so
    calls to unrelated method names cost one dict lookup.
    """

    code: str = MESSAGE_ID
    description: str = "Method reads rows after the org-scoped transaction has committed."

    def __init__(
        self,
        config: "AnalyzerConfig",
        type_resolver: "TypeResolverProtocol",
        emitter: DiagnosticEmitter,
        suppressions: Optional[SuppressionIndex] = None,
    ) -> None:
        self._config = config
        self._classifier = GuardedTypeClassifier(config, type_resolver)
        self._emitter = emitter
        self._resolver = SuppressionResolver(config, suppressions or SuppressionIndex.empty())

    def use_suppressions(self, suppressions: SuppressionIndex) -> None:
        """Switch to the comment index of the module being scanned."""
        self._resolver = SuppressionResolver(self._config, suppressions)

    def check(self, node: astroid.nodes.NodeNG) -> list[Diagnostic]:
        """Check a Call node. Returns at most one diagnostic."""
        if not isinstance(node, astroid.nodes.Call):
            return []
        func = node.func
        if not isinstance(func, astroid.nodes.Attribute):
            return []

        method_name = func.attrname
        rule = self._config.rules.lookup(method_name)
        if rule is None:
            return []

        if not self._classifier.is_guarded_type(func.expr):
            return []

        if self._resolver.is_suppressed(node):
            logger.debug("Suppressed .%s() at line %s", method_name, node.lineno)
            return []

        return [self._emitter.report(node, method_name, rule)]


class CallSiteScanner:
    """Visits every call of a module once, in source (pre-)order."""

    def __init__(self, rule: Checkable) -> None:
        self._rule = rule

    def scan(self, module: astroid.nodes.Module) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        for call in module.nodes_of_class(astroid.nodes.Call):
            found.extend(self._rule.check(call))
        return found
