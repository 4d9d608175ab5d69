"""Type Classifier: does a receiver belong to the guarded family of types?"""

import logging
from typing import TYPE_CHECKING

import astroid  # type: ignore[import-untyped]

from rls_linter.domain.entities import TypeKind

if TYPE_CHECKING:
    from rls_linter.domain.config import AnalyzerConfig
    from rls_linter.domain.protocols import TypeResolverProtocol

logger = logging.getLogger(__name__)


class GuardedTypeClassifier:
    """
    Decides whether an expression is statically typed as a guarded type.

    Unresolvable expressions are never guarded. A reference is looked
    through exactly once; what remains must be a named type whose
    declaring module matches the configured exact paths or prefixes.
    """

    def __init__(
        self,
        config: "AnalyzerConfig",
        type_resolver: "TypeResolverProtocol",
    ) -> None:
        self._config = config
        self._type_resolver = type_resolver

    def is_guarded_type(self, expr: astroid.nodes.NodeNG) -> bool:
        resolved = self._type_resolver.resolve_type(expr)
        if resolved is None:
            logger.debug("No type information for %s at line %s", expr.as_string(), expr.lineno)
            return False

        if resolved.kind is TypeKind.REFERENCE:
            resolved = resolved.target
            if resolved is None:
                return False

        if resolved.kind is not TypeKind.NAMED or resolved.origin is None:
            return False

        guarded = self._config.is_guarded_origin(resolved.origin.module_path)
        if not guarded:
            logger.debug("Receiver %s is %s, not a guarded type", expr.as_string(), resolved.qname)
        return guarded
