"""Analyzer configuration. Immutable value objects created by Infrastructure."""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from rls_linter.domain.constants import (
    ANALYZER_NAME,
    DEFAULT_GUARDED_MODULE_PREFIXES,
    DEFAULT_GUARDED_MODULES,
    SUPPRESSION_MARKER,
)
from rls_linter.domain.exceptions import ConfigurationError
from rls_linter.domain.rule_table import RuleTable

logger = logging.getLogger(__name__)

_MARKER_PATTERN = re.compile(r"^[A-Za-z][\w-]*$")


@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Everything the detection pipeline reads: guarded methods, guarded
    type origins, and the suppression directive.

    Passed explicitly into every component; there is no process-wide copy
    in the domain layer.
    """

    rules: RuleTable
    guarded_modules: frozenset[str] = DEFAULT_GUARDED_MODULES
    guarded_module_prefixes: tuple[str, ...] = DEFAULT_GUARDED_MODULE_PREFIXES
    suppression_marker: str = SUPPRESSION_MARKER
    analyzer_name: str = ANALYZER_NAME
    scoped_marker: str = field(init=False)

    def __post_init__(self) -> None:
        if not _MARKER_PATTERN.match(self.suppression_marker):
            raise ConfigurationError(
                f"Invalid suppression marker {self.suppression_marker!r}: "
                "expected a single word such as 'nolint'.")
        object.__setattr__(
            self, "scoped_marker", f"{self.suppression_marker}:{self.analyzer_name}")

    def is_guarded_origin(self, module_path: str) -> bool:
        """Exact match on a guarded module, or prefix match on a guarded prefix."""
        if module_path in self.guarded_modules:
            return True
        return any(module_path.startswith(prefix) for prefix in self.guarded_module_prefixes)


class ConfigurationLoader:
    """
    Turns the ``[tool.rlslinter]`` table into an AnalyzerConfig.

    Domain does not read the filesystem; Infrastructure calls
    ConfigFileLoader.load_config_from_fs() and constructs
    ConfigurationLoader(config_dict) at composition root.
    """

    def __init__(self, config_dict: dict[str, object]) -> None:
        self._config = config_dict

    @property
    def guarded_modules(self) -> frozenset[str]:
        base = self._string_list("guarded-modules")
        modules = set(DEFAULT_GUARDED_MODULES) if base is None else set(base)
        modules.update(self._string_list("extra-guarded-modules") or [])
        return frozenset(modules)

    @property
    def guarded_module_prefixes(self) -> tuple[str, ...]:
        base = self._string_list("guarded-module-prefixes")
        prefixes = list(DEFAULT_GUARDED_MODULE_PREFIXES) if base is None else list(base)
        for extra in self._string_list("extra-guarded-module-prefixes") or []:
            if extra not in prefixes:
                prefixes.append(extra)
        return tuple(prefixes)

    @property
    def suppression_marker(self) -> str:
        raw = self._config.get("suppression-marker", SUPPRESSION_MARKER)
        if not isinstance(raw, str):
            logger.warning(
                "Configuration Warning: 'suppression-marker' must be a string; using %r.",
                SUPPRESSION_MARKER)
            return SUPPRESSION_MARKER
        return raw

    @property
    def rule_registry_path(self) -> Optional[str]:
        """Alternative YAML rule registry, if configured."""
        raw = self._config.get("rule-registry")
        if raw is None:
            return None
        if not isinstance(raw, str):
            logger.warning("Configuration Warning: 'rule-registry' must be a path string; ignored.")
            return None
        return raw

    def build(self, rules: RuleTable) -> AnalyzerConfig:
        """Create the immutable config for the given rule table."""
        return AnalyzerConfig(
            rules=rules,
            guarded_modules=self.guarded_modules,
            guarded_module_prefixes=self.guarded_module_prefixes,
            suppression_marker=self.suppression_marker,
        )

    def _string_list(self, key: str) -> Optional[list[str]]:
        """Read a list of strings; None when absent or malformed."""
        if key not in self._config:
            return None
        raw = self._config[key]
        if isinstance(raw, list) and all(isinstance(x, str) for x in raw):
            return [str(x) for x in raw]
        logger.warning(
            "Configuration Warning: '%s' must be a list of strings; using defaults.", key)
        return None
