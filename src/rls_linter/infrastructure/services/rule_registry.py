"""RuleRegistryService: loads the guarded-method registry (rule_registry.yaml)."""

import logging
from pathlib import Path
from typing import Optional, cast

import yaml

from rls_linter.domain.entities import Rule
from rls_linter.domain.exceptions import RuleRegistryError
from rls_linter.domain.protocols import RuleRegistryProtocol
from rls_linter.domain.rule_table import RuleTable

logger = logging.getLogger(__name__)


class RuleRegistryService(RuleRegistryProtocol):
    """Loads rule_registry.yaml once and builds the Rule Table from it."""

    def __init__(self, registry_path: Optional[str] = None) -> None:
        if registry_path is not None:
            self._path = Path(registry_path)
        else:
            # Default: packaged resource next to this package
            _base = Path(__file__).resolve().parent.parent.parent
            self._path = _base / "resources" / "rule_registry.yaml"
        self._registry: dict[str, dict[str, object]] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as exc:
            raise RuleRegistryError(f"Cannot read rule registry {self._path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise RuleRegistryError(f"Malformed rule registry {self._path}: {exc}") from exc

        if not isinstance(data, dict) or not data:
            raise RuleRegistryError(f"Rule registry {self._path} defines no rules.")
        self._registry = cast(dict[str, dict[str, object]], data)
        logger.debug("Loaded %d rules from %s", len(self._registry), self._path)

    def get_registry(self) -> dict[str, dict[str, object]]:
        """Return a shallow copy of the loaded registry."""
        return dict(self._registry)

    def get_rule_table(self) -> RuleTable:
        return RuleTable.from_entries(self._registry)

    def get_rules(self) -> list[Rule]:
        return list(self.get_rule_table())
