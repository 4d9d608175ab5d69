"""Rule Table: guarded method name -> Rule."""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Optional

from rls_linter.domain.entities import Rule
from rls_linter.domain.exceptions import RuleRegistryError


class RuleTable:
    """
    Immutable exact-match table of guarded methods.

    Built once before analysis starts and shared read-only afterwards.
    """

    REQUIRED_FIELDS: tuple[str, ...] = ("message", "replacement", "rationale")

    def __init__(self, rules: Iterable[Rule]) -> None:
        table: dict[str, Rule] = {}
        for rule in rules:
            if rule.method_name in table:
                raise RuleRegistryError(
                    f"Duplicate rule for method '{rule.method_name}'.")
            table[rule.method_name] = rule
        self._rules: Mapping[str, Rule] = MappingProxyType(table)

    @classmethod
    def from_entries(cls, entries: Mapping[str, Mapping[str, object]]) -> "RuleTable":
        """Build a table from registry entries keyed by method name."""
        rules: list[Rule] = []
        for method_name, entry in entries.items():
            if not isinstance(entry, Mapping):
                raise RuleRegistryError(
                    f"Registry entry for '{method_name}' must be a mapping.")
            missing = [f for f in cls.REQUIRED_FIELDS if not isinstance(entry.get(f), str)]
            if missing:
                raise RuleRegistryError(
                    f"Registry entry for '{method_name}' is missing: {', '.join(missing)}.")
            rules.append(
                Rule(
                    method_name=str(method_name),
                    message=str(entry["message"]).strip(),
                    replacement=str(entry["replacement"]).strip(),
                    rationale=str(entry["rationale"]).rstrip(),
                )
            )
        return cls(rules)

    def lookup(self, method_name: str) -> Optional[Rule]:
        """Return the rule guarding ``method_name``, or None."""
        return self._rules.get(method_name)

    def method_names(self) -> list[str]:
        return sorted(self._rules)

    def __contains__(self, method_name: object) -> bool:
        return method_name in self._rules

    def __iter__(self) -> Iterator[Rule]:
        for name in self.method_names():
            yield self._rules[name]

    def __len__(self) -> int:
        return len(self._rules)
