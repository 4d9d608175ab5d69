"""Suppression Resolver: directive comments that opt a call out of reporting."""

import re
from collections import defaultdict
from collections.abc import Iterable
from typing import TYPE_CHECKING

import astroid  # type: ignore[import-untyped]

from rls_linter.domain.entities import Comment

if TYPE_CHECKING:
    from rls_linter.domain.config import AnalyzerConfig


class SuppressionIndex:
    """Comments of one module keyed by line. Built once per module."""

    def __init__(self, comments: Iterable[Comment]) -> None:
        by_line: dict[int, list[Comment]] = defaultdict(list)
        for comment in comments:
            by_line[comment.line].append(comment)
        self._by_line = dict(by_line)

    @classmethod
    def empty(cls) -> "SuppressionIndex":
        return cls(())

    def comments_near(self, line: int) -> list[Comment]:
        """Comments on ``line`` and on the line directly above it."""
        return self._by_line.get(line, []) + self._by_line.get(line - 1, [])

    def __len__(self) -> int:
        return sum(len(c) for c in self._by_line.values())


class SuppressionResolver:
    """
    Matches ``nolint`` style directives against a call's line.

    A directive counts when it is scoped to this analyzer
    (``nolint:rlslinter``, or this analyzer inside a comma list) or when
    the comment carries the bare marker and no scoped marker at all.
    ``nolint:other`` never silences this analyzer.
    """

    def __init__(self, config: "AnalyzerConfig", index: SuppressionIndex) -> None:
        self._analyzer_name = config.analyzer_name
        self._index = index
        marker = re.escape(config.suppression_marker)
        self._pattern = re.compile(
            rf"(?<![\w-]){marker}(?![\w-])(?P<colon>:(?P<scopes>[\w.,-]*))?")

    def is_suppressed(self, node: astroid.nodes.NodeNG) -> bool:
        return self.is_line_suppressed(node.lineno)

    def is_line_suppressed(self, line: int) -> bool:
        return any(self.matches(c.text) for c in self._index.comments_near(line))

    def matches(self, text: str) -> bool:
        """Does this comment text silence this analyzer?"""
        has_bare = False
        has_scoped = False
        for match in self._pattern.finditer(text):
            if match.group("colon") is None:
                has_bare = True
                continue
            has_scoped = True
            scopes = [s.strip() for s in match.group("scopes").split(",")]
            if self._analyzer_name in scopes:
                return True
        # A bare marker next to a scoped one is ambiguous; stay strict.
        return has_bare and not has_scoped
