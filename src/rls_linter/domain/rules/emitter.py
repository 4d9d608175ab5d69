"""Diagnostic Emitter: one finding per offending method-name token."""

from collections.abc import Callable

import astroid  # type: ignore[import-untyped]

from rls_linter.domain.entities import Diagnostic, Rule

DiagnosticSink = Callable[[Diagnostic], None]

IN_MEMORY_FILE = "<?>"


class DiagnosticEmitter:
    """Formats findings and hands them to a sink (a list, a pylint linter, ...)."""

    def __init__(self, sink: DiagnosticSink) -> None:
        self._sink = sink

    def report(self, call: astroid.nodes.Call, method_name: str, rule: Rule) -> Diagnostic:
        diagnostic = Diagnostic(
            path=self._path_of(call),
            message=self.format_message(rule),
            method_name=method_name,
            **self.method_token_span(call),
        )
        self._sink(diagnostic)
        return diagnostic

    @staticmethod
    def format_message(rule: Rule) -> str:
        """Prohibition, then replacement, then rationale."""
        return "\n".join((rule.message, rule.replacement, rule.rationale))

    @staticmethod
    def method_token_span(call: astroid.nodes.Call) -> dict[str, int]:
        """
        Span of ``member`` in ``receiver.member(...)``.

        The attribute name is the last token of the Attribute node, so it
        ends where the node ends.
        """
        func = call.func
        end_line = func.end_lineno
        end_column = func.end_col_offset
        if end_line is None or end_column is None:
            return {
                "line": call.lineno,
                "column": call.col_offset,
                "end_line": call.lineno,
                "end_column": call.col_offset,
            }
        return {
            "line": end_line,
            "column": end_column - len(func.attrname),
            "end_line": end_line,
            "end_column": end_column,
        }

    @staticmethod
    def _path_of(node: astroid.nodes.NodeNG) -> str:
        root = node.root()
        file_path = getattr(root, "file", None)
        # astroid.parse() marks in-memory modules with a "<?>" placeholder file.
        if file_path and file_path != IN_MEMORY_FILE:
            return str(file_path)
        return str(getattr(root, "name", "") or "<unknown>")
