"""Interface for diagnostic reporting."""

import json
from typing import Protocol

import typer

from rls_linter.domain.entities import Diagnostic


class DiagnosticReporter(Protocol):
    """Protocol for reporting analysis results to the user."""

    def report(self, diagnostics: list[Diagnostic]) -> None:
        ...

    def report_error(self, path: str, error: Exception) -> None:
        ...


class TextReporter:
    """``path:line:col: message`` lines, like ``go vet`` and friends."""

    def report(self, diagnostics: list[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            typer.echo(f"{diagnostic.location()}: {diagnostic.message}")
        if diagnostics:
            typer.secho(f"\nFound {len(diagnostics)} RLS-unsafe call(s).", fg=typer.colors.RED, err=True)

    def report_error(self, path: str, error: Exception) -> None:
        typer.secho(f"{path}: error: {error}", fg=typer.colors.YELLOW, err=True)


class JsonReporter:
    """One JSON document on stdout; errors go to stderr."""

    def report(self, diagnostics: list[Diagnostic]) -> None:
        typer.echo(json.dumps([d.to_dict() for d in diagnostics], indent=2))

    def report_error(self, path: str, error: Exception) -> None:
        typer.echo(json.dumps({"path": path, "error": str(error)}), err=True)
