"""CLI entry points for rlslinter - Thin Controller using Typer."""

import json
import logging
import tokenize
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from astroid.exceptions import AstroidBuildingError

from rls_linter.domain.config import AnalyzerConfig
from rls_linter.domain.constants import ANALYZER_DOC, ANALYZER_NAME
from rls_linter.domain.entities import Diagnostic
from rls_linter.domain.protocols import AstroidProtocol
from rls_linter.interface.reporters import DiagnosticReporter, JsonReporter, TextReporter
from rls_linter.use_cases.analyze import AnalyzeUnitUseCase

logger = logging.getLogger(__name__)

EXIT_CLEAN = 0
EXIT_DIAGNOSTICS = 1
EXIT_PARSE_ERROR = 2

# B008: avoid function call in default; use module-level singleton for Typer Argument
_CHECK_PATHS = typer.Argument(None, help="Files or directories to analyze (default: .)")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config: AnalyzerConfig
    astroid_gateway: AstroidProtocol


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def collect_files(paths: Optional[list[Path]]) -> list[Path]:
        """Expand directories to their ``*.py`` files; keep order, drop duplicates."""
        files: list[Path] = []
        seen: set[Path] = set()
        for path in paths or [Path(".")]:
            candidates = sorted(path.rglob("*.py")) if path.is_dir() else [path]
            for candidate in candidates:
                key = candidate.resolve()
                if key not in seen:
                    seen.add(key)
                    files.append(candidate)
        return files

    @staticmethod
    def reporter_for(output_format: str) -> DiagnosticReporter:
        if output_format == "json":
            return JsonReporter()
        if output_format == "text":
            return TextReporter()
        raise typer.BadParameter(
            f"Unknown format {output_format!r}; expected 'text' or 'json'.",
            param_hint="--format")

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies. No Service Locator."""
        app = typer.Typer(
            name=ANALYZER_NAME,
            help="rlslinter: flags session calls that bypass Row-Level Security.",
            add_completion=False,
        )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
        ) -> None:
            """Static checks for RLS-unsafe ORM calls."""
            logging.basicConfig(
                level=logging.DEBUG if verbose else logging.WARNING,
                format="%(levelname)s %(name)s: %(message)s",
            )

        @app.command()
        def check(
            paths: Optional[list[Path]] = _CHECK_PATHS,
            output_format: str = typer.Option(
                "text", "--format", "-f", help="Output format: text or json"),
        ) -> None:
            """Analyze Python files and report RLS-unsafe calls."""
            reporter = CLIAppFactory.reporter_for(output_format)
            use_case = AnalyzeUnitUseCase(deps.config, deps.astroid_gateway)

            diagnostics: list[Diagnostic] = []
            failed = 0
            for file_path in CLIAppFactory.collect_files(paths):
                logger.debug("Analyzing %s", file_path)
                try:
                    diagnostics.extend(use_case.execute_file(str(file_path)))
                except (AstroidBuildingError, tokenize.TokenError) as exc:
                    reporter.report_error(str(file_path), exc)
                    failed += 1

            reporter.report(diagnostics)
            if failed:
                raise typer.Exit(code=EXIT_PARSE_ERROR)
            raise typer.Exit(code=EXIT_DIAGNOSTICS if diagnostics else EXIT_CLEAN)

        @app.command()
        def rules(
            output_format: str = typer.Option(
                "text", "--format", "-f", help="Output format: text or json"),
        ) -> None:
            """List the guarded methods and their replacements."""
            if output_format == "json":
                typer.echo(json.dumps([r.to_dict() for r in deps.config.rules], indent=2))
                return
            for rule in deps.config.rules:
                typer.secho(rule.method_name, bold=True)
                typer.echo(f"  {rule.message}")
                typer.echo(f"  {rule.replacement}")
            typer.echo(f"\nSuppress a reviewed call with '# {deps.config.scoped_marker}'.")

        @app.command()
        def doc() -> None:
            """Print the analyzer documentation."""
            typer.echo(ANALYZER_DOC)

        return app


def create_app(deps: CLIDependencies) -> typer.Typer:
    """Module-level factory used by the composition root."""
    return CLIAppFactory.create_app(deps)
