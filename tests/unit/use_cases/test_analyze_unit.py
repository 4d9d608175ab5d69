"""Tests for AnalyzeUnitUseCase."""

from unittest.mock import MagicMock

import astroid  # type: ignore[import-untyped]
import pytest
from astroid.exceptions import AstroidSyntaxError

from rls_linter.domain.entities import Comment, ResolvedType
from rls_linter.use_cases.analyze import AnalyzeUnitUseCase

CODE = """
from lemmata.db.orm import Session
from warehouse.streams import EventStream

def export(session: Session, events: EventStream):
    rows = session.query(object).yield_per(10)
    events.stream("audit")
    # nolint:rlslinter
    audit = session.stream("select 1")
    return rows, audit, session.stream_scalars("select 2")
"""


def test_reports_in_source_order(config, gateway) -> None:
    module = astroid.parse(CODE, module_name="app.export")

    diagnostics = AnalyzeUnitUseCase(config, gateway).execute(module)

    assert [(d.line, d.method_name) for d in diagnostics] == [(6, "yield_per"), (10, "stream_scalars")]
    assert all(d.path == "app.export" for d in diagnostics)


def test_is_idempotent(config, gateway) -> None:
    module = astroid.parse(CODE, module_name="app.export_twice")
    use_case = AnalyzeUnitUseCase(config, gateway)

    assert use_case.execute(module) == use_case.execute(module)


def test_clean_module(config, gateway) -> None:
    module = astroid.parse("def f(session):\n    return session.yield_per(1)\n")
    assert AnalyzeUnitUseCase(config, gateway).execute(module) == []


def test_uses_gateway_for_comments_and_types(config) -> None:
    gateway = MagicMock()
    gateway.collect_comments.return_value = [Comment("# nolint", 2)]
    gateway.resolve_type.return_value = ResolvedType.reference(
        ResolvedType.named("Session", "sqlalchemy.orm.session"))
    module = astroid.parse("s.stream(1)\ns.stream(2)\ns.stream(3)\n")

    diagnostics = AnalyzeUnitUseCase(config, gateway).execute(module)

    assert [d.line for d in diagnostics] == [1]
    gateway.collect_comments.assert_called_once_with(module)


def test_execute_file(config, gateway, source_data) -> None:
    diagnostics = AnalyzeUnitUseCase(config, gateway).execute_file(
        str(source_data / "rls_handlers.py"))

    assert [d.line for d in diagnostics] == [10, 24, 32, 36, 40]
    assert diagnostics[0].path.endswith("rls_handlers.py")


def test_execute_file_propagates_syntax_errors(config, gateway, tmp_path) -> None:
    bad = tmp_path / "broken.py"
    bad.write_text("def broken(:\n")

    with pytest.raises(AstroidSyntaxError):
        AnalyzeUnitUseCase(config, gateway).execute_file(str(bad))
