"""Tests for UnsafeCallRule and CallSiteScanner with real astroid inference."""

import astroid  # type: ignore[import-untyped]
import pytest

from rls_linter.domain.entities import Comment, Diagnostic
from rls_linter.domain.rules.emitter import DiagnosticEmitter
from rls_linter.domain.rules.suppression import SuppressionIndex
from rls_linter.domain.rules.unsafe_calls import CallSiteScanner, UnsafeCallRule


def _scan(config, gateway, code: str, module_name: str = "app.handlers") -> list[Diagnostic]:
    module = astroid.parse(code, module_name=module_name)
    index = SuppressionIndex(gateway.collect_comments(module))
    rule = UnsafeCallRule(config, gateway, DiagnosticEmitter(lambda d: None), index)
    return CallSiteScanner(rule).scan(module)


@pytest.mark.parametrize("method", ["yield_per", "stream", "stream_scalars"])
def test_guarded_method_on_wrapper_session(config, gateway, method: str) -> None:
    code = f"""
from lemmata.db.orm import Session

def handler(session: Session):
    return session.{method}(10)
"""
    diagnostics = _scan(config, gateway, code)

    assert [d.method_name for d in diagnostics] == [method]
    assert diagnostics[0].line == 5


def test_unknown_method_is_ignored(config, gateway) -> None:
    code = """
from lemmata.db.orm import Session

def handler(session: Session):
    session.execute("select 1")
    return session.query(object).all()
"""
    assert _scan(config, gateway, code) == []


def test_same_name_on_unrelated_type(config, gateway) -> None:
    code = """
from warehouse.streams import EventStream

def replay(events: EventStream):
    events.stream("audit")
    events.stream_scalars("audit")
    return events.yield_per(5)
"""
    assert _scan(config, gateway, code) == []


def test_unresolved_receiver_is_ignored(config, gateway) -> None:
    code = """
def handler(session):
    return session.yield_per(10)
"""
    assert _scan(config, gateway, code) == []


def test_method_declaration_is_not_a_call(config, gateway) -> None:
    code = """
class Session:
    def yield_per(self, count):
        return self
"""
    assert _scan(config, gateway, code, module_name="lemmata.db.orm.declared") == []


def test_class_defined_in_guarded_module(config, gateway) -> None:
    code = """
class Query:
    def yield_per(self, count):
        return self

Query().yield_per(1)
"""
    diagnostics = _scan(config, gateway, code, module_name="lemmata_db.orm.inline")

    assert [(d.line, d.method_name) for d in diagnostics] == [(6, "yield_per")]


def test_chained_call_flagged_at_outer_method(config, gateway) -> None:
    code = """
from lemmata.db.orm import Session

def handler(session: Session):
    return session.where(True).yield_per(10)
"""
    diagnostics = _scan(config, gateway, code)

    assert len(diagnostics) == 1
    assert diagnostics[0].method_name == "yield_per"
    assert diagnostics[0].column == len("    return session.where(True).")


def test_method_results_typed_from_return_annotations(config, gateway) -> None:
    code = """
from lemmata.db.orm import Session

def chained(session: Session):
    a = session.where(True).yield_per(10)
    b = session.query(object).yield_per(10)
    c = session.query(object).where(True).all()
    return a, b, c
"""
    diagnostics = _scan(config, gateway, code)

    assert [(d.line, d.method_name) for d in diagnostics] == [(5, "yield_per"), (6, "yield_per")]


def test_union_receiver_is_not_guarded(config, gateway) -> None:
    code = """
from typing import Union
from lemmata.db.orm import Session
from warehouse.streams import EventStream

def handler(source: Union[Session, EventStream]):
    return source.stream("q")
"""
    assert _scan(config, gateway, code) == []


def test_suppression_comments(config, gateway) -> None:
    code = """
from lemmata.db.orm import Session

def handler(session: Session):
    # nolint:rlslinter  Not querying org tables
    session.yield_per(1)
    session.yield_per(2)  # nolint
    session.execute("select 1")
    session.yield_per(3)  # nolint:otherlinter
    session.yield_per(4)
"""
    diagnostics = _scan(config, gateway, code)

    assert [d.line for d in diagnostics] == [9, 10]


def test_check_ignores_non_calls(config, gateway) -> None:
    rule = UnsafeCallRule(config, gateway, DiagnosticEmitter(lambda d: None))
    assert rule.check(astroid.extract_node("session.yield_per")) == []
    assert rule.check(astroid.extract_node("yield_per(10)")) == []


def test_use_suppressions_switches_index(config, gateway) -> None:
    module = astroid.parse(
        "from lemmata.db.orm import Session\nSession().stream(1)\n", module_name="app.switch")
    call = next(module.nodes_of_class(astroid.nodes.Call))
    rule = UnsafeCallRule(config, gateway, DiagnosticEmitter(lambda d: None))

    assert len(rule.check(call)) == 1
    rule.use_suppressions(SuppressionIndex([Comment("# nolint", 1)]))
    assert rule.check(call) == []


def test_nested_calls_are_visited(config, gateway) -> None:
    code = """
from lemmata.db.orm import Session

def handler(session: Session):
    fetch = lambda: session.stream(1)
    batches = [session.yield_per(n) for n in range(3)]
    return f"{session.stream_scalars(2)}", fetch, batches
"""
    diagnostics = _scan(config, gateway, code)

    assert [(d.line, d.method_name) for d in diagnostics] == [
        (5, "stream"), (6, "yield_per"), (7, "stream_scalars")]
