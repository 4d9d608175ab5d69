"""Tests for RlsChecker (W9801)."""

import unittest

import astroid  # type: ignore[import-untyped]
from pylint.interfaces import INFERENCE

from rls_linter.domain.config import ConfigurationLoader
from rls_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from rls_linter.infrastructure.services.rule_registry import RuleRegistryService
from rls_linter.use_cases.checks.rls import RlsChecker
from tests.linter_test_utils import MockLinter, run_checker, walk

CODE = """
from lemmata.db.orm import Session

def export(session: Session):
    rows = session.query(object).yield_per(10)
    rows_again = session.query(object).yield_per(10)  # nolint:rlslinter
    return session.query(object).all()
"""


class TestRlsChecker(unittest.TestCase):
    def setUp(self) -> None:
        self.config = ConfigurationLoader({}).build(RuleRegistryService().get_rule_table())
        self.gateway = AstroidGateway()

    def _run(self, code: str, module_name: str = "app.checker_case"):
        return run_checker(
            RlsChecker,
            code,
            module_name=module_name,
            config=self.config,
            ast_gateway=self.gateway,
        )

    def test_reports_once_with_method_span(self) -> None:
        linter = self._run(CODE)

        self.assertEqual(linter.messages, ["rls-unsafe-call"])
        call = linter.calls[0]
        self.assertEqual(call["line"], 5)
        self.assertEqual(call["col_offset"], len("    rows = session.query(object)."))
        self.assertEqual(call["end_lineno"], 5)
        self.assertEqual(call["end_col_offset"], call["col_offset"] + len("yield_per"))
        self.assertIs(call["confidence"], INFERENCE)
        self.assertEqual(call["node"].func.attrname, "yield_per")

    def test_message_carries_guidance(self) -> None:
        linter = self._run(CODE)

        (text,) = linter.calls[0]["args"]
        lines = text.splitlines()
        self.assertTrue(lines[0].startswith("SQLAlchemy .yield_per() is not supported"))
        self.assertTrue(lines[1].startswith("Use .all()"))
        self.assertIn("Why this fails:", text)

    def test_unrelated_receiver_is_clean(self) -> None:
        linter = self._run(
            "from warehouse.streams import EventStream\n"
            "EventStream().yield_per(5)\n"
        )
        self.assertEqual(linter.messages, [])

    def test_suppressions_do_not_leak_between_modules(self) -> None:
        linter = MockLinter()
        checker = RlsChecker(linter, config=self.config, ast_gateway=self.gateway)
        first = astroid.parse("# nolint\nimport os\n", module_name="app.checker_first")
        second = astroid.parse(
            "from lemmata.db.orm import Session\nSession().stream(1)\n",
            module_name="app.checker_second",
        )

        walk(checker, first)
        walk(checker, second)

        self.assertEqual(linter.messages, ["rls-unsafe-call"])
        self.assertEqual(linter.calls[0]["line"], 2)

    def test_message_definition(self) -> None:
        msgid, (template, symbol, _description) = next(iter(RlsChecker.msgs.items()))
        self.assertEqual(msgid, "W9801")
        self.assertEqual(symbol, "rls-unsafe-call")
        self.assertEqual(template, "%s")
        self.assertEqual(RlsChecker.name, "rlslinter")
