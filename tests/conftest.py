"""Pytest configuration and shared fixtures.

Run pytest from this project's root; pythonpath in pyproject.toml puts
src/ on sys.path. The functional fixture tree is added here so astroid can
resolve ``import lemmata.db.orm`` and ``import warehouse`` from test code.
"""

import sys
from pathlib import Path

import pytest

from rls_linter.domain.config import AnalyzerConfig, ConfigurationLoader
from rls_linter.infrastructure.di.container import RlsContainer
from rls_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from rls_linter.infrastructure.services.rule_registry import RuleRegistryService

SOURCE_DATA = Path(__file__).parent / "functional" / "source_data"

if str(SOURCE_DATA) not in sys.path:
    sys.path.insert(0, str(SOURCE_DATA))


@pytest.fixture
def source_data() -> Path:
    return SOURCE_DATA


@pytest.fixture(scope="session")
def rule_registry() -> RuleRegistryService:
    return RuleRegistryService()


@pytest.fixture
def config(rule_registry: RuleRegistryService) -> AnalyzerConfig:
    """Default configuration with the packaged rule table."""
    return ConfigurationLoader({}).build(rule_registry.get_rule_table())


@pytest.fixture
def gateway() -> AstroidGateway:
    return AstroidGateway()


@pytest.fixture
def fresh_container():
    """Container singleton built from default configuration, reset afterwards."""
    RlsContainer.reset()
    RlsContainer._instance = RlsContainer(config_loader=ConfigurationLoader({}))
    yield RlsContainer._instance
    RlsContainer.reset()
