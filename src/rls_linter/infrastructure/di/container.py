from typing import TYPE_CHECKING, Any, Optional, TypeVar, cast

from rls_linter.domain.config import AnalyzerConfig, ConfigurationLoader
from rls_linter.infrastructure.config_file_loader import ConfigFileLoader
from rls_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from rls_linter.infrastructure.services.rule_registry import RuleRegistryService

if TYPE_CHECKING:
    from rls_linter.domain.protocols import AstroidProtocol

T = TypeVar("T")


class RlsContainer:
    """Dependency Injection Container for the RLS linter."""

    _instance: Optional["RlsContainer"] = None

    def __init__(self, config_loader: Optional[ConfigurationLoader] = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config_loader)

    def _register_defaults(self, config_loader: Optional[ConfigurationLoader]) -> None:
        """Register default implementations for protocols."""
        if config_loader is None:
            config_loader = ConfigurationLoader(ConfigFileLoader.load_config_from_fs())
        self.register_singleton("ConfigurationLoader", config_loader)

        registry = RuleRegistryService(config_loader.rule_registry_path)
        self.register_singleton("RuleRegistryService", registry)
        self.register_singleton("AnalyzerConfig", config_loader.build(registry.get_rule_table()))
        self.register_singleton("AstroidGateway", AstroidGateway())

    @classmethod
    def get_instance(cls) -> "RlsContainer":
        """Process-wide container, built on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    def register_singleton(self, key: str, instance: Any) -> None:
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        if key not in self._singletons:
            raise KeyError(f"Dependency {key!r} is not registered.")
        return self._singletons[key]

    def get_typed(self, key: str, _type: type[T]) -> T:
        return cast(T, self.get(key))

    def get_config(self) -> AnalyzerConfig:
        return self.get_typed("AnalyzerConfig", AnalyzerConfig)

    def get_config_loader(self) -> ConfigurationLoader:
        return self.get_typed("ConfigurationLoader", ConfigurationLoader)

    def get_rule_registry(self) -> RuleRegistryService:
        return self.get_typed("RuleRegistryService", RuleRegistryService)

    def get_astroid_gateway(self) -> "AstroidProtocol":
        return cast("AstroidProtocol", self.get("AstroidGateway"))
