from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    import astroid

    from rls_linter.domain.entities import Comment, ResolvedType, Rule


class TypeResolverProtocol(Protocol):
    def resolve_type(self, expr: "astroid.nodes.NodeNG") -> Optional["ResolvedType"]:
        """Static type of ``expr``; None when no type information is available."""
        ...


class AstroidProtocol(TypeResolverProtocol, Protocol):
    def parse_file(self, file_path: str) -> "astroid.nodes.Module":
        """Parse a file and return the astroid Module node."""
        ...

    def collect_comments(self, module: "astroid.nodes.Module") -> list["Comment"]:
        """All comments of a module with their 1-based lines."""
        ...


class RuleRegistryProtocol(Protocol):
    """Protocol for the rule registry loader. Implemented by RuleRegistryService."""

    def get_registry(self) -> dict[str, dict[str, object]]: ...
    def get_rules(self) -> list["Rule"]: ...
