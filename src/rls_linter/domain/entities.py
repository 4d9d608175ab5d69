"""Domain value objects shared by the detection pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class Rule:
    """A guarded method and the guidance attached to it."""

    method_name: str
    message: str
    replacement: str
    rationale: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for serialization."""
        return {
            "method_name": self.method_name,
            "message": self.message,
            "replacement": self.replacement,
            "rationale": self.rationale,
        }


class TypeKind(Enum):
    """Shape of a statically resolved type."""
    REFERENCE = "reference"
    NAMED = "named"
    BUILTIN = "builtin"
    UNNAMED = "unnamed"


@dataclass(frozen=True)
class TypeOrigin:
    """Dotted path of the module that declares a named type."""

    module_path: str


@dataclass(frozen=True)
class ResolvedType:
    """
    Static type of an expression as seen by the analyzer.

    A REFERENCE wraps exactly the type it refers to in ``target``; an
    instance reached through a variable is a reference to its class.
    NAMED types carry the origin of their declaring module.
    """

    kind: TypeKind
    name: str = ""
    origin: Optional[TypeOrigin] = None
    target: Optional["ResolvedType"] = None

    @classmethod
    def named(cls, name: str, module_path: str) -> "ResolvedType":
        """Create a declared class type."""
        return cls(kind=TypeKind.NAMED, name=name, origin=TypeOrigin(module_path))

    @classmethod
    def builtin(cls, name: str) -> "ResolvedType":
        """Create a type declared by the builtins module."""
        return cls(kind=TypeKind.BUILTIN, name=name, origin=TypeOrigin("builtins"))

    @classmethod
    def unnamed(cls, name: str = "") -> "ResolvedType":
        """Create a structural type (module, function, union, ...)."""
        return cls(kind=TypeKind.UNNAMED, name=name)

    @classmethod
    def reference(cls, target: "ResolvedType") -> "ResolvedType":
        """Create a reference to ``target``."""
        return cls(kind=TypeKind.REFERENCE, name=target.name, target=target)

    @property
    def qname(self) -> str:
        """Fully qualified name, when the type has an origin."""
        if self.origin is None:
            return self.name
        return f"{self.origin.module_path}.{self.name}"


@dataclass(frozen=True)
class Comment:
    """A source comment and the 1-based line it sits on."""

    text: str
    line: int


@dataclass(frozen=True)
class Diagnostic:
    """
    One finding. Lines are 1-based, columns 0-based as in astroid.

    The span covers the method-name token only.
    """

    path: str
    line: int
    column: int
    end_line: int
    end_column: int
    method_name: str
    message: str

    def location(self) -> str:
        """Render as ``path:line:col`` with a 1-based column."""
        return f"{self.path}:{self.line}:{self.column + 1}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "end_line": self.end_line,
            "end_column": self.end_column,
            "method_name": self.method_name,
            "message": self.message,
        }
