import logging
import re
import tokenize
from typing import Optional, Set, Tuple, Union

import astroid  # type: ignore[import-untyped]
from astroid import bases
from astroid.exceptions import AstroidImportError, AttributeInferenceError, InferenceError

from rls_linter.domain.entities import Comment, ResolvedType
from rls_linter.domain.protocols import AstroidProtocol

logger = logging.getLogger(__name__)

# Inference giving up is "no type information", never a crash.
_INFERENCE_ERRORS = (InferenceError, AttributeInferenceError, AstroidImportError)

_FORWARD_REF = re.compile(r"^[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*$")

# Wrappers whose first argument is the declared type.
_TRANSPARENT_WRAPPERS = frozenset({"Optional", "Annotated", "ClassVar", "Final"})
_CLASS_OBJECT_WRAPPERS = frozenset({"type", "Type"})
_PROPERTY_DECORATORS = frozenset({"property", "cached_property"})

# Union of several real types: a structural type with no declaring module.
_STRUCTURAL = object()

# (class, is_class_object) or _STRUCTURAL
_AnnotationTarget = Union[Tuple[astroid.nodes.ClassDef, bool], object]


class AstroidGateway(AstroidProtocol):
    """
    Static type information for the analyzer, backed by astroid.

    Declared types (parameter, variable and attribute annotations, return
    annotations) win over inferred values, the way a type checker would
    see them. When neither is available the answer is None.
    """

    def parse_file(self, file_path: str) -> astroid.nodes.Module:
        """Parse a file and return the astroid Module node. Syntax errors propagate."""
        return astroid.MANAGER.ast_from_file(file_path, source=True)

    def collect_comments(self, module: astroid.nodes.Module) -> list[Comment]:
        """All ``#`` comments of a module, in source order."""
        stream = module.stream()
        if stream is None:
            logger.debug("Module %s has no source; no comments collected", module.name)
            return []
        with stream:
            return [
                Comment(text=tok.string, line=tok.start[0])
                for tok in tokenize.tokenize(stream.readline)
                if tok.type == tokenize.COMMENT
            ]

    def resolve_type(self, expr: astroid.nodes.NodeNG) -> Optional[ResolvedType]:
        annotation = self._declared_annotation(expr, set())
        if annotation is not None:
            resolved = self._resolve_annotation(annotation)
            if resolved is not None:
                return resolved

        value = self._first_value(expr)
        if value is None:
            return None
        return self._type_of_value(value)

    # Inferred values

    def _first_value(self, node: astroid.nodes.NodeNG) -> Optional[object]:
        """First inferred value that is not Uninferable."""
        try:
            for value in node.infer():
                if value is not astroid.Uninferable:
                    return value
        except _INFERENCE_ERRORS as exc:
            logger.debug("Inference failed for %s: %s", node.as_string(), exc)
        return None

    def _type_of_value(self, value: object) -> ResolvedType:
        if isinstance(value, astroid.nodes.ClassDef):
            return self._type_of_class(value)
        if isinstance(value, bases.BaseInstance):
            proxied = getattr(value, "_proxied", None)
            if isinstance(proxied, astroid.nodes.ClassDef):
                return ResolvedType.reference(self._type_of_class(proxied))
        return ResolvedType.unnamed(type(value).__name__)

    @staticmethod
    def _type_of_class(klass: astroid.nodes.ClassDef) -> ResolvedType:
        module_path = klass.root().name
        if module_path == "builtins":
            return ResolvedType.builtin(klass.name)
        return ResolvedType.named(klass.name, module_path)

    # Declared types

    def _declared_annotation(
        self, node: astroid.nodes.NodeNG, visited: Set[int]
    ) -> Optional[astroid.nodes.NodeNG]:
        """Annotation node that declares the type of ``node``, if any."""
        if id(node) in visited:
            return None
        visited.add(id(node))

        if isinstance(node, astroid.nodes.Name):
            return self._annotation_of_name(node)
        if isinstance(node, astroid.nodes.Attribute):
            return self._annotation_of_attribute(node, visited)
        if isinstance(node, astroid.nodes.Call):
            return self._annotation_of_call(node, visited)
        return None

    def _annotation_of_name(self, node: astroid.nodes.Name) -> Optional[astroid.nodes.NodeNG]:
        for def_node in node.lookup(node.name)[1]:
            parent = def_node.parent
            if isinstance(parent, astroid.nodes.AnnAssign) and parent.target is def_node:
                return parent.annotation
            if isinstance(parent, astroid.nodes.Arguments):
                annotation = self._argument_annotation(def_node, parent)
                if annotation is not None:
                    return annotation
        return None

    @staticmethod
    def _argument_annotation(
        def_node: astroid.nodes.NodeNG, args: astroid.nodes.Arguments
    ) -> Optional[astroid.nodes.NodeNG]:
        """Annotation of a named parameter. *args and **kwargs are containers, not the type."""
        positional = (args.posonlyargs or []) + (args.args or [])
        positional_annos = (args.posonlyargs_annotations or []) + (args.annotations or [])
        keyword_only = args.kwonlyargs or []
        keyword_annos = args.kwonlyargs_annotations or []

        for params, annos in ((positional, positional_annos), (keyword_only, keyword_annos)):
            for idx, param in enumerate(params):
                if param is def_node:
                    return annos[idx] if idx < len(annos) else None
        return None

    def _annotation_of_attribute(
        self, node: astroid.nodes.Attribute, visited: Set[int]
    ) -> Optional[astroid.nodes.NodeNG]:
        owner = self._owner_of(node.expr, visited)
        if isinstance(owner, astroid.nodes.Module):
            for def_node in owner.locals.get(node.attrname, []):
                if isinstance(def_node.parent, astroid.nodes.AnnAssign):
                    return def_node.parent.annotation
            return None
        if not isinstance(owner, astroid.nodes.ClassDef):
            return None

        try:
            chain = [owner, *owner.ancestors()]
        except _INFERENCE_ERRORS:
            chain = [owner]
        for klass in chain:
            annotation = self._annotation_in_class(klass, node.attrname, visited)
            if annotation is not None:
                return annotation
        return None

    def _owner_of(
        self, expr: astroid.nodes.NodeNG, visited: Set[int]
    ) -> Optional[astroid.nodes.NodeNG]:
        """Class (or module) whose attribute ``expr.attr`` reads."""
        annotation = self._declared_annotation(expr, visited)
        if annotation is not None:
            target = self._annotation_target(annotation)
            if isinstance(target, tuple):
                return target[0]

        value = self._first_value(expr)
        if isinstance(value, (astroid.nodes.ClassDef, astroid.nodes.Module)):
            return value
        if isinstance(value, bases.BaseInstance):
            proxied = getattr(value, "_proxied", None)
            if isinstance(proxied, astroid.nodes.ClassDef):
                return proxied
        return None

    def _annotation_in_class(
        self, klass: astroid.nodes.ClassDef, attr_name: str, visited: Set[int]
    ) -> Optional[astroid.nodes.NodeNG]:
        """Class-body annotation, @property return, or annotated instance attribute."""
        for def_node in klass.locals.get(attr_name, []):
            if isinstance(def_node.parent, astroid.nodes.AnnAssign):
                return def_node.parent.annotation
            if (
                isinstance(def_node, astroid.nodes.FunctionDef)
                and def_node.returns is not None
                and self._is_property(def_node)
            ):
                return def_node.returns

        for assign_attr in klass.instance_attrs.get(attr_name, []):
            parent = assign_attr.parent
            if isinstance(parent, astroid.nodes.AnnAssign):
                return parent.annotation
            if isinstance(parent, astroid.nodes.Assign):
                annotation = self._declared_annotation(parent.value, visited)
                if annotation is not None:
                    return annotation
        return None

    @staticmethod
    def _is_property(func: astroid.nodes.FunctionDef) -> bool:
        decorators = func.decorators.nodes if func.decorators else []
        for dec in decorators:
            if isinstance(dec, astroid.nodes.Name) and dec.name in _PROPERTY_DECORATORS:
                return True
            if isinstance(dec, astroid.nodes.Attribute) and dec.attrname in _PROPERTY_DECORATORS:
                return True
        return False

    def _annotation_of_call(
        self, node: astroid.nodes.Call, visited: Set[int]
    ) -> Optional[astroid.nodes.NodeNG]:
        """Return annotation of the called function or method."""
        func = self._first_value(node.func)
        if isinstance(func, (astroid.nodes.FunctionDef, bases.UnboundMethod)):
            function = func._proxied if isinstance(func, bases.UnboundMethod) else func
            return self._declared_return(function)
        if isinstance(node.func, astroid.nodes.Attribute):
            return self._annotation_of_method(node.func, visited)
        return None

    def _annotation_of_method(
        self, func: astroid.nodes.Attribute, visited: Set[int]
    ) -> Optional[astroid.nodes.NodeNG]:
        """Return annotation of ``owner.method`` looked up on the receiver's declared class."""
        owner = self._owner_of(func.expr, visited)
        if not isinstance(owner, astroid.nodes.ClassDef):
            return None
        try:
            chain = [owner, *owner.ancestors()]
        except _INFERENCE_ERRORS:
            chain = [owner]
        for klass in chain:
            for def_node in klass.locals.get(func.attrname, []):
                if isinstance(def_node, astroid.nodes.FunctionDef) and not self._is_property(def_node):
                    return self._declared_return(def_node)
        return None

    @staticmethod
    def _declared_return(function: astroid.nodes.NodeNG) -> Optional[astroid.nodes.NodeNG]:
        # Calling a coroutine function yields a coroutine, not the annotated type.
        if isinstance(function, astroid.nodes.AsyncFunctionDef):
            return None
        return getattr(function, "returns", None)

    # Annotations

    def _resolve_annotation(self, annotation: astroid.nodes.NodeNG) -> Optional[ResolvedType]:
        """
        Type denoted by an annotation.

        ``X``, ``Optional[X]`` and ``X | None`` denote a reference to an
        instance of X; ``type[X]`` denotes the class itself.
        """
        target = self._annotation_target(annotation)
        if target is None:
            return None
        if target is _STRUCTURAL:
            return ResolvedType.unnamed(annotation.as_string())
        klass, is_class_object = target  # type: ignore[misc]
        resolved = self._type_of_class(klass)
        return resolved if is_class_object else ResolvedType.reference(resolved)

    def _annotation_target(self, anno: astroid.nodes.NodeNG) -> Optional[_AnnotationTarget]:
        if isinstance(anno, astroid.nodes.Const):
            if isinstance(anno.value, str):
                return self._forward_ref_target(anno)
            return None

        if isinstance(anno, astroid.nodes.BinOp) and anno.op == "|":
            return self._union_target(self._union_members(anno))

        if isinstance(anno, astroid.nodes.Subscript):
            return self._subscript_target(anno)

        if self._spelled_name(anno) == "Self":
            return self._as_instance(self._enclosing_class(anno))

        return self._as_instance(self._infer_class(anno))

    def _subscript_target(self, anno: astroid.nodes.Subscript) -> Optional[_AnnotationTarget]:
        wrapper = self._spelled_name(anno.value)
        slice_node = anno.slice
        args = list(slice_node.elts) if isinstance(slice_node, astroid.nodes.Tuple) else [slice_node]
        if not args:
            return None

        if wrapper in _TRANSPARENT_WRAPPERS:
            return self._annotation_target(args[0])
        if wrapper == "Union":
            return self._union_target(args)
        if wrapper in _CLASS_OBJECT_WRAPPERS:
            inner = self._annotation_target(args[0])
            if isinstance(inner, tuple):
                return (inner[0], True)
            return inner
        # Generic container: the container is the type.
        return self._as_instance(self._infer_class(anno.value))

    def _union_members(self, anno: astroid.nodes.NodeNG) -> list[astroid.nodes.NodeNG]:
        if isinstance(anno, astroid.nodes.BinOp) and anno.op == "|":
            return self._union_members(anno.left) + self._union_members(anno.right)
        return [anno]

    def _union_target(self, members: list[astroid.nodes.NodeNG]) -> Optional[_AnnotationTarget]:
        real = [
            m for m in members
            if not (isinstance(m, astroid.nodes.Const) and m.value is None)
        ]
        if len(real) == 1:
            return self._annotation_target(real[0])
        return _STRUCTURAL if real else None

    def _forward_ref_target(self, anno: astroid.nodes.Const) -> Optional[_AnnotationTarget]:
        """Resolve a dotted string annotation such as ``"orm.Session"``."""
        text = anno.value.strip()
        if not _FORWARD_REF.match(text):
            return None
        head, *rest = text.split(".")
        if head == "Self" and not rest:
            return self._as_instance(self._enclosing_class(anno))

        probe = astroid.nodes.Name(
            name=head,
            lineno=anno.lineno,
            col_offset=anno.col_offset,
            parent=anno.parent,
            end_lineno=anno.end_lineno,
            end_col_offset=anno.end_col_offset,
        )
        value = self._first_value(probe)
        for attr in rest:
            if value is None:
                return None
            try:
                value = next(
                    (v for v in value.igetattr(attr) if v is not astroid.Uninferable), None)
            except _INFERENCE_ERRORS:
                return None
        return self._as_instance(value if isinstance(value, astroid.nodes.ClassDef) else None)

    def _infer_class(self, node: astroid.nodes.NodeNG) -> Optional[astroid.nodes.ClassDef]:
        value = self._first_value(node)
        return value if isinstance(value, astroid.nodes.ClassDef) else None

    @staticmethod
    def _as_instance(
        klass: Optional[astroid.nodes.ClassDef],
    ) -> Optional[Tuple[astroid.nodes.ClassDef, bool]]:
        return (klass, False) if klass is not None else None

    @staticmethod
    def _spelled_name(node: astroid.nodes.NodeNG) -> str:
        """``Optional`` for both ``Optional`` and ``typing.Optional``."""
        if isinstance(node, astroid.nodes.Name):
            return str(node.name)
        if isinstance(node, astroid.nodes.Attribute):
            return str(node.attrname)
        return ""

    @staticmethod
    def _enclosing_class(node: astroid.nodes.NodeNG) -> Optional[astroid.nodes.ClassDef]:
        frame = node.frame()
        while not isinstance(frame, astroid.nodes.ClassDef):
            parent = getattr(frame, "parent", None)
            if parent is None:
                return None
            frame = parent.frame()
        return frame
