"""Tree-sitter powered Go declaration and usage analysis."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set, Tuple

import tree_sitter_go
from tree_sitter import Language, Node, Parser, Tree

from .modules import default_package_name
from .symbols import Diagnostic, PackageRef, Position, ResolvedSymbol, Signature, SymbolKind, TypeRef

GO_LANGUAGE = Language(tree_sitter_go.language())

PREDECLARED_TYPES = frozenset(
    {
        "any", "bool", "byte", "comparable", "complex64", "complex128", "error",
        "float32", "float64", "int", "int8", "int16", "int32", "int64", "rune",
        "string", "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
    }
)

BUILTIN_FUNCS = frozenset(
    {
        "append", "cap", "clear", "close", "complex", "copy", "delete", "imag",
        "len", "make", "max", "min", "new", "panic", "print", "println", "real", "recover",
    }
)

_IGNORE_BUILD = re.compile(r"^//\s*(?:go:build|\+build)\s+ignore\b", re.MULTILINE)
_MAX_DIAGNOSTICS = 10
_MAX_EMBED_DEPTH = 5

# Statements that open a new lexical block.
_SCOPE_NODES = {
    "block",
    "if_statement",
    "for_statement",
    "expression_switch_statement",
    "type_switch_statement",
    "select_statement",
    "expression_case",
    "type_case",
    "default_case",
    "communication_case",
}

# Environment of a function body: local name -> inferred type (None when unknown).
Env = Dict[str, Optional[TypeRef]]
PackageLookup = Callable[[str], Optional["PackageDecls"]]


@dataclass
class TypeDecl:
    """Members reachable through a declared type."""

    name: str
    fields: Dict[str, TypeRef] = field(default_factory=dict)
    embedded: List[TypeRef] = field(default_factory=list)
    methods: Dict[str, Signature] = field(default_factory=dict)
    alias_of: Optional[TypeRef] = None
    underlying: Optional[TypeRef] = None


@dataclass
class PackageDecls:
    """Package-level declarations of one Go package."""

    path: str
    name: str
    funcs: Dict[str, Signature] = field(default_factory=dict)
    methods: Dict[str, Dict[str, Signature]] = field(default_factory=dict)
    types: Dict[str, TypeDecl] = field(default_factory=dict)
    vars: Dict[str, Optional[TypeRef]] = field(default_factory=dict)
    consts: Set[str] = field(default_factory=set)

    @property
    def ref(self) -> PackageRef:
        return PackageRef(path=self.path, name=self.name)

    @property
    def scope(self) -> str:
        return f"package {self.name}"


@dataclass
class SourceFile:
    """A parsed compilation unit."""

    path: Path
    source: bytes
    tree: Tree
    package_name: Optional[str]
    imports: Dict[str, str]

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def position(self, node: Node) -> Position:
        row, column = node.start_point[0], node.start_point[1]
        return Position(filename=str(self.path), line=row + 1, column=column + 1)


class GoParser:
    """Parses Go files and indexes their declarations."""

    def __init__(self) -> None:
        self._parser = Parser(GO_LANGUAGE)

    def parse_file(self, path: Path) -> SourceFile:
        source = path.read_bytes()
        tree = self._parser.parse(source)
        root = tree.root_node
        package_name: Optional[str] = None
        imports: Dict[str, str] = {}
        for child in root.named_children:
            if child.type == "package_clause":
                for part in child.named_children:
                    if part.type in {"package_identifier", "identifier"}:
                        package_name = _decode(source, part)
            elif child.type == "import_declaration":
                for spec in _descendants(child, "import_spec"):
                    _add_import(spec, source, imports)
        return SourceFile(path=path, source=source, tree=tree, package_name=package_name, imports=imports)

    @staticmethod
    def is_ignored(source_file: SourceFile) -> bool:
        """True for files excluded with an ``ignore`` build constraint."""
        header = source_file.source.split(b"\npackage ", 1)[0].decode("utf-8", errors="ignore")
        return bool(_IGNORE_BUILD.search(header))

    @staticmethod
    def syntax_errors(source_file: SourceFile) -> List[Diagnostic]:
        root = source_file.root
        if not root.has_error:
            return []
        diagnostics: List[Diagnostic] = []
        stack = [root]
        while stack and len(diagnostics) < _MAX_DIAGNOSTICS:
            node = stack.pop()
            if node.is_missing:
                diagnostics.append(
                    Diagnostic(message=f"syntax error: missing {node.type}", position=source_file.position(node))
                )
                continue
            if node.type == "ERROR":
                snippet = source_file.text(node).strip().splitlines()
                near = snippet[0][:40] if snippet else ""
                diagnostics.append(
                    Diagnostic(message=f"syntax error near {near!r}", position=source_file.position(node))
                )
                continue
            if node.has_error:
                stack.extend(reversed(node.children))
        diagnostics.sort(key=lambda item: (item.position.line, item.position.column) if item.position else (0, 0))
        return diagnostics

    def collect_declarations(self, files: Iterable[SourceFile], path: str, name: str) -> PackageDecls:
        decls = PackageDecls(path=path, name=name)
        for source_file in files:
            types = _TypeReader(source_file, path)
            for node in source_file.root.named_children:
                if node.type == "function_declaration":
                    name_node = node.child_by_field_name("name")
                    if name_node is not None:
                        decls.funcs[source_file.text(name_node)] = types.signature(node)
                elif node.type == "method_declaration":
                    name_node = node.child_by_field_name("name")
                    receiver = _receiver_type_name(node, source_file)
                    if name_node is not None and receiver:
                        decls.methods.setdefault(receiver, {})[source_file.text(name_node)] = types.signature(node)
                elif node.type == "type_declaration":
                    for spec in node.named_children:
                        decl = types.type_decl(spec)
                        if decl is not None:
                            decls.types[decl.name] = decl
                elif node.type == "var_declaration":
                    for spec in _descendants(node, "var_spec"):
                        type_node = spec.child_by_field_name("type")
                        declared = types.type_ref(type_node) if type_node is not None else None
                        if declared is None:
                            declared = _literal_type(spec, types)
                        for name_node in spec.children_by_field_name("name"):
                            decls.vars[source_file.text(name_node)] = declared
                elif node.type == "const_declaration":
                    for spec in _descendants(node, "const_spec"):
                        for name_node in spec.children_by_field_name("name"):
                            decls.consts.add(source_file.text(name_node))
        return decls


class _TypeReader:
    """Turns type syntax into ``TypeRef`` values in the context of one file."""

    def __init__(self, source_file: SourceFile, package_path: str) -> None:
        self.file = source_file
        self.package_path = package_path

    def type_ref(self, node: Optional[Node]) -> Optional[TypeRef]:
        if node is None:
            return None
        kind = node.type
        if kind == "type_identifier":
            return self.named(self.file.text(node))
        if kind == "qualified_type":
            package_node = node.child_by_field_name("package")
            name_node = node.child_by_field_name("name")
            if package_node is None or name_node is None:
                return None
            alias = self.file.text(package_node)
            return TypeRef(
                name=self.file.text(name_node),
                package_path=self.file.imports.get(alias, alias),
            )
        if kind == "pointer_type":
            inner = self.type_ref(_first_named(node))
            return inner.pointer_to() if inner is not None else None
        if kind == "generic_type":
            return self.type_ref(node.child_by_field_name("type"))
        if kind == "parenthesized_type":
            return self.type_ref(_first_named(node))
        return TypeRef(name=self.file.text(node), named=False)

    def named(self, name: str) -> TypeRef:
        if name in PREDECLARED_TYPES:
            return TypeRef(name=name)
        return TypeRef(name=name, package_path=self.package_path)

    def signature(self, node: Node) -> Signature:
        params, variadic = self.parameters(node.child_by_field_name("parameters"))
        result = node.child_by_field_name("result")
        if result is None:
            results: Tuple[TypeRef, ...] = ()
        elif result.type == "parameter_list":
            results = self.parameters(result)[0]
        else:
            ref = self.type_ref(result)
            results = (ref,) if ref is not None else ()
        return Signature(params=params, results=results, variadic=variadic)

    def parameters(self, node: Optional[Node]) -> Tuple[Tuple[TypeRef, ...], bool]:
        if node is None:
            return (), False
        refs: List[TypeRef] = []
        variadic = False
        for param in node.named_children:
            if param.type not in {"parameter_declaration", "variadic_parameter_declaration"}:
                continue
            ref = self.type_ref(param.child_by_field_name("type"))
            if ref is None:
                continue
            if param.type == "variadic_parameter_declaration":
                variadic = True
                ref = TypeRef(name=f"[]{ref}", named=False)
            count = max(1, len(param.children_by_field_name("name")))
            refs.extend([ref] * count)
        return tuple(refs), variadic

    def type_decl(self, spec: Node) -> Optional[TypeDecl]:
        if spec.type not in {"type_spec", "type_alias"}:
            return None
        name_node = spec.child_by_field_name("name")
        type_node = spec.child_by_field_name("type")
        if name_node is None or type_node is None:
            return None
        decl = TypeDecl(name=self.file.text(name_node))
        if spec.type == "type_alias":
            decl.alias_of = self.type_ref(type_node)
            return decl

        if type_node.type == "struct_type":
            for field_node in _descendants(type_node, "field_declaration"):
                self._add_field(decl, field_node)
        elif type_node.type == "interface_type":
            for element in type_node.named_children:
                if element.type in {"method_elem", "method_spec"}:
                    method_name = element.child_by_field_name("name")
                    if method_name is not None:
                        decl.methods[self.file.text(method_name)] = self.signature(element)
                elif element.type in {"type_elem", "constraint_elem"}:
                    embedded = self.type_ref(_first_named(element))
                    if embedded is not None and embedded.named:
                        decl.embedded.append(embedded)
                elif element.type in {"type_identifier", "qualified_type"}:
                    embedded = self.type_ref(element)
                    if embedded is not None:
                        decl.embedded.append(embedded)
        else:
            underlying = self.type_ref(type_node)
            if underlying is not None and underlying.named:
                decl.underlying = underlying
        return decl

    def _add_field(self, decl: TypeDecl, node: Node) -> None:
        ref = self.type_ref(node.child_by_field_name("type"))
        if ref is None:
            return
        names = node.children_by_field_name("name")
        if names:
            for name_node in names:
                decl.fields[self.file.text(name_node)] = ref
            return
        if any(child.type == "*" for child in node.children):
            ref = ref.pointer_to()
        decl.embedded.append(ref)
        # An embedded field is also reachable by its type name.
        decl.fields[ref.name] = ref


class UsageCollector:
    """Resolves identifier uses in one file of a package.

    Local variables are bound in source order. Each block, ``if``, ``for``,
    ``switch`` and case clause gets a copy of the enclosing environment, so
    declarations inside it do not leak out. Selectors naming a field or method
    that a fully indexed type does not have are recorded in ``errors``.
    """

    def __init__(self, source_file: SourceFile, package: PackageDecls, lookup: PackageLookup) -> None:
        self.file = source_file
        self.package = package
        self._lookup = lookup
        self._types = _TypeReader(source_file, package.path)
        self.uses: Dict[Position, ResolvedSymbol] = {}
        self.errors: List[Diagnostic] = []

    # ------------------------------------------------------------------
    # Entry points

    def bind_package_vars(self) -> None:
        """Infer types of package-level variables declared without one."""
        for node in self.file.root.named_children:
            if node.type != "var_declaration":
                continue
            for spec in _descendants(node, "var_spec"):
                if spec.child_by_field_name("type") is not None:
                    continue
                names = [self.file.text(name) for name in spec.children_by_field_name("name")]
                inferred = self._assigned_types(len(names), spec.child_by_field_name("value"), {})
                for name, ref in zip(names, inferred):
                    if self.package.vars.get(name) is None:
                        self.package.vars[name] = ref

    def collect(self) -> Dict[Position, ResolvedSymbol]:
        for node in self.file.root.named_children:
            if node.type in {"function_declaration", "method_declaration"}:
                self._collect_function(node)
            elif node.type in {"var_declaration", "const_declaration"}:
                self._walk(node, {}, scope=self.package.scope)
        return self.uses

    def _collect_function(self, node: Node) -> None:
        env: Env = {}
        name_node = node.child_by_field_name("name")
        scope = f"func {self.file.text(name_node)}" if name_node is not None else "func"
        self._bind_parameters(node.child_by_field_name("receiver"), env)
        self._bind_parameters(node.child_by_field_name("parameters"), env)
        self._bind_parameters(node.child_by_field_name("result"), env)
        body = node.child_by_field_name("body")
        if body is not None:
            self._walk(body, env, scope=scope)

    # ------------------------------------------------------------------
    # Traversal

    def _walk(self, node: Node, env: Env, *, scope: str) -> None:
        kind = node.type
        if kind in _SCOPE_NODES:
            env = dict(env)
        if kind == "short_var_declaration":
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if right is not None:
                self._walk(right, env, scope=scope)
            if left is not None:
                names = [self.file.text(child) for child in left.named_children]
                for name, ref in zip(names, self._assigned_types(len(names), right, env)):
                    if name != "_":
                        env[name] = ref
            return
        if kind == "var_spec" and scope != self.package.scope:
            value = node.child_by_field_name("value")
            if value is not None:
                self._walk(value, env, scope=scope)
            names = [self.file.text(child) for child in node.children_by_field_name("name")]
            type_node = node.child_by_field_name("type")
            if type_node is not None:
                self._record_type_node(type_node)
                declared = self._types.type_ref(type_node)
                refs: List[Optional[TypeRef]] = [declared] * len(names)
            else:
                refs = self._assigned_types(len(names), value, env)
            for name, ref in zip(names, refs):
                env[name] = ref
            return
        if kind == "range_clause":
            right = node.child_by_field_name("right")
            if right is not None:
                self._walk(right, env, scope=scope)
            left = node.child_by_field_name("left")
            if left is not None:
                for child in left.named_children:
                    if child.type == "identifier":
                        env[self.file.text(child)] = None
            return
        if kind == "func_literal":
            env = dict(env)
            self._bind_parameters(node.child_by_field_name("parameters"), env)
            body = node.child_by_field_name("body")
            if body is not None:
                self._walk(body, env, scope=scope)
            return
        if kind == "selector_expression":
            self._record_selector(node, env)
            operand = node.child_by_field_name("operand")
            if operand is not None:
                self._walk(operand, env, scope=scope)
            return
        if kind == "call_expression":
            function = node.child_by_field_name("function")
            if function is not None and function.type == "identifier":
                self._record_call_identifier(function, env, scope=scope)
            elif function is not None:
                self._walk(function, env, scope=scope)
            for name in ("type_arguments", "arguments"):
                child = node.child_by_field_name(name)
                if child is not None:
                    self._walk(child, env, scope=scope)
            return
        if kind == "qualified_type":
            self._record_type_node(node)
            return
        for child in node.named_children:
            self._walk(child, env, scope=scope)

    def _bind_parameters(self, node: Optional[Node], env: Env) -> None:
        if node is None or node.type != "parameter_list":
            return
        for param in node.named_children:
            if param.type not in {"parameter_declaration", "variadic_parameter_declaration"}:
                continue
            type_node = param.child_by_field_name("type")
            ref = self._types.type_ref(type_node)
            if param.type == "variadic_parameter_declaration":
                ref = None
            for name_node in param.children_by_field_name("name"):
                env[self.file.text(name_node)] = ref
            if type_node is not None:
                self._record_type_node(type_node)

    # ------------------------------------------------------------------
    # Recording

    def _record_selector(self, node: Node, env: Env) -> None:
        operand = node.child_by_field_name("operand")
        field_node = node.child_by_field_name("field")
        if operand is None or field_node is None:
            return
        name = self.file.text(field_node)
        symbol = self._resolve_selector(operand, name, env)
        if symbol is not None:
            self.uses[self.file.position(field_node)] = symbol
            return
        if self._is_package_operand(operand, env):
            return
        operand_type = self._infer(operand, env)
        if operand_type is not None and self._lacks_member(operand_type, name):
            self.errors.append(
                Diagnostic(
                    message=(
                        f"{self.file.text(operand)}.{name} undefined "
                        f"(type {operand_type} has no field or method {name})"
                    ),
                    position=self.file.position(field_node),
                )
            )

    def _record_call_identifier(self, node: Node, env: Env, *, scope: str) -> None:
        name = self.file.text(node)
        symbol: Optional[ResolvedSymbol]
        if name in env:
            symbol = ResolvedSymbol(
                kind=SymbolKind.VARIABLE, name=name, package=self.package.ref, parent=scope, type=env[name]
            )
        elif name in self.package.funcs:
            symbol = ResolvedSymbol(
                kind=SymbolKind.FUNCTION,
                name=name,
                package=self.package.ref,
                parent=self.package.scope,
                signature=self.package.funcs[name],
            )
        elif name in self.package.types:
            symbol = ResolvedSymbol(
                kind=SymbolKind.TYPE, name=name, package=self.package.ref, type=TypeRef(name, self.package.path)
            )
        elif name in BUILTIN_FUNCS:
            symbol = ResolvedSymbol(kind=SymbolKind.OTHER, name=name)
        elif name in PREDECLARED_TYPES:
            symbol = ResolvedSymbol(kind=SymbolKind.TYPE, name=name, type=TypeRef(name))
        else:
            symbol = None
        if symbol is not None:
            self.uses[self.file.position(node)] = symbol

    def _record_type_node(self, node: Node) -> None:
        for qualified in _descendants(node, "qualified_type"):
            package_node = qualified.child_by_field_name("package")
            name_node = qualified.child_by_field_name("name")
            if package_node is None or name_node is None:
                continue
            import_path = self.file.imports.get(self.file.text(package_node))
            if import_path is None:
                continue
            symbol = self._package_member(import_path, self.file.text(name_node))
            self.uses[self.file.position(name_node)] = symbol

    # ------------------------------------------------------------------
    # Resolution

    def _is_package_operand(self, operand: Node, env: Env) -> bool:
        if operand.type != "identifier":
            return False
        ident = self.file.text(operand)
        return ident not in env and ident not in self.package.vars and ident in self.file.imports

    def _resolve_selector(self, operand: Node, name: str, env: Env) -> Optional[ResolvedSymbol]:
        if self._is_package_operand(operand, env):
            return self._package_member(self.file.imports[self.file.text(operand)], name)
        operand_type = self._infer(operand, env)
        if operand_type is None:
            return None
        return self._member(operand_type, name)

    def _package_member(self, import_path: str, name: str) -> ResolvedSymbol:
        decls = self._lookup(import_path)
        if decls is None:
            ref = PackageRef(path=import_path, name=default_package_name(import_path))
            return ResolvedSymbol(kind=SymbolKind.OTHER, name=name, package=ref)
        if name in decls.funcs:
            return ResolvedSymbol(
                kind=SymbolKind.FUNCTION,
                name=name,
                package=decls.ref,
                parent=decls.scope,
                signature=decls.funcs[name],
            )
        if name in decls.types:
            return ResolvedSymbol(
                kind=SymbolKind.TYPE, name=name, package=decls.ref, type=TypeRef(name, decls.path)
            )
        if name in decls.vars:
            return ResolvedSymbol(
                kind=SymbolKind.VARIABLE, name=name, package=decls.ref, parent=decls.scope, type=decls.vars[name]
            )
        if name in decls.consts:
            return ResolvedSymbol(kind=SymbolKind.CONSTANT, name=name, package=decls.ref, parent=decls.scope)
        return ResolvedSymbol(kind=SymbolKind.OTHER, name=name, package=decls.ref)

    def _member(
        self, ref: TypeRef, name: str, depth: int = 0, *, declared_methods: bool = True
    ) -> Optional[ResolvedSymbol]:
        if depth > _MAX_EMBED_DEPTH or not ref.named:
            return None
        if ref.package_path is None:
            if ref.name == "error" and name == "Error":
                return ResolvedSymbol(
                    kind=SymbolKind.FUNCTION, name=name, signature=Signature(results=(TypeRef("string"),))
                )
            return None

        decls = self._lookup(ref.package_path)
        if decls is None:
            return None
        if declared_methods:
            signature = decls.methods.get(ref.name, {}).get(name)
            if signature is not None:
                return ResolvedSymbol(kind=SymbolKind.FUNCTION, name=name, package=decls.ref, signature=signature)

        decl = decls.types.get(ref.name)
        if decl is None:
            return None
        if decl.alias_of is not None:
            return self._member(decl.alias_of, name, depth + 1)
        if name in decl.methods:
            return ResolvedSymbol(
                kind=SymbolKind.FUNCTION, name=name, package=decls.ref, signature=decl.methods[name]
            )
        if name in decl.fields:
            return ResolvedSymbol(kind=SymbolKind.VARIABLE, name=name, package=decls.ref, type=decl.fields[name])
        for embedded in decl.embedded:
            found = self._member(embedded.dereference(), name, depth + 1)
            if found is not None:
                return found
        if decl.underlying is not None:
            return self._member(decl.underlying, name, depth + 1, declared_methods=False)
        return None

    def _lacks_member(
        self, ref: TypeRef, name: str, depth: int = 0, *, declared_methods: bool = True
    ) -> bool:
        """True only when every type reachable from ``ref`` is indexed and none has ``name``.

        Anything unresolved (missing package, unknown type, type parameters,
        unnamed types) makes the answer False.
        """
        if depth > _MAX_EMBED_DEPTH or not ref.named or ref.package_path is None:
            return False
        decls = self._lookup(ref.package_path)
        if decls is None:
            return False
        if declared_methods and name in decls.methods.get(ref.name, {}):
            return False
        decl = decls.types.get(ref.name)
        if decl is None:
            return False
        if decl.alias_of is not None:
            return self._lacks_member(decl.alias_of, name, depth + 1)
        if name in decl.methods or name in decl.fields:
            return False
        for embedded in decl.embedded:
            if not self._lacks_member(embedded.dereference(), name, depth + 1):
                return False
        if decl.underlying is not None:
            return self._lacks_member(decl.underlying, name, depth + 1, declared_methods=False)
        return True

    def _infer(self, node: Node, env: Env) -> Optional[TypeRef]:
        kind = node.type
        if kind == "identifier":
            name = self.file.text(node)
            if name in env:
                return env[name]
            return self.package.vars.get(name)
        if kind == "parenthesized_expression":
            inner = _first_named(node)
            return self._infer(inner, env) if inner is not None else None
        if kind == "unary_expression":
            operand = node.child_by_field_name("operand")
            inner = self._infer(operand, env) if operand is not None else None
            if inner is None:
                return None
            operator = self.file.text(node.children[0])
            if operator == "&":
                return inner.pointer_to()
            if operator == "*":
                return inner.dereference()
            return inner
        if kind == "composite_literal":
            return self._types.type_ref(node.child_by_field_name("type"))
        if kind == "call_expression":
            results = self._call_results(node, env)
            return results[0] if results else None
        if kind == "selector_expression":
            operand = node.child_by_field_name("operand")
            field_node = node.child_by_field_name("field")
            if operand is None or field_node is None:
                return None
            symbol = self._resolve_selector(operand, self.file.text(field_node), env)
            if symbol is not None and symbol.kind is SymbolKind.VARIABLE:
                return symbol.type
            return None
        if kind == "type_assertion_expression":
            return self._types.type_ref(node.child_by_field_name("type"))
        return None

    def _call_results(self, node: Node, env: Env) -> Tuple[TypeRef, ...]:
        function = node.child_by_field_name("function")
        while function is not None and function.type == "parenthesized_expression":
            function = _first_named(function)
        if function is None:
            return ()
        if function.type == "identifier":
            name = self.file.text(function)
            if name == "new":
                arguments = node.child_by_field_name("arguments")
                target = self._type_from_expression(_first_named(arguments)) if arguments is not None else None
                return (target.pointer_to(),) if target is not None else ()
            if name in env:
                return ()
            if name in self.package.funcs:
                return self.package.funcs[name].results
            if name in self.package.types or name in PREDECLARED_TYPES:
                return (self._types.named(name),)
            return ()
        if function.type == "selector_expression":
            operand = function.child_by_field_name("operand")
            field_node = function.child_by_field_name("field")
            if operand is None or field_node is None:
                return ()
            symbol = self._resolve_selector(operand, self.file.text(field_node), env)
            if symbol is None:
                return ()
            if symbol.kind is SymbolKind.FUNCTION and symbol.signature is not None:
                return symbol.signature.results
            if symbol.kind is SymbolKind.TYPE and symbol.type is not None:
                return (symbol.type,)
        return ()

    def _type_from_expression(self, node: Optional[Node]) -> Optional[TypeRef]:
        if node is None:
            return None
        if node.type == "identifier":
            return self._types.named(self.file.text(node))
        if node.type == "selector_expression":
            operand = node.child_by_field_name("operand")
            field_node = node.child_by_field_name("field")
            if operand is not None and field_node is not None and operand.type == "identifier":
                import_path = self.file.imports.get(self.file.text(operand))
                if import_path is not None:
                    return TypeRef(name=self.file.text(field_node), package_path=import_path)
            return None
        return self._types.type_ref(node)

    def _assigned_types(self, count: int, values: Optional[Node], env: Env) -> List[Optional[TypeRef]]:
        if values is None:
            return [None] * count
        expressions = values.named_children if values.type == "expression_list" else [values]
        if count > 1 and len(expressions) == 1:
            single = expressions[0]
            if single.type == "call_expression":
                results = self._call_results(single, env)
                return [results[index] if index < len(results) else None for index in range(count)]
            # Comma-ok forms: v, ok := m[k] / x.(T) / <-ch
            return [self._infer(single, env)] + [None] * (count - 1)
        inferred: List[Optional[TypeRef]] = [self._infer(expression, env) for expression in expressions]
        return (inferred + [None] * count)[:count]


# ----------------------------------------------------------------------
# Helpers


def _decode(source: bytes, node: Node) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def _first_named(node: Node) -> Optional[Node]:
    children = node.named_children
    return children[0] if children else None


def _descendants(node: Node, kind: str) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == kind:
            yield current
            continue
        stack.extend(reversed(current.named_children))


def _add_import(spec: Node, source: bytes, imports: Dict[str, str]) -> None:
    path_node = spec.child_by_field_name("path")
    if path_node is None:
        return
    import_path = _decode(source, path_node).strip('"`')
    name_node = spec.child_by_field_name("name")
    if name_node is None:
        imports[default_package_name(import_path)] = import_path
        return
    alias = _decode(source, name_node)
    if alias in {"_", "."}:
        return
    imports[alias] = import_path


def _receiver_type_name(node: Node, source_file: SourceFile) -> Optional[str]:
    receiver = node.child_by_field_name("receiver")
    if receiver is None:
        return None
    for param in receiver.named_children:
        if param.type != "parameter_declaration":
            continue
        type_node = param.child_by_field_name("type")
        while type_node is not None and type_node.type in {"pointer_type", "parenthesized_type"}:
            type_node = _first_named(type_node)
        if type_node is not None and type_node.type == "generic_type":
            type_node = type_node.child_by_field_name("type")
        if type_node is not None and type_node.type == "type_identifier":
            return source_file.text(type_node)
    return None


def _literal_type(spec: Node, types: _TypeReader) -> Optional[TypeRef]:
    value = spec.child_by_field_name("value")
    if value is None:
        return None
    expressions = value.named_children if value.type == "expression_list" else [value]
    if len(expressions) != 1:
        return None
    expression = expressions[0]
    pointer = False
    if expression.type == "unary_expression" and types.file.text(expression.children[0]) == "&":
        pointer = True
        operand = expression.child_by_field_name("operand")
        if operand is None:
            return None
        expression = operand
    if expression.type != "composite_literal":
        return None
    ref = types.type_ref(expression.child_by_field_name("type"))
    if ref is None:
        return None
    return ref.pointer_to() if pointer else ref


__all__ = [
    "BUILTIN_FUNCS",
    "GO_LANGUAGE",
    "GoParser",
    "PREDECLARED_TYPES",
    "PackageDecls",
    "SourceFile",
    "TypeDecl",
    "UsageCollector",
]
