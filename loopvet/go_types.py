"""Name and type resolution for a single Go compilation unit.

The resolver walks one tree-sitter Go tree, builds lexical scopes, and
records which declaration every identifier occurrence refers to. Bindings
are ``Declaration`` objects compared by identity, so shadowed names never
alias each other. Types are tracked only as far as named types go
(``TypeRef``), which is enough to recognise method calls on well-known
library types:

    var g errgroup.Group          -> g : errgroup.Group
    t *testing.T                  -> t : *testing.T
    g, ctx := errgroup.WithContext(ctx)

Anything the resolver cannot work out is left unresolved; consumers treat
a missing binding or type as "does not match".
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from loopvet.ast_extractors.go_impl import (
    _find_children_by_type,
    _get_node_text,
    _has_token,
    call_arguments,
    call_function,
    expression_list_items,
    extract_go_imports,
    extract_go_package,
)
from loopvet.ast_extractors.go_impl import field as child_field
from loopvet.ast_extractors.go_impl import fields as child_fields
from loopvet.ast_extractors.go_impl import named_children, unparen

BUILTIN_TYPES = frozenset([
    "any", "bool", "byte", "comparable", "complex64", "complex128", "error",
    "float32", "float64", "int", "int8", "int16", "int32", "int64", "rune",
    "string", "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
])

SEQUENCE_TYPES = frozenset(["slice_type", "array_type", "implicit_length_array_type"])


class DeclKind(Enum):
    """What a declaration introduces."""

    VAR = "var"
    CONST = "const"
    TYPE = "type"
    FUNC = "func"
    PACKAGE = "package"


@dataclass(frozen=True)
class TypeRef:
    """A named type, optionally behind one pointer."""

    pkg_path: str | None
    name: str
    pointer: bool = False

    def elem(self) -> "TypeRef":
        """The type with one level of pointer indirection removed."""
        if not self.pointer:
            return self
        return TypeRef(self.pkg_path, self.name)

    def pointer_to(self) -> "TypeRef | None":
        """Pointer to this type; None for pointers to pointers."""
        if self.pointer:
            return None
        return TypeRef(self.pkg_path, self.name, True)

    def __str__(self) -> str:
        qualified = f"{self.pkg_path}.{self.name}" if self.pkg_path else self.name
        return f"*{qualified}" if self.pointer else qualified


@dataclass(eq=False)
class Declaration:
    """One declared entity. Equality is identity."""

    name: str
    kind: DeclKind
    node: Any
    type: TypeRef | None = None
    package_path: str | None = None
    result_types: tuple = ()


@dataclass(frozen=True)
class Callee:
    """Statically resolved target of a call."""

    name: str
    recv: TypeRef | None
    pkg_path: str | None


@dataclass
class LocalType:
    """A type declared in the analyzed file."""

    name: str
    is_interface: bool = False
    underlying: Any = None
    alias_of: TypeRef | None = None
    field_types: dict[str, TypeRef | None] = field(default_factory=dict)
    embedded: list[TypeRef] = field(default_factory=list)
    methods: set[str] = field(default_factory=set)
    method_results: dict[str, tuple] = field(default_factory=dict)


# Result types of library functions the resolver knows about.
KNOWN_RESULTS: dict[tuple[str, str], tuple] = {
    ("golang.org/x/sync/errgroup", "WithContext"): (
        TypeRef("golang.org/x/sync/errgroup", "Group", True),
        TypeRef("context", "Context"),
    ),
}


def _key(node: Any) -> tuple[int, int]:
    return (node.start_byte, node.end_byte)


def _same(a: Any, b: Any) -> bool:
    return a is not None and b is not None and a.type == b.type and _key(a) == _key(b)


class TypesInfo:
    """Resolution results for one compilation unit."""

    def __init__(self, package_path: str):
        self.package_path = package_path
        self.defs: dict[tuple[int, int], Declaration] = {}
        self.uses: dict[tuple[int, int], Declaration] = {}
        self.imports: dict[str, Declaration] = {}
        self.local_types: dict[str, LocalType] = {}

    def object_of(self, ident: Any) -> Declaration | None:
        """Declaration an identifier defines or refers to."""
        if ident is None or ident.type != "identifier":
            return None
        k = _key(ident)
        return self.defs.get(k) or self.uses.get(k)

    def is_variable(self, ident: Any) -> bool:
        """Whether an identifier defines or refers to a variable."""
        decl = self.object_of(ident)
        return decl is not None and decl.kind is DeclKind.VAR

    def type_ref(self, node: Any) -> TypeRef | None:
        """Named type denoted by a type node (or a type used as an expression)."""
        if node is None:
            return None
        node = unparen(node)
        kind = node.type

        if kind in ("parenthesized_type", "generic_type"):
            inner = child_field(node, "type") or (named_children(node) or [None])[0]
            return self.type_ref(inner)

        if kind == "pointer_type":
            inner = named_children(node)
            base = self.type_ref(inner[0]) if inner else None
            return base.pointer_to() if base else None

        if kind == "type_identifier":
            return self._named(_get_node_text(node))

        if kind == "identifier":
            decl = self.object_of(node)
            name = _get_node_text(node)
            if decl is not None and decl.kind is DeclKind.TYPE:
                return self._named(name)
            if decl is None and name in BUILTIN_TYPES:
                return TypeRef(None, name)
            return None

        if kind == "qualified_type":
            pkg = self.imports.get(_get_node_text(child_field(node, "package")))
            name = child_field(node, "name")
            if pkg is None or name is None:
                return None
            return TypeRef(pkg.package_path, _get_node_text(name))

        if kind == "selector_expression":
            operand = unparen(child_field(node, "operand"))
            decl = self.object_of(operand)
            if decl is None or decl.kind is not DeclKind.PACKAGE:
                return None
            return TypeRef(decl.package_path, _get_node_text(child_field(node, "field")))

        return None

    def _named(self, name: str) -> TypeRef:
        local = self.local_types.get(name)
        if local is not None:
            return local.alias_of or TypeRef(self.package_path, name)
        if name in BUILTIN_TYPES:
            return TypeRef(None, name)
        # Declared in another file of the same package.
        return TypeRef(self.package_path, name)

    def type_of(self, expr: Any) -> TypeRef | None:
        """Named type of an expression, when it can be read off the syntax."""
        if expr is None:
            return None
        expr = unparen(expr)
        kind = expr.type

        if kind == "identifier":
            decl = self.object_of(expr)
            if decl is not None and decl.kind in (DeclKind.VAR, DeclKind.CONST):
                return decl.type
            return None

        if kind == "composite_literal":
            return self.type_ref(child_field(expr, "type"))

        if kind == "unary_expression":
            operator = _get_node_text(child_field(expr, "operator"))
            inner = self.type_of(child_field(expr, "operand"))
            if inner is None:
                return None
            if operator == "&":
                return inner.pointer_to()
            if operator == "*":
                return inner.elem() if inner.pointer else None
            return None

        if kind == "call_expression":
            results = self.call_results(expr)
            return results[0] if len(results) == 1 else None

        if kind == "selector_expression":
            base = self.type_of(child_field(expr, "operand"))
            if base is None:
                return None
            local = self._local(base)
            if local is None:
                return None
            return local.field_types.get(_get_node_text(child_field(expr, "field")))

        return None

    def call_results(self, call: Any) -> tuple:
        """Result types of a call, one entry per result (entries may be None)."""
        fn = unparen(call_function(call))
        if fn is None:
            return ()

        if fn.type == "identifier":
            decl = self.object_of(fn)
            if decl is None and _get_node_text(fn) == "new":
                args = call_arguments(call)
                ref = self.type_ref(args[0]) if len(args) == 1 else None
                return (ref.pointer_to(),) if ref else ()
            if decl is not None and decl.kind is DeclKind.FUNC:
                return decl.result_types
            if decl is not None and decl.kind is DeclKind.TYPE:
                return (self.type_ref(fn),)
            return ()

        if fn.type == "selector_expression":
            operand = unparen(child_field(fn, "operand"))
            name = _get_node_text(child_field(fn, "field"))
            decl = self.object_of(operand)
            if decl is not None and decl.kind is DeclKind.PACKAGE:
                return KNOWN_RESULTS.get((decl.package_path, name), ())
            callee = self.static_callee(call)
            if callee is not None and callee.recv is not None:
                local = self._local(callee.recv)
                if local is not None:
                    return local.method_results.get(name, ())
            return ()

        if fn.type in ("qualified_type", "type_identifier", "pointer_type", "parenthesized_type"):
            return (self.type_ref(fn),)

        return ()

    def static_callee(self, call: Any) -> Callee | None:
        """Function or method a call statically invokes; None when dynamic or unknown."""
        if call is None or call.type != "call_expression":
            return None
        fn = unparen(call_function(call))
        if fn is None:
            return None

        if fn.type == "identifier":
            decl = self.object_of(fn)
            if decl is not None and decl.kind is DeclKind.FUNC:
                return Callee(decl.name, None, self.package_path)
            return None

        if fn.type != "selector_expression":
            return None

        operand = unparen(child_field(fn, "operand"))
        name = _get_node_text(child_field(fn, "field"))

        decl = self.object_of(operand)
        if decl is not None and decl.kind is DeclKind.PACKAGE:
            return Callee(name, None, decl.package_path)

        recv = self.type_of(operand)
        if recv is None:
            return None
        base = recv.elem()
        if base.pkg_path is None:
            return None

        local = self._local(base)
        if local is not None:
            if local.is_interface:
                return None
            if name not in local.methods:
                if name in local.field_types:
                    return None
                promoted = self._promoted_receiver(local, name)
                if promoted is not None:
                    return Callee(name, promoted, promoted.pkg_path)

        return Callee(name, recv, base.pkg_path)

    def _promoted_receiver(self, local: LocalType, method: str) -> TypeRef | None:
        """Embedded type a method is promoted from, one level deep.

        Method sets of imported types are unknown; a single imported
        embedded type is taken to provide the method.
        """
        imported = []
        for embedded in local.embedded:
            inner = self._local(embedded)
            if inner is not None:
                if method in inner.methods:
                    return embedded
            elif embedded.pkg_path is not None:
                imported.append(embedded)
        return imported[0] if len(imported) == 1 else None

    def _local(self, ref: TypeRef) -> LocalType | None:
        base = ref.elem()
        if base.pkg_path != self.package_path:
            return None
        return self.local_types.get(base.name)


class _Resolver:
    """Scope-building walk that fills a TypesInfo."""

    def __init__(self, info: TypesInfo):
        self.info = info
        self.scopes: list[dict[str, Declaration]] = []
        self._handlers = {
            "identifier": self._visit_identifier,
            "block": self._visit_scoped,
            "if_statement": self._visit_scoped,
            "expression_switch_statement": self._visit_scoped,
            "select_statement": self._visit_scoped,
            "expression_case": self._visit_scoped,
            "default_case": self._visit_scoped,
            "for_statement": self._visit_scoped,
            "range_clause": self._visit_range_clause,
            "type_switch_statement": self._visit_type_switch,
            "communication_case": self._visit_communication_case,
            "func_literal": self._visit_function,
            "function_declaration": self._visit_function,
            "method_declaration": self._visit_function,
            "function_type": self._visit_signature,
            "method_elem": self._visit_signature,
            "method_spec": self._visit_signature,
            "short_var_declaration": self._visit_short_var,
            "var_declaration": self._visit_value_declaration,
            "const_declaration": self._visit_value_declaration,
            "type_declaration": self._visit_type_declaration,
            "composite_literal": self._visit_composite_literal,
        }

    # -- scopes -------------------------------------------------------------

    @contextmanager
    def _scope(self) -> Iterator[None]:
        self.scopes.append({})
        try:
            yield
        finally:
            self.scopes.pop()

    def _lookup(self, name: str) -> Declaration | None:
        for scope in reversed(self.scopes):
            decl = scope.get(name)
            if decl is not None:
                return decl
        return None

    def _declare(self, ident: Any, kind: DeclKind, type_ref: TypeRef | None = None) -> Declaration | None:
        name = _get_node_text(ident)
        if name == "_":
            return None
        decl = Declaration(name, kind, ident, type_ref)
        self.scopes[-1][name] = decl
        self.info.defs[_key(ident)] = decl
        return decl

    def _redeclare(self, ident: Any, type_ref: TypeRef | None) -> Declaration | None:
        """Bind the left side of ':='; names already in this scope are reused."""
        existing = self.scopes[-1].get(_get_node_text(ident))
        if existing is not None and existing.kind is DeclKind.VAR:
            self.info.uses[_key(ident)] = existing
            return existing
        return self._declare(ident, DeclKind.VAR, type_ref)

    # -- entry point --------------------------------------------------------

    def resolve(self, root: Any) -> None:
        with self._scope():
            self._collect_imports(root)
            self._collect_types(root)
            self._collect_values(root)
            for child in named_children(root):
                if child.type in ("package_clause", "import_declaration", "type_declaration"):
                    continue
                if child.type in ("var_declaration", "const_declaration"):
                    self._visit_value_declaration(child, predeclared=True)
                else:
                    self.visit(child)

    def visit(self, node: Any) -> None:
        """Pre-order walk; nodes with a handler are handed off whole.

        Plain nodes are walked with an explicit stack, so expression depth
        (long operator chains in generated code) never grows the call stack.
        """
        stack = [node]
        while stack:
            current = stack.pop()
            if current is None:
                continue
            handler = self._handlers.get(current.type)
            if handler is not None:
                handler(current)
                continue
            stack.extend(reversed(current.children))

    def _visit_children(self, node: Any, skip: Any = None) -> None:
        for child in node.children:
            if skip is not None and _same(child, skip):
                continue
            self.visit(child)

    # -- file-level collection ----------------------------------------------

    def _collect_imports(self, root: Any) -> None:
        for imp in extract_go_imports(_TreeView(root), ""):
            if imp["is_dot_import"] or imp["is_blank_import"] or not imp["name"]:
                continue
            decl = Declaration(imp["name"], DeclKind.PACKAGE, imp["node"], package_path=imp["path"])
            self.scopes[-1][imp["name"]] = decl
            self.info.imports[imp["name"]] = decl

    def _collect_types(self, root: Any) -> None:
        specs = []
        for decl in _find_children_by_type(root, "type_declaration"):
            specs.extend(self._register_type_specs(decl))
        # Field and alias types may refer to types declared later in the file.
        for spec, local in specs:
            self._fill_local_type(spec, local)

        for method in _find_children_by_type(root, "method_declaration"):
            recv_type = self._receiver_type_name(child_field(method, "receiver"))
            local = self.info.local_types.get(recv_type) if recv_type else None
            if local is None:
                continue
            name = _get_node_text(child_field(method, "name"))
            local.methods.add(name)
            local.method_results[name] = self._result_types(child_field(method, "result"))

    def _register_type_specs(self, type_decl: Any) -> list[tuple[Any, LocalType]]:
        registered = []
        for spec in named_children(type_decl):
            if spec.type not in ("type_spec", "type_alias"):
                continue
            name_node = child_field(spec, "name")
            if name_node is None:
                continue
            name = _get_node_text(name_node)
            local = LocalType(name)
            self.info.local_types[name] = local
            decl = Declaration(name, DeclKind.TYPE, name_node)
            self.scopes[-1][name] = decl
            registered.append((spec, local))
        return registered

    def _fill_local_type(self, spec: Any, local: LocalType) -> None:
        type_node = child_field(spec, "type")
        if type_node is None:
            return
        local.underlying = type_node
        if spec.type == "type_alias":
            local.alias_of = self.info.type_ref(type_node)
            return
        if type_node.type == "interface_type":
            local.is_interface = True
        elif type_node.type == "struct_type":
            for field_list in _find_children_by_type(type_node, "field_declaration_list"):
                for field_decl in _find_children_by_type(field_list, "field_declaration"):
                    self._add_field(local, field_decl)

    def _add_field(self, local: LocalType, field_decl: Any) -> None:
        type_node = child_field(field_decl, "type")
        field_type = self.info.type_ref(type_node)
        names = child_fields(field_decl, "name")
        for name in names:
            local.field_types[_get_node_text(name)] = field_type
        if names or field_type is None:
            return

        # Embedded field: named after its type, methods promoted.
        if _has_token(field_decl, "*"):
            field_type = field_type.pointer_to() or field_type
        local.field_types[field_type.name] = field_type
        local.embedded.append(field_type)

    def _receiver_type_name(self, receiver: Any) -> str | None:
        for param in named_children(receiver):
            type_node = child_field(param, "type")
            while type_node is not None and type_node.type in ("pointer_type", "parenthesized_type"):
                inner = named_children(type_node)
                type_node = inner[0] if inner else None
            if type_node is not None and type_node.type == "generic_type":
                type_node = child_field(type_node, "type")
            if type_node is not None and type_node.type == "type_identifier":
                return _get_node_text(type_node)
        return None

    def _result_types(self, result: Any) -> tuple:
        if result is None:
            return ()
        if result.type != "parameter_list":
            return (self.info.type_ref(result),)
        types = []
        for param in named_children(result):
            ref = self.info.type_ref(child_field(param, "type"))
            types.extend([ref] * max(1, len(child_fields(param, "name"))))
        return tuple(types)

    def _collect_values(self, root: Any) -> None:
        for child in named_children(root):
            if child.type == "function_declaration":
                name_node = child_field(child, "name")
                if name_node is None:
                    continue
                decl = self._declare(name_node, DeclKind.FUNC)
                if decl is not None:
                    decl.result_types = self._result_types(child_field(child, "result"))
            elif child.type in ("var_declaration", "const_declaration"):
                kind = DeclKind.VAR if child.type == "var_declaration" else DeclKind.CONST
                for spec in _value_specs(child):
                    explicit = self.info.type_ref(child_field(spec, "type"))
                    for name in child_fields(spec, "name"):
                        self._declare(name, kind, explicit)

    # -- declarations ---------------------------------------------------------

    def _visit_identifier(self, node: Any) -> None:
        decl = self._lookup(_get_node_text(node))
        if decl is not None:
            self.info.uses[_key(node)] = decl

    def _visit_scoped(self, node: Any) -> None:
        with self._scope():
            self._visit_children(node)

    def _visit_function(self, node: Any) -> None:
        body = child_field(node, "body")
        with self._scope():
            self._declare_signature(node)
            if body is not None:
                # Parameters and the outermost body block share one scope.
                self._visit_children(body)

    def _visit_signature(self, node: Any) -> None:
        """Function types and interface methods: names are declared, never used."""
        with self._scope():
            self._declare_signature(node)

    def _declare_signature(self, node: Any) -> None:
        for part in ("receiver", "parameters", "result"):
            params = child_field(node, part)
            if params is not None and params.type == "parameter_list":
                self._declare_params(params)
            elif params is not None:
                self.visit(params)

    def _declare_params(self, params: Any) -> None:
        for param in named_children(params):
            type_node = child_field(param, "type")
            self.visit(type_node)
            ref = None
            if param.type == "parameter_declaration":
                ref = self.info.type_ref(type_node)
            for name in child_fields(param, "name"):
                self._declare(name, DeclKind.VAR, ref)

    def _visit_short_var(self, node: Any) -> None:
        left = expression_list_items(child_field(node, "left"))
        right = expression_list_items(child_field(node, "right"))
        for expr in right:
            self.visit(expr)
        types = self._assigned_types(len(left), None, right)
        for target, type_ref in zip(left, types):
            if target.type == "identifier":
                self._redeclare(target, type_ref)
            else:
                self.visit(target)

    def _visit_value_declaration(self, node: Any, predeclared: bool = False) -> None:
        kind = DeclKind.VAR if node.type == "var_declaration" else DeclKind.CONST
        for spec in _value_specs(node):
            type_node = child_field(spec, "type")
            values = expression_list_items(child_field(spec, "value"))
            self.visit(type_node)
            for expr in values:
                self.visit(expr)
            names = child_fields(spec, "name")
            types = self._assigned_types(len(names), type_node, values)
            for name, type_ref in zip(names, types):
                if predeclared:
                    decl = self.info.defs.get(_key(name))
                    if decl is not None and decl.type is None:
                        decl.type = type_ref
                else:
                    self._declare(name, kind, type_ref)

    def _assigned_types(self, count: int, type_node: Any, values: list[Any]) -> list[TypeRef | None]:
        explicit = self.info.type_ref(type_node) if type_node is not None else None
        if explicit is not None:
            return [explicit] * count
        if len(values) == count:
            return [self.info.type_of(v) for v in values]
        if len(values) == 1 and unparen(values[0]).type == "call_expression":
            results = self.info.call_results(unparen(values[0]))
            if len(results) == count:
                return list(results)
        return [None] * count

    def _visit_type_declaration(self, node: Any) -> None:
        for spec, local in self._register_type_specs(node):
            self._fill_local_type(spec, local)

    def _visit_range_clause(self, node: Any) -> None:
        left = child_field(node, "left")
        self.visit(child_field(node, "right"))
        if left is None:
            return
        if _has_token(node, ":="):
            for target in expression_list_items(left):
                if target.type == "identifier":
                    self._declare(target, DeclKind.VAR)
                else:
                    self.visit(target)
        else:
            self.visit(left)

    def _visit_type_switch(self, node: Any) -> None:
        alias = child_field(node, "alias")
        alias_names = [a for a in expression_list_items(alias) if a.type == "identifier"]
        with self._scope():
            for child in named_children(node):
                if _same(child, alias):
                    continue
                if child.type in ("type_case", "default_case"):
                    with self._scope():
                        for name in alias_names:
                            # One implicit variable per clause.
                            decl = Declaration(_get_node_text(name), DeclKind.VAR, name)
                            self.scopes[-1][decl.name] = decl
                        self._visit_children(child)
                else:
                    self.visit(child)

    def _visit_communication_case(self, node: Any) -> None:
        comm = child_field(node, "communication")
        with self._scope():
            if comm is not None and comm.type == "receive_statement" and _has_token(comm, ":="):
                self.visit(child_field(comm, "right"))
                for target in expression_list_items(child_field(comm, "left")):
                    if target.type == "identifier":
                        self._declare(target, DeclKind.VAR)
            else:
                self.visit(comm)
            self._visit_children(node, skip=comm)

    def _visit_composite_literal(self, node: Any) -> None:
        type_node = child_field(node, "type")
        self.visit(type_node)
        self._visit_literal_value(child_field(node, "body"), type_node)

    def _literal_type(self, type_node: Any) -> Any:
        """Type node that shapes a literal: local names and pointers unwrapped."""
        for _ in range(8):
            if type_node is None:
                return None
            if type_node.type == "pointer_type":
                inner = named_children(type_node)
                type_node = inner[0] if inner else None
            elif type_node.type == "type_identifier":
                local = self.info.local_types.get(_get_node_text(type_node))
                if local is None or local.underlying is None:
                    return type_node
                type_node = local.underlying
            else:
                return type_node
        return type_node

    def _visit_literal_value(self, literal: Any, type_node: Any) -> None:
        """Visit the elements of a literal of type ``type_node`` (None if unknown).

        Elements whose type is elided (``[]T{{...}}``) take the element type
        of the enclosing literal.
        """
        shape = self._literal_type(type_node)
        kind = shape.type if shape is not None else None
        # Bare identifier keys name struct fields; map, slice and array keys are values.
        keys_are_values = kind in SEQUENCE_TYPES or kind == "map_type"
        key_type = child_field(shape, "key") if kind == "map_type" else None
        elem_type = None
        if kind == "map_type":
            elem_type = child_field(shape, "value")
        elif kind in SEQUENCE_TYPES:
            elem_type = child_field(shape, "element")

        for element in named_children(literal):
            if element.type != "keyed_element":
                self._visit_element(element, elem_type)
                continue
            parts = named_children(element)
            if len(parts) < 2:
                self._visit_children(element)
                continue
            key = _element_inner(parts[0])
            if keys_are_values or key.type not in ("identifier", "field_identifier"):
                self._visit_element(parts[0], key_type)
            self._visit_element(parts[-1], elem_type)

    def _visit_element(self, element: Any, type_node: Any) -> None:
        inner = _element_inner(element)
        if inner.type == "literal_value":
            self._visit_literal_value(inner, type_node)
        else:
            self.visit(inner)


class _TreeView:
    """Minimal tree facade over a root node for the extractor helpers."""

    def __init__(self, root: Any):
        self.root_node = root


def _element_inner(element: Any) -> Any:
    if element.type == "literal_element":
        inner = named_children(element)
        if inner:
            return inner[0]
    return element


def _value_specs(declaration: Any) -> list[Any]:
    """var_spec / const_spec nodes of a declaration, grouped or not."""
    specs = []
    for child in named_children(declaration):
        if child.type in ("var_spec", "const_spec"):
            specs.append(child)
        elif child.type in ("var_spec_list", "const_spec_list"):
            specs.extend(c for c in named_children(child) if c.type in ("var_spec", "const_spec"))
    return specs


def resolve_unit(tree: Any, package_path: str | None = None) -> TypesInfo:
    """Resolve every identifier of a Go tree.

    Args:
        tree: tree-sitter Tree (or its root node).
        package_path: import path of the unit's package; defaults to the
            package clause name.
    """
    root = tree.root_node if hasattr(tree, "root_node") else tree
    if package_path is None:
        package = extract_go_package(_TreeView(root), "")
        package_path = package["name"] if package else ""

    resolver = _Resolver(TypesInfo(package_path))
    resolver.resolve(root)
    return resolver.info
