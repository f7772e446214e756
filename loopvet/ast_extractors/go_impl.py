"""Go AST helpers and extraction using tree-sitter."""

import re
from typing import Any

_VERSION_SUFFIX = re.compile(r"^v[0-9]+$")
_GOPKG_SUFFIX = re.compile(r"\.v[0-9]+$")


def _get_node_text(node: Any) -> str:
    """Extract text from a tree-sitter node."""
    if node is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def _find_child_by_type(node: Any, child_type: str) -> Any | None:
    """Find first child of given type."""
    if node is None:
        return None
    for child in node.children:
        if child.type == child_type:
            return child
    return None


def _find_children_by_type(node: Any, child_type: str) -> list[Any]:
    """Find all children of given type."""
    if node is None:
        return []
    return [child for child in node.children if child.type == child_type]


def _has_token(node: Any, token: str) -> bool:
    """Check whether an anonymous token (e.g. ':=') is a direct child."""
    return any(not child.is_named and child.type == token for child in node.children)


def named_children(node: Any) -> list[Any]:
    """Named children of a node, comments excluded."""
    if node is None:
        return []
    return [child for child in node.named_children if child.type != "comment"]


def field(node: Any, name: str) -> Any | None:
    """Child stored under a grammar field name."""
    if node is None:
        return None
    return node.child_by_field_name(name)


def fields(node: Any, name: str) -> list[Any]:
    """All children stored under a grammar field name, comments excluded."""
    if node is None:
        return []
    return [child for child in node.children_by_field_name(name) if child.type != "comment"]


def unparen(node: Any) -> Any:
    """Strip any number of enclosing parenthesized_expression wrappers."""
    while node is not None and node.type == "parenthesized_expression":
        inner = named_children(node)
        if not inner:
            return node
        node = inner[0]
    return node


def expression_list_items(node: Any) -> list[Any]:
    """Expressions of an expression_list (or the node itself if it is a single expression)."""
    if node is None:
        return []
    if node.type == "expression_list":
        return named_children(node)
    return [node]


def block_statements(block: Any) -> list[Any]:
    """Statements of a block in source order.

    Newer grammars wrap the statements in a statement_list node; older ones
    place them directly under the block. Comments are never statements.
    """
    statements = []
    for child in named_children(block):
        if child.type == "statement_list":
            statements.extend(named_children(child))
        else:
            statements.append(child)
    return statements


def call_arguments(call: Any) -> list[Any]:
    """Argument expressions of a call_expression."""
    return named_children(field(call, "arguments"))


def call_function(call: Any) -> Any | None:
    """Function operand of a call_expression."""
    return field(call, "function")


def dispatched_call(statement: Any) -> Any | None:
    """The call of a go_statement or defer_statement."""
    children = named_children(statement)
    if not children:
        return None
    expr = unparen(children[0])
    return expr if expr.type == "call_expression" else None


def default_import_name(path: str) -> str:
    """Package name an import is bound to when no alias is given.

    Major-version suffixes are skipped ("github.com/x/y/v2" binds "y") and
    gopkg.in style suffixes are dropped ("gopkg.in/yaml.v3" binds "yaml").
    """
    parts = [p for p in path.split("/") if p]
    if not parts:
        return ""
    name = parts[-1]
    if _VERSION_SUFFIX.match(name) and len(parts) > 1:
        name = parts[-2]
    name = _GOPKG_SUFFIX.sub("", name)
    return name.replace("-", "_")


def extract_go_package(tree: Any, file_path: str) -> dict | None:
    """Extract package declaration from a Go file."""
    root = tree.root_node
    pkg_clause = _find_child_by_type(root, "package_clause")
    if not pkg_clause:
        return None

    pkg_id = _find_child_by_type(pkg_clause, "package_identifier")
    if not pkg_id:
        return None

    return {
        "file_path": file_path,
        "line": pkg_clause.start_point[0] + 1,
        "name": _get_node_text(pkg_id),
    }


def extract_go_imports(tree: Any, file_path: str) -> list[dict]:
    """Extract import declarations from a Go file."""
    root = tree.root_node
    imports = []

    for import_decl in _find_children_by_type(root, "import_declaration"):
        # Single import: import "fmt"
        single_spec = _find_child_by_type(import_decl, "import_spec")
        if single_spec:
            imports.append(_parse_import_spec(single_spec, file_path))
            continue

        # Grouped imports: import ( "fmt" \n "os" )
        spec_list = _find_child_by_type(import_decl, "import_spec_list")
        if spec_list:
            for spec in _find_children_by_type(spec_list, "import_spec"):
                imports.append(_parse_import_spec(spec, file_path))

    return [i for i in imports if i is not None]


def _parse_import_spec(spec: Any, file_path: str) -> dict | None:
    """Parse a single import spec."""
    path_node = field(spec, "path")
    if path_node is None:
        path_node = _find_child_by_type(spec, "interpreted_string_literal")
    if path_node is None:
        return None

    path = _get_node_text(path_node).strip('"`')

    name_node = field(spec, "name")
    is_dot_import = name_node is not None and name_node.type == "dot"
    is_blank_import = name_node is not None and name_node.type == "blank_identifier"
    alias = None
    if name_node is not None and not is_dot_import and not is_blank_import:
        alias = _get_node_text(name_node)

    return {
        "file_path": file_path,
        "line": spec.start_point[0] + 1,
        "path": path,
        "alias": alias,
        "name": alias or default_import_name(path),
        "is_dot_import": is_dot_import,
        "is_blank_import": is_blank_import,
        "node": spec,
    }
