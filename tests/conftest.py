"""Pytest configuration and fixtures."""
import tempfile
from pathlib import Path

import pytest
from tree_sitter_language_pack import get_parser

from loopvet.go_types import resolve_unit
from loopvet.inspector import Inspector
from loopvet.rules.base import StandardRuleContext
from loopvet.rules.go import loopclosure_analyze


@pytest.fixture
def go_parser():
    """Create a Go tree-sitter parser."""
    parser = get_parser("go")
    return parser


def parse_go(parser, code: str):
    """Helper to parse Go code."""
    return parser.parse(code.encode("utf-8"))


@pytest.fixture
def parse(go_parser):
    """Parse a Go snippet into a tree-sitter tree."""
    return lambda code: parse_go(go_parser, code)


@pytest.fixture
def find_nodes():
    """Find all nodes of a type (optionally with given text), pre-order."""

    def _find(tree, node_type: str, text: str | None = None) -> list:
        return [
            node
            for node in Inspector(tree).nodes([node_type])
            if text is None or node.text.decode("utf-8") == text
        ]

    return _find


@pytest.fixture
def run_loopclosure(go_parser):
    """Run the loopclosure rule over a Go snippet and return its findings."""

    def _run(code: str, parallel_subtests: bool = False, package_path: str | None = None):
        tree = parse_go(go_parser, code)
        context = StandardRuleContext(
            file_path=Path("example.go"),
            content=code,
            language="go",
            project_path=Path("."),
            ast_wrapper={"type": "tree_sitter", "language": "go", "tree": tree, "content": code},
            types_info=resolve_unit(tree, package_path),
            results={"inspect": Inspector(tree)},
            options={"parallel_subtests": parallel_subtests},
        )
        return loopclosure_analyze.analyze(context)

    return _run


@pytest.fixture
def go_project():
    """Create a minimal Go module on disk."""
    with tempfile.TemporaryDirectory() as tmpdir:
        project_path = Path(tmpdir)

        (project_path / "go.mod").write_text("module example.com/app\n\ngo 1.21\n")
        (project_path / "main.go").write_text("""package main

func use(args ...int) {}

func main() {
    items := []int{1, 2, 3}
    for i, v := range items {
        go func() {
            use(i, v)
        }()
    }
}
""")
        (project_path / "clean.go").write_text("""package main

func process(v int) {}

func clean(items []int) {
    for _, v := range items {
        process(v)
    }
}
""")

        yield project_path
