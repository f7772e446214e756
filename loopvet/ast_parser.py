"""Go source parser backed by tree-sitter."""

import hashlib
from pathlib import Path
from typing import Any

from loopvet.utils.logging import logger


class ASTParser:
    """Tree-sitter parser for Go compilation units."""

    language = "go"

    def __init__(self):
        """Load the Go grammar from tree-sitter-language-pack."""
        try:
            from tree_sitter_language_pack import get_language, get_parser
        except ImportError as e:
            raise RuntimeError(
                f"tree-sitter-language-pack is not installed: {e}\n"
                "Please install with: pip install tree-sitter-language-pack"
            ) from e

        try:
            self.go_language = get_language("go")
            self.parser = get_parser("go")
        except Exception as e:
            raise RuntimeError(
                f"Failed to load tree-sitter grammar for Go: {e}\n"
                "This is often due to a corrupted installation.\n"
                "Please try: pip install --force-reinstall tree-sitter-language-pack"
            ) from e

    def parse_content(self, content: str, file_path: str = "<memory>") -> dict[str, Any]:
        """Parse Go source text into the tree wrapper consumed by rules."""
        tree = self.parser.parse(content.encode("utf-8"))

        if tree.root_node.has_error:
            error_line = _first_error_line(tree.root_node)
            logger.warning(
                f"Parse errors in {file_path} (first near line {error_line}); "
                "analyzing the recovered tree"
            )

        return {
            "type": "tree_sitter",
            "language": self.language,
            "tree": tree,
            "content": content,
            "file_path": file_path,
            "content_hash": hashlib.sha256(content.encode("utf-8")).hexdigest(),
        }

    def parse_file(self, file_path: Path) -> dict[str, Any]:
        """Read and parse a Go file.

        Raises:
            OSError: the file could not be read.
        """
        content = Path(file_path).read_text(encoding="utf-8", errors="replace")
        return self.parse_content(content, str(file_path))


def _first_error_line(node: Any) -> int:
    """1-based line of the first ERROR or MISSING node, pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current.start_point[0] + 1
        stack.extend(reversed(current.children))
    return node.start_point[0] + 1
