"""Tree-sitter node helpers and extractors, one module per language."""
