"""Base contracts shared by the orchestrator and every rule."""

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class Severity(Enum):
    """How much a finding matters if it is real."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Confidence(Enum):
    """How likely a finding is real, given what the rule can see."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class StandardRuleContext:
    """Everything a rule sees for one compilation unit.

    ``results`` holds the output of the capabilities the rule declared in
    ``RuleMetadata.requires`` (e.g. ``results["inspect"]``). ``options`` holds
    the rule's configuration; rules read toggles from here, never from
    module-level state.
    """

    file_path: Path
    content: str
    language: str
    project_path: Path

    ast_wrapper: dict[str, Any] | None = None
    types_info: Any | None = None

    results: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)

    def get_snippet(self, line_num: int, context_lines: int = 2) -> str:
        """Source lines around ``line_num``, the line itself marked with '>>'."""
        lines = self.content.splitlines() if self.content else []
        if not 1 <= line_num <= len(lines):
            return ""

        first = max(1, line_num - context_lines)
        last = min(len(lines), line_num + context_lines)
        return "\n".join(
            f"{n:4d}{'>> ' if n == line_num else '   '}{lines[n - 1]}"
            for n in range(first, last + 1)
        )


@dataclass
class StandardFinding:
    """One diagnostic, positioned at a 1-based line and column."""

    rule_name: str
    message: str
    file_path: str
    line: int

    column: int = 0
    end_line: int | None = None
    end_column: int | None = None
    severity: Severity = Severity.MEDIUM
    category: str = "concurrency"
    confidence: Confidence = Confidence.HIGH
    snippet: str = ""

    references: list[str] | None = None
    cwe_id: str | None = None
    additional_info: dict[str, Any] | None = None

    @property
    def position(self) -> str:
        """``file:line:col`` as printed by go vet."""
        return f"{self.file_path}:{self.line}:{self.column}"

    def __str__(self) -> str:
        return f"{self.position}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "rule": self.rule_name,
            "message": self.message,
            "file": self.file_path,
            "line": self.line,
            "column": self.column,
            "severity": self.severity.value,
            "category": self.category,
            "confidence": self.confidence.value,
            "code_snippet": self.snippet,
        }

        if self.end_line is not None:
            result["end_line"] = self.end_line
            result["end_column"] = self.end_column
        if self.references:
            result["references"] = self.references
        if self.cwe_id:
            result["cwe"] = self.cwe_id
        if self.additional_info:
            result["details"] = self.additional_info

        return result


RuleFunction = Callable[[StandardRuleContext], list[StandardFinding]]


def validate_rule_signature(func: Callable) -> bool:
    """A rule's entry point takes exactly one parameter named ``context``."""
    return list(inspect.signature(func).parameters) == ["context"]


@dataclass
class RuleMetadata:
    """Registration data a rule module exposes as ``METADATA``.

    ``requires`` names capabilities from the orchestrator's table; a rule
    asking for one the orchestrator does not provide is disabled.
    """

    name: str
    category: str

    doc: str = ""
    requires: list[str] = field(default_factory=list)

    target_extensions: list[str] | None = None
    exclude_patterns: list[str] | None = None

    @property
    def summary(self) -> str:
        """First line of the doc text."""
        return self.doc.strip().splitlines()[0] if self.doc.strip() else ""
