"""Unified orchestrator for rule discovery and execution.

This module provides a central orchestrator that:
1. Dynamically discovers the rules in the rules/<language> packages
2. Checks the capabilities each rule requires
3. Parses and resolves every source file once
4. Runs the applicable rules per file and collects their findings
"""

import importlib
import inspect
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loopvet.ast_extractors.go_impl import extract_go_package
from loopvet.ast_parser import ASTParser
from loopvet.config_runtime import DEFAULTS
from loopvet.go_types import resolve_unit
from loopvet.inspector import Inspector
from loopvet.module_resolver import ModuleResolver
from loopvet.rules.base import (
    RuleFunction,
    RuleMetadata,
    StandardFinding,
    StandardRuleContext,
    validate_rule_signature,
)
from loopvet.utils.constants import GO_EXTENSION, GO_TEST_SUFFIX
from loopvet.utils.logging import logger, unit_logger

# Capabilities a rule can name in RuleMetadata.requires, built once per file.
CAPABILITIES: dict[str, Callable[[dict[str, Any]], Any]] = {
    "inspect": lambda ast_wrapper: Inspector(ast_wrapper["tree"]),
}


@dataclass
class RuleInfo:
    """Metadata about a discovered rule."""

    name: str
    module: str
    function: RuleFunction
    metadata: RuleMetadata
    category: str
    language: str
    enabled: bool = True


@dataclass
class AnalysisReport:
    """Outcome of one orchestrator run."""

    findings: list[StandardFinding] = field(default_factory=list)
    files_analyzed: list[str] = field(default_factory=list)
    files_skipped: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "findings": [f.to_dict() for f in self.findings],
            "files_analyzed": len(self.files_analyzed),
            "files_skipped": len(self.files_skipped),
            "errors": self.errors,
        }


class RulesOrchestrator:
    """Discovers rules and runs them over Go sources."""

    def __init__(self, project_path: Path, config: dict[str, Any] | None = None, parser: ASTParser | None = None):
        """Initialize the orchestrator.

        Args:
            project_path: Root path of the project being analyzed
            config: Runtime configuration (see config_runtime.load_runtime_config)
            parser: Parser to reuse; created lazily when omitted
        """
        self.project_path = Path(project_path).resolve()
        self.config = config or DEFAULTS
        self._parser = parser
        self._debug = os.environ.get("LOOPVET_DEBUG", "").lower() == "true"
        self.module_resolver = ModuleResolver(self.project_path)
        self.rules = self._discover_all_rules()

        if self._debug:
            total_rules = sum(len(r) for r in self.rules.values())
            logger.debug(f"[ORCHESTRATOR] Discovered {total_rules} rules across {len(self.rules)} languages")

    @property
    def parser(self) -> ASTParser:
        if self._parser is None:
            self._parser = ASTParser()
        return self._parser

    def _discover_all_rules(self) -> dict[str, list[RuleInfo]]:
        """Import every rules/<language>/*.py module exposing METADATA and analyze().

        Returns:
            Dictionary mapping language name to list of RuleInfo objects
        """
        rules_by_language: dict[str, list[RuleInfo]] = {}

        import loopvet.rules as rules_package

        rules_dir = Path(rules_package.__file__).parent

        for subdir in sorted(rules_dir.iterdir()):
            if not subdir.is_dir() or subdir.name.startswith("__"):
                continue

            language = subdir.name
            rules_by_language[language] = []

            for py_file in sorted(subdir.glob("*.py")):
                if py_file.name.startswith("__"):
                    continue

                module_name = f"loopvet.rules.{language}.{py_file.stem}"

                try:
                    module = importlib.import_module(module_name)
                except ImportError as e:
                    logger.error(f"[ORCHESTRATOR] Failed to import {module_name}: {e}")
                    continue

                rule_info = self._analyze_rule(module, module_name, language)
                if rule_info is not None:
                    rules_by_language[language].append(rule_info)
                    logger.debug(f"[ORCHESTRATOR] Found rule: {language}/{rule_info.name}")

        return rules_by_language

    def _analyze_rule(self, module: Any, module_name: str, language: str) -> RuleInfo | None:
        """Build RuleInfo for a module, or None if it is not a rule."""
        metadata = getattr(module, "METADATA", None)
        func = getattr(module, "analyze", None)
        if not isinstance(metadata, RuleMetadata) or not inspect.isfunction(func):
            return None

        if not validate_rule_signature(func):
            logger.error(f"[ORCHESTRATOR] {module_name}.analyze must take a single 'context' argument")
            return None

        enabled = True
        missing = [req for req in metadata.requires if req not in CAPABILITIES]
        if missing:
            logger.error(
                f"[ORCHESTRATOR] Rule {metadata.name} requires unknown capabilities {missing}; disabled"
            )
            enabled = False

        return RuleInfo(
            name=metadata.name,
            module=module_name,
            function=func,
            metadata=metadata,
            category=metadata.category,
            language=language,
            enabled=enabled,
        )

    def all_rules(self) -> list[RuleInfo]:
        """Discovered rules in a stable order."""
        return [rule for language in sorted(self.rules) for rule in self.rules[language]]

    def get_rule(self, name: str) -> RuleInfo | None:
        for rule in self.all_rules():
            if rule.name == name:
                return rule
        return None

    def rule_options(self, rule: RuleInfo) -> dict[str, Any]:
        """Options passed to a rule through its context."""
        options = dict(self.config.get("rules", {}))
        options["snippet_lines"] = self.config.get("report", {}).get("snippet_lines", 2)
        return options

    def _applies(self, rule: RuleInfo, rel_path: str) -> bool:
        meta = rule.metadata
        if not rule.enabled:
            return False
        if meta.target_extensions and not any(rel_path.endswith(ext) for ext in meta.target_extensions):
            return False
        if meta.exclude_patterns and any(p in rel_path for p in meta.exclude_patterns):
            return False
        return True

    def run_file(self, file_path: Path, content: str | None = None) -> list[StandardFinding]:
        """Parse, resolve and run all applicable rules on one Go file."""
        file_path = Path(file_path)
        rel_path = self._relative(file_path)

        rules = [r for r in self.rules.get("go", []) if self._applies(r, rel_path)]
        if not rules:
            return []

        if content is None:
            ast_wrapper = self.parser.parse_file(file_path)
        else:
            ast_wrapper = self.parser.parse_content(content, str(file_path))

        tree = ast_wrapper["tree"]
        package_name = _package_name(tree)
        package_path = self.module_resolver.package_path(file_path, package_name)
        types_info = resolve_unit(tree, package_path)
        log = unit_logger(rel_path)
        log.debug(f"[ORCHESTRATOR] Resolved package {package_path}")

        findings = []
        for rule in rules:
            context = StandardRuleContext(
                file_path=Path(rel_path),
                content=ast_wrapper["content"],
                language="go",
                project_path=self.project_path,
                ast_wrapper=ast_wrapper,
                types_info=types_info,
                results={req: CAPABILITIES[req](ast_wrapper) for req in rule.metadata.requires},
                options=self.rule_options(rule),
            )
            try:
                rule_findings = rule.function(context)
            except Exception as e:
                log.opt(exception=True).error(f"[ORCHESTRATOR] Rule {rule.name} failed: {e}")
                continue

            log.debug(f"[ORCHESTRATOR] {rule.name}: {len(rule_findings)} findings")
            findings.extend(rule_findings)

        return findings

    def run_paths(self, paths: Iterable[str | Path]) -> AnalysisReport:
        """Run all rules over files and directories."""
        report = AnalysisReport()
        analysis = self.config.get("analysis", {})
        max_size = analysis.get("max_file_size", DEFAULTS["analysis"]["max_file_size"])

        for file_path in self.collect_files(paths):
            rel_path = self._relative(file_path)
            try:
                size = file_path.stat().st_size
            except OSError as e:
                report.errors[rel_path] = str(e)
                continue

            if size > max_size:
                logger.info(f"Skipping {rel_path}: {size} bytes exceeds max_file_size {max_size}")
                report.files_skipped.append(rel_path)
                continue

            try:
                report.findings.extend(self.run_file(file_path))
            except OSError as e:
                logger.warning(f"Could not read {rel_path}: {e}")
                report.errors[rel_path] = str(e)
                continue
            except RecursionError:
                # Nesting too deep to resolve; the other files still run.
                unit_logger(rel_path).error("[ORCHESTRATOR] Source nested too deeply to analyze")
                report.errors[rel_path] = "source nested too deeply to analyze"
                continue

            report.files_analyzed.append(rel_path)

        return report

    def collect_files(self, paths: Iterable[str | Path]) -> list[Path]:
        """Go files under the given paths, sorted, with excluded paths removed."""
        analysis = self.config.get("analysis", {})
        exclude = analysis.get("exclude_patterns", [])
        include_tests = analysis.get("include_tests", True)

        seen = set()
        files = []
        for raw in paths:
            # Go package patterns: "./..." means the directory tree.
            text = str(raw)
            if text.endswith("..."):
                text = text[:-3].rstrip("/") or "."
            path = Path(text)
            if not path.is_absolute():
                path = self.project_path / path
            if path.is_dir():
                candidates = sorted(path.rglob(f"*{GO_EXTENSION}"))
            elif path.is_file():
                candidates = [path]
            else:
                logger.warning(f"Path not found: {raw}")
                continue

            for candidate in candidates:
                rel_path = self._relative(candidate)
                if candidate in seen or not candidate.is_file():
                    continue
                if any(p in rel_path for p in exclude):
                    continue
                if not include_tests and candidate.name.endswith(GO_TEST_SUFFIX):
                    continue
                seen.add(candidate)
                files.append(candidate)

        return files

    def _relative(self, file_path: Path) -> str:
        try:
            return Path(file_path).resolve().relative_to(self.project_path).as_posix()
        except ValueError:
            return Path(file_path).as_posix()


def _package_name(tree: Any) -> str:
    package = extract_go_package(tree, "")
    return package["name"] if package else ""
