"""Check Go sources for loop variables captured by escaping func literals."""

import json
import sys
from pathlib import Path

import click

from loopvet.pipeline.ui import (
    console,
    print_error,
    print_findings,
    print_header,
    print_success,
    print_warning,
)
from loopvet.utils.error_handler import handle_exceptions
from loopvet.utils.exit_codes import ExitCodes
from loopvet.utils.logging import logger


@click.command("check")
@click.argument("paths", nargs=-1)
@click.option("--project-path", default=".", help="Root directory (config and relative paths)")
@click.option(
    "--parallel-subtests/--no-parallel-subtests",
    default=None,
    help="Also flag t.Run subtests that call t.Parallel() (overrides config)",
)
@click.option("--json", "as_json", is_flag=True, help="Print findings as JSON on stdout")
@click.option("--output-json", help="Path to output JSON file")
@click.option("--max-rows", type=int, default=None, help="Maximum rows to display in table")
@handle_exceptions
def check(paths, project_path, parallel_subtests, as_json, output_json, max_rows):
    """Report loop variables captured by func literals that outlive their iteration.

    Flags references to range/for loop variables from a func literal that is
    started with go, deferred, passed to errgroup.Group.Go as the last
    statement of the loop body, or (with --parallel-subtests) run as a
    parallel subtest via t.Run.

    Examples:
      loopvet check                       # Everything under the project
      loopvet check ./pkg/...             # One subtree
      loopvet check --json main.go        # Machine-readable output

    Exit codes:
      0  no findings
      1  findings reported
      3  nothing could be analyzed
    """
    from loopvet.ast_parser import ASTParser
    from loopvet.config_runtime import load_runtime_config
    from loopvet.rules.orchestrator import RulesOrchestrator

    project_path = Path(project_path).resolve()
    config = load_runtime_config(project_path)
    if parallel_subtests is not None:
        config["rules"]["parallel_subtests"] = parallel_subtests
    if max_rows is None:
        max_rows = config["report"]["max_rows"]

    try:
        parser = ASTParser()
    except RuntimeError as e:
        print_error(str(e))
        sys.exit(ExitCodes.TASK_INCOMPLETE)

    orchestrator = RulesOrchestrator(project_path, config=config, parser=parser)
    report = orchestrator.run_paths(paths or ["."])

    logger.info(
        f"Analyzed {len(report.files_analyzed)} files, "
        f"{len(report.findings)} findings, {len(report.errors)} errors"
    )

    if output_json:
        out = Path(output_json)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        logger.info(f"Findings written to {out}")

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _print_table(report, max_rows)

    if not report.files_analyzed:
        exit_code = ExitCodes.TASK_INCOMPLETE
    elif report.findings:
        exit_code = ExitCodes.FINDINGS
    else:
        exit_code = ExitCodes.SUCCESS
    logger.debug(f"Exit {exit_code}: {ExitCodes.get_description(exit_code)}")
    sys.exit(exit_code)


def _print_table(report, max_rows: int) -> None:
    print_header("LOOPCLOSURE")

    for path, error in report.errors.items():
        print_error(f"{path}: {error}")
    for path in report.files_skipped:
        print_warning(f"{path}: skipped (exceeds max_file_size)")

    if not report.findings:
        print_success(f"No captured loop variables in {len(report.files_analyzed)} files")
        return

    print_findings(report.findings, max_rows)
    console.print(f"[high]{len(report.findings)} findings[/high] in {len(report.files_analyzed)} files")
