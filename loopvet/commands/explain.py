"""Show documentation for the registered rules."""

from pathlib import Path

import click
from rich.table import Table

from loopvet.pipeline.ui import console, print_error, print_header
from loopvet.utils.error_handler import handle_exceptions


def _orchestrator():
    from loopvet.rules.orchestrator import RulesOrchestrator

    return RulesOrchestrator(Path("."))


@click.command("explain")
@click.argument("rule_name", default="loopclosure")
@handle_exceptions
def explain(rule_name):
    """Print a rule's documentation and requirements."""
    rule = _orchestrator().get_rule(rule_name)
    if rule is None:
        print_error(f"Unknown rule: {rule_name}")
        raise click.exceptions.Exit(2)

    meta = rule.metadata
    print_header(meta.name.upper())
    console.print(meta.doc, markup=False, highlight=False)
    console.print()
    console.print(f"[dim]category:[/dim] {meta.category}")
    console.print(f"[dim]requires:[/dim] {', '.join(meta.requires) or '-'}")
    console.print(f"[dim]targets:[/dim]  {', '.join(meta.target_extensions or []) or '*'}")


@click.command("rules")
@handle_exceptions
def rules():
    """List discovered rules."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Rule", style="cmd")
    table.add_column("Language")
    table.add_column("Category")
    table.add_column("Summary")

    for rule in _orchestrator().all_rules():
        status = "" if rule.enabled else " [error](disabled)[/error]"
        table.add_row(rule.name + status, rule.language, rule.category, rule.metadata.summary)

    console.print(table)
