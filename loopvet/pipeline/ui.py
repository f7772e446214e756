"""Rich console output for loopvet.

One themed console for every command. Import it instead of creating a
Console() per command:

    from loopvet.pipeline.ui import console, print_header, print_findings

    print_header("LOOPCLOSURE")
    print_findings(report.findings, max_rows=50)
"""

import sys

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

LOOPVET_THEME = Theme({
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "high": "bold yellow",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
    # Escape kinds
    "escape.go": "bold red",
    "escape.defer": "yellow",
    "escape.errgroup": "magenta",
    "escape.parallel_subtest": "blue",
})

console = Console(
    theme=LOOPVET_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_error(msg: str) -> None:
    console.print(f"[error]ERROR:[/error] {msg}")


def print_warning(msg: str) -> None:
    console.print(f"[warning]WARNING:[/warning] {msg}")


def print_success(msg: str) -> None:
    console.print(f"[success]OK:[/success] {msg}")


def print_findings(findings: list, max_rows: int) -> None:
    """Findings as a table of position, variable, escape kind and message.

    At most ``max_rows`` rows are shown; a trailing line counts the rest.
    """
    table = Table(show_header=True, header_style="bold")
    table.add_column("Location", style="path", no_wrap=True)
    table.add_column("Variable", style="high")
    table.add_column("Escape")
    table.add_column("Message")

    for finding in findings[:max_rows]:
        details = finding.additional_info or {}
        escape = details.get("escape", "")
        table.add_row(
            finding.position,
            details.get("var_name", ""),
            f"[escape.{escape}]{escape}[/escape.{escape}]" if escape else "",
            finding.message,
        )

    console.print(table)
    if len(findings) > max_rows:
        console.print(f"[dim]... {len(findings) - max_rows} more (use --json for all)[/dim]")
