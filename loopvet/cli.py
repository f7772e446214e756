"""loopvet CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click
from rich.table import Table

from loopvet import __version__
from loopvet.pipeline.ui import console


class VerboseGroup(click.Group):
    """Help output grouped by command category."""

    COMMAND_CATEGORIES = {
        "ANALYSIS": {
            "title": "ANALYSIS",
            "description": "Run rules over Go sources",
            "commands": ["check"],
        },
        "REFERENCE": {
            "title": "REFERENCE",
            "description": "Rule documentation",
            "commands": ["rules", "explain"],
        },
    }

    def format_commands(self, ctx, formatter):
        """Suppress default command listing (categorized format in format_help)."""
        pass

    def format_help(self, ctx, formatter):
        super().format_help(ctx, formatter)

        registered = {
            name: cmd
            for name, cmd in self.commands.items()
            if not name.startswith("_") and not getattr(cmd, "hidden", False)
        }

        console.print()
        console.rule("[bold]COMMANDS[/bold]")

        for category_data in self.COMMAND_CATEGORIES.values():
            console.print(f"\n[bold cyan]{category_data['title']}[/bold cyan]")
            console.print(f"[dim]{category_data['description']}[/dim]")

            table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
            table.add_column("Command", style="cmd", width=18)
            table.add_column("Description", style="white")

            for cmd_name in category_data["commands"]:
                if cmd_name not in registered:
                    continue
                first_line = (registered[cmd_name].help or "").split("\n")[0].strip()
                table.add_row(cmd_name, first_line)

            console.print(table)

        console.print()
        console.rule()
        console.print("For detailed options: [cmd]loopvet <command> --help[/cmd]")


@click.group(cls=VerboseGroup)
@click.version_option(version=__version__, prog_name="loopvet")
@click.help_option("-h", "--help")
def cli():
    """loopvet - find Go loop variables captured by escaping func literals.

    \b
    QUICK START:
      loopvet check ./...        # Analyze a module
      loopvet explain loopclosure
    """
    pass


from loopvet.commands.check import check
from loopvet.commands.explain import explain, rules

cli.add_command(check)
cli.add_command(explain)
cli.add_command(rules)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
