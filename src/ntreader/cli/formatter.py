# src/ntreader/cli/formatter.py
from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ntreader.core.errors import FormatError

# Initialize the Rich console for high-quality terminal output
console = Console()


class NtFormatter:
    """
    NtFormatter: the visual side of the CLI.
    Renders parsed trees, located parse errors and batch reports.
    """

    def __init__(self, output: Console = console):
        self.console = output

    def show_tree(self, rendered: str, lexer_name: str):
        """Prints an already rendered tree with syntax highlighting."""
        self.console.print(Syntax(rendered.rstrip(), lexer_name, theme="monokai", line_numbers=False))

    def show_error(self, error: FormatError, file_name: str):
        """
        Shows the offending line with a caret under the reported column
        (or under the first visible character when there is no column).
        """
        text = error.line.expandtabs(1)
        if error.column is not None:
            column = error.column
        else:
            column = len(text) - len(text.lstrip())
        pointer = " " * column + "^"

        body = (
            f"[bold red]{type(error).__name__}[/bold red]: {escape(error.message)}\n\n"
            f"[dim]{error.lineno:>4} |[/dim] {escape(text)}\n"
            f"[dim]     |[/dim] [bold red]{pointer}[/bold red]"
        )
        self.console.print(Panel(body, title=escape(f"{file_name}: {error}"), border_style="red", expand=False))

    def print_final_table(self, reports: List[Dict[str, Any]]):
        """Builds the summary table shown at the very end of a check."""
        table = Table(title="ntreader Check Report", show_header=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Root")
        table.add_column("Status")
        table.add_column("Location", justify="right")
        table.add_column("Result", justify="center")

        for r in reports:
            success = r.get("success", False)
            color = "green" if success else "red"
            location = ""
            if r.get("line") is not None:
                location = f"{r['line']}" + (f":{r['column']}" if r.get("column") is not None else "")
            table.add_row(
                escape(str(r.get("file_path"))),
                str(r.get("root_kind", "unknown")),
                f"[{color}]{r.get('status', 'FAILED')}[/{color}]",
                location,
                "✅" if success else "❌",
            )

        self.console.print(table)

        for r in reports:
            if not r.get("success") and r.get("error"):
                self.console.print(f"[bold red]{escape(r['file_path'])}:[/bold red] {escape(r['error'])}")

    def print_summary(self, summary: Dict[str, Any]):
        self.console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Total Files:   {summary['total_files']}\n"
            f"Valid:         [green]{summary['valid']}[/green]\n"
            f"Invalid:       [red]{summary['invalid']}[/red]\n"
            f"Read Errors:   [red]{summary['read_errors']}[/red]",
            border_style="dim"
        ))
