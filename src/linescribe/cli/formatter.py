# src/linescribe/cli/formatter.py
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from linescribe.core.models import CommandType

console = Console()


class ScribeFormatter:
    """
    ScribeFormatter: everything the CLI draws on the terminal.
    Script text is always escaped, since '[...]' is common in scripts and
    rich would read it as markup.
    """

    def __init__(self, target: Optional[Console] = None):
        self.console = target or console

    def show_line(self, line_no: Optional[int], text: str, echoed: bool = False):
        marker = "[bold yellow]echo[/bold yellow] " if echoed else ""
        self.console.print(f"[dim]{str(line_no):>4}[/dim]  {marker}{escape(text)}")

    def print_classification_table(self, rows: List[dict], title: str):
        """One row per classified line: line#, type, payload, echoed."""
        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("Line#", justify="right", style="dim")
        table.add_column("Type")
        table.add_column("Payload", style="cyan")
        table.add_column("Echo", justify="center")

        for r in rows:
            cmd_type = r.get("type")
            style = "white" if cmd_type is CommandType.ORDINARY else "green"
            table.add_row(
                str(r.get("line_no")),
                f"[{style}]{cmd_type.name}[/{style}]",
                escape(r.get("payload") or ""),
                "✅" if r.get("echoed") else "",
            )

        self.console.print(table)

    def show_registry(self, yaml_text: str, title: str):
        syntax = Syntax(yaml_text.rstrip() or "{}", "yaml", theme="monokai", line_numbers=False)
        self.console.print(Panel(syntax, title=escape(title), border_style="green"))

    def show_error(self, message: str, fatal: bool = False):
        label = "INTERNAL ERROR" if fatal else "Error"
        self.console.print(f"[bold red]{label}:[/bold red] {escape(message)}")

    def show_summary(self, surfaced: int, source: str):
        self.console.print(f"[dim]ℹ {surfaced} line(s) surfaced from {escape(source)}.[/dim]")
