# src/kubeshort/cli/formatter.py
import difflib
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

console = Console()


class ShortFormatter:
    """
    ShortFormatter: the visual side of the CLI.
    Renders diffs, per-file reports and the closing summary.
    """

    def __init__(self, output: Console = console):
        self.console = output

    def display_diff(self, original_text: str, canonical_text: str, file_name: str):
        """Colorized unified diff between the input file and its canonical form."""
        if not canonical_text or not original_text:
            return

        diff_list = list(difflib.unified_diff(
            original_text.splitlines(),
            canonical_text.splitlines(),
            fromfile=f"original/{file_name}",
            tofile=f"canonical/{file_name}",
            lineterm=""
        ))

        if not diff_list:
            self.console.print(f"[dim]ℹ {file_name} is already canonical.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"Canonical form: {file_name}", border_style="green"))

    def print_final_table(self, reports: List[Dict[str, Any]]):
        table = Table(title="KubeShort Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Volumes", style="white")
        table.add_column("Status", style="bold")
        table.add_column("Result", justify="center")

        for r in reports:
            if r.get("error"):
                self.console.print(f"[bold red]Error in {r['file_path']}:[/bold red] {r['error']}")

            success = r.get("success", False)
            status_color = "green" if success else "red"
            volumes = ", ".join(f"{v['name']} ({v['source']})" for v in r.get("volumes", [])) or "-"

            table.add_row(
                str(r.get("file_path")),
                volumes,
                f"[{status_color}]{r.get('status', 'FAILED')}[/{status_color}]",
                "✅" if success else "❌"
            )

        self.console.print(table)

    def print_summary(self, summary: Dict[str, Any]):
        self.console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Total Files:     {summary['total_files']}\n"
            f"Success:         [green]{summary['successful']}[/green]\n"
            f"Empty:           {summary['empty']}\n"
            f"Rejected:        [yellow]{summary['rejected']}[/yellow]\n"
            f"System Errors:   [red]{summary['system_errors']}[/red]\n"
            f"Backups Created: {summary['backups_created']}",
            border_style="dim"
        ))
