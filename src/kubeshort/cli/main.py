#!/usr/bin/env python3
"""
KUBESHORT CLI
-------------
Command line front-end for the short PersistentVolume codec.

    kubeshort check PATH   decode every document and report
    kubeshort fmt PATH     rewrite documents in canonical short form

Author: KubeShort Team
Date: 2026-01-16
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from kubeshort.cli.formatter import ShortFormatter, console
from kubeshort.core.engine import TranscodeEngine

VERSION = "0.1.0"


class ShortCLI:
    """
    CLI wrapper that translates user commands into engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="kubeshort",
            description="KubeShort - short-form Kubernetes PersistentVolume transcoder",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = ShortFormatter()
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-v", "--version", action="version", version=f"kubeshort v{VERSION}")
        self.parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        check_parser = subparsers.add_parser("check", help="🔍 Decode documents and report errors")
        check_parser.add_argument("path", help="Path to a YAML/JSON file or directory")
        check_parser.add_argument("--ext", default=".yaml", help="File extension filter (default: .yaml)")

        fmt_parser = subparsers.add_parser("fmt", help="✏️  Rewrite documents in canonical form")
        fmt_parser.add_argument("path", help="Path to a YAML/JSON file or directory")
        fmt_parser.add_argument("--ext", default=".yaml", help="File extension filter (default: .yaml)")
        fmt_parser.add_argument("--dry-run", action="store_true", help="Preview results without writing")
        fmt_parser.add_argument("--diff", action="store_true", help="Show the change for every file")
        fmt_parser.add_argument("--json", action="store_true", help="Emit JSON instead of YAML")

    def print_header(self, subtitle: str):
        console.print(Panel.fit(
            f"[bold cyan]KubeShort v{VERSION}[/bold cyan]",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def _run_engine(self, args: argparse.Namespace, is_fmt_mode: bool) -> int:
        input_path = Path(args.path).resolve()
        if not input_path.exists():
            console.print(f"[bold red]Error:[/bold red] Path '{args.path}' not found.")
            return 2

        workspace = input_path if input_path.is_dir() else input_path.parent
        engine = TranscodeEngine(str(workspace), as_json=getattr(args, "json", False))
        dry_run = not is_fmt_mode or args.dry_run

        if input_path.is_file():
            reports = [engine.process_file(input_path.name, dry_run=dry_run)]
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(bar_width=40),
                TaskProgressColumn(),
                console=console,
                transient=True,
            ) as progress:
                task_id = progress.add_task("Processing volumes...", total=None)

                def advance(done: int, total: int):
                    progress.update(task_id, completed=done, total=total)

                reports = engine.scan_directory(args.ext, dry_run=dry_run, progress_callback=advance)

        if not reports:
            console.print("\n[bold yellow]⚠️  No matching files found.[/bold yellow]")
            return 0

        if is_fmt_mode and args.diff:
            for r in reports:
                if r.get("canonical_content"):
                    self.formatter.display_diff(r["original_content"], r["canonical_content"], r["file_path"])

        self.formatter.print_final_table(reports)
        self.formatter.print_summary(engine.generate_summary(reports))

        return 0 if all(r.get("success") for r in reports) else 1

    def run(self, argv: Optional[List[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

        if args.command == "check":
            self.print_header("Volume Check")
            return self._run_engine(args, is_fmt_mode=False)
        if args.command == "fmt":
            self.print_header("Volume Format")
            return self._run_engine(args, is_fmt_mode=True)

        self.parser.print_help()
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(ShortCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
