"""Console output formatting for the command line interface."""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape


class OutputFormatter:
    """Prints user-facing messages, honoring quiet and JSON modes."""

    def __init__(self, json_output: bool = False, quiet: bool = False):
        """Initialize the output formatter.

        Args:
            json_output: Emit machine-readable JSON instead of messages
            quiet: Suppress non-essential output (warnings and errors remain)
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    @property
    def _silent(self) -> bool:
        return self.quiet or self.json_output

    def print(self, message: str = "") -> None:
        if not self._silent:
            self.console.print(escape(message))

    def info(self, message: str) -> None:
        if not self._silent:
            self.console.print(f"[blue]{escape(message)}[/blue]")

    def success(self, message: str) -> None:
        if not self._silent:
            self.console.print(f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]{escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]Error![/red] {escape(message)}")

    def result(self, ok: bool, label: str, target: str, outcome: str) -> None:
        """Print a per-item outcome line such as ``[OK] File /a.js created.``"""
        if self._silent:
            return
        status = "[green]\\[OK][/green]" if ok else "[red]\\[FAILED][/red]"
        parts = [status, escape(label)]
        if target:
            parts.append(f"[cyan]{escape(target)}[/cyan]")
        parts.append(f"{escape(outcome)}.")
        self.console.print(" ".join(parts))

    def output_json(self, data: Any) -> None:
        """Print data as JSON (only in JSON mode)."""
        if self.json_output:
            self.console.print_json(json.dumps(data))
