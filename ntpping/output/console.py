"""
Console output for ntpping - one line per reply, diagnostics on the same stream
"""

from typing import Optional
from rich.console import Console
from rich.markup import escape

from ..errors import NtpPingError
from ..models import RunResult, Target


class ConsoleOutput:
    """
    Console writer for probe results.

    Formatted lines bypass rich rendering entirely (no markup, tab
    expansion or wrapping), so custom templates produce exactly what
    they describe.
    Diagnostics go to the same stream as the records.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False)

    def print_line(self, line: str):
        """Write a rendered record, which carries its own line break"""
        out = self.console.file
        out.write(line)
        out.flush()

    def print_diagnostic(self, error: NtpPingError):
        """Write ``error from <address>: <message>``"""
        self.console.out(error.diagnostic(), style="bold red", highlight=False)

    def print_header(self, address: str, target: Target, count: int):
        """Summary of what is about to be probed (verbose mode)"""
        self.console.print(
            f"[bold cyan]NTPPING[/] {escape(address)} "
            f"[dim]({escape(target.address)}), up to {count} replies[/]"
        )

    def print_summary(self, result: RunResult):
        """One-line recap of why the run stopped (verbose mode)"""
        style = "red" if result.failed else "green"
        reason = result.reason.value.replace('_', ' ') if result.reason else "not started"
        self.console.print(
            f"[{style}]{len(result.records)} reply(ies), {reason}[/]"
        )

    def print_error(self, message: str):
        """Print error message"""
        self.console.print(f"[bold red]Error:[/] {escape(message)}")
