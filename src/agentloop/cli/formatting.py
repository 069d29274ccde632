"""Rich formatting helpers for the agentloop CLI.

Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from agentloop.events import StopReason, Usage


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_content(text: str, console: Console) -> None:
    """Display one reply's text content."""
    console.print(escape(text), highlight=False)


def format_iteration(iteration: int, usage: Usage, console: Console) -> None:
    """Display the per-call usage line shown in verbose mode."""
    console.print(
        f"[dim]call {iteration}: {usage.prompt_tokens} prompt + "
        f"{usage.completion_tokens} completion = {usage.total_tokens} tokens[/dim]",
        highlight=False,
    )


def format_usage(usage: Usage, iterations: int, stop_reason: StopReason, console: Console) -> None:
    """Display the run summary table."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Calls", justify="right", style="cyan")
    table.add_column("Prompt", justify="right", style="green")
    table.add_column("Completion", justify="right", style="green")
    table.add_column("Total", justify="right", style="bold green")
    table.add_column("Stop")
    table.add_row(
        str(iterations),
        str(usage.prompt_tokens),
        str(usage.completion_tokens),
        str(usage.total_tokens),
        stop_reason.value,
    )
    console.print(table)


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
