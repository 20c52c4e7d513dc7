#!/usr/bin/env python3
"""
Display Management Module for DAMM Fee Tracker
Rich console output for snapshot runs: header, per-pair results and run summary

Version: 1.0.0
Developer: 8roku8.hl
"""

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from .constants import VERSION, DEVELOPER
from .utils import format_raw_amount, format_token_amount, short_address

# Initialize Rich console
console = Console()


class DisplayManager:
    """Console output for fee snapshot runs"""

    def __init__(self, config, console_=None):
        self.config = config
        self.console = console_ or console
        display_settings = config.get("display_settings", {})
        self.debug_mode = display_settings.get("debug_mode", False)
        self.show_breakdown = display_settings.get("show_breakdown", False) or self.debug_mode
        self.decimals = config.get("token_decimals", 6)

    def create_header_panel(self):
        """Create a stylized header panel"""
        header_text = Text()
        header_text.append("DAMM FEE TRACKER\n", style="bold cyan")
        header_text.append(f"Unclaimed Fee Snapshot v{VERSION}\n", style="bright_white")
        header_text.append(f"by {DEVELOPER}", style="italic dim")

        return Panel(
            Align.center(header_text),
            box=box.DOUBLE_EDGE,
            style="blue",
            padding=(1, 2)
        )

    def print_header(self):
        self.console.print(self.create_header_panel())

    def print_run_start(self, timestamp, pair_count):
        self.console.print(f"[cyan][{timestamp}] Running fee snapshot for {pair_count} pair(s)...[/cyan]")

    def print_pair_result(self, result):
        """Print one pair block: raw and token amount, optional breakdown"""
        side = self.config.get("token_side", "b").upper()
        self.console.print(f"\n[bold yellow]=== {result.name} ===[/bold yellow]")
        self.console.print(f"Unclaimed Token {side} (raw): [white]{result.raw_amount}[/white]")
        self.console.print(
            f"Unclaimed Token {side} ({self.decimals} dp): "
            f"[green]{format_token_amount(result.token_amount)}[/green] tokens"
        )

        breakdown = result.breakdown
        if self.show_breakdown and breakdown is not None:
            self.console.print(
                f"[dim]  liquidity={format_raw_amount(breakdown.liquidity)} "
                f"delta={breakdown.delta} newly_accrued={breakdown.newly_accrued} "
                f"pending={breakdown.pending}[/dim]"
            )
            if breakdown.clamped:
                self.console.print(
                    f"[yellow]  ⚠️ checkpoint ahead of pool accumulator by "
                    f"{breakdown.checkpoint - breakdown.accumulator}, delta clamped to 0[/yellow]"
                )

    def print_pair_error(self, name, error):
        self.console.print(f"[red]❌ Error processing {name}: {error}[/red]")

    def create_summary_table(self, run):
        """Summary table: one line per pair plus the total"""
        table = Table(
            title=f"Row summary @ {run.timestamp}",
            box=box.ROUNDED,
            show_header=True,
            header_style="bold magenta",
            title_style="bold cyan",
            border_style="blue"
        )
        table.add_column("Pair", style="yellow")
        table.add_column("Position", style="dim")
        table.add_column("Unclaimed", justify="right", style="green")
        table.add_column("Status", justify="center")

        for result in run.results:
            status = "[green]OK[/green]" if result.ok else "[red]ERROR[/red]"
            table.add_row(
                result.name,
                short_address(result.position),
                format_token_amount(result.token_amount),
                status,
            )

        table.add_section()
        table.add_row("[bold]TOTAL[/bold]", "", f"[bold]{format_token_amount(run.total_tokens)}[/bold]", "")
        return table

    def print_summary(self, run):
        self.console.print()
        self.console.print(self.create_summary_table(run))
        self.console.print(
            f"TOTAL Unclaimed Token {self.config.get('token_side', 'b').upper()}: "
            f"[bold green]{run.total_tokens}[/bold green] tokens"
        )
        if self.config.get("token_mint"):
            self.console.print(f"[dim]Token mint: {self.config['token_mint']}[/dim]")

    def print_status(self, message, style="white"):
        self.console.print(f"[{style}]{message}[/{style}]")

    def print_debug(self, message):
        if self.debug_mode:
            self.console.print(f"[dim]🔍 {message}[/dim]")
