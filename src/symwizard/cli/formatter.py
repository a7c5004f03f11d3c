# src/symwizard/cli/formatter.py
import difflib
from typing import Mapping

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from symwizard.core.engine import summarize
from symwizard.core.output import console as shared_console
from symwizard.integrations.cordova import PlatformStatus, RunReport


class WizardFormatter:
    """
    Renders the plan, the per-file diffs and the final report.
    """

    def __init__(self, console: Console = shared_console):
        self.console = console

    def print_header(self, subtitle: str, version: str):
        self.console.print(Panel.fit(
            f"[bold cyan]SymWizard v{version}[/bold cyan]\n"
            "══════════════════════════════════════════════════",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def print_plan(self, plan: Mapping[str, bool], uninstall: bool):
        table = Table(title="Platform Plan", header_style="bold magenta")
        table.add_column("Platform", style="cyan")
        table.add_column("State")
        for platform, needed in plan.items():
            if uninstall:
                state = "[yellow]patched, will revert[/yellow]" if needed else "[dim]not patched[/dim]"
            else:
                state = "[yellow]needs setup[/yellow]" if needed else "[green]up to date[/green]"
            table.add_row(platform, state)
        self.console.print(table)

    def display_diff(self, original_text: str, patched_text: str, file_name: str):
        """
        Renders a colorized unified diff between the project file on disk
        and the patched version.
        """
        if not patched_text or not original_text:
            return

        diff_list = list(difflib.unified_diff(
            original_text.splitlines(),
            patched_text.splitlines(),
            fromfile=f"a/{file_name}",
            tofile=f"b/{file_name}",
            lineterm=""
        ))

        if not diff_list:
            self.console.print(f"[dim]ℹ No changes needed for {file_name}.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"Proposed Patch: {file_name}", border_style="green"))

    def print_final_table(self, report: RunReport):
        table = Table(title="SymWizard Execution Report", show_lines=True, header_style="bold magenta")
        table.add_column("Platform", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Files Changed", justify="right")
        table.add_column("Result", justify="center")

        for platform, outcome in report.outcomes.items():
            ok = outcome.status is not PlatformStatus.FAILED
            color = "green" if ok else "red"
            table.add_row(
                platform,
                f"[{color}]{outcome.status.value}[/{color}]",
                str(outcome.files_changed),
                "✅" if ok else "❌"
            )

        self.console.print(table)
        totals = summarize(report.patch_results())
        self.console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Platforms:       {len(report.outcomes)}\n"
            f"Succeeded:       [green]{len(report.succeeded)}[/green]\n"
            f"Failed:          [red]{len(report.failed)}[/red]\n"
            f"Files Written:   {totals['patched']}\n"
            f"Files Failed:    {totals['failed']}",
            border_style="dim"
        ))
