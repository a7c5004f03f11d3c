#!/usr/bin/env python3
"""
SYMWIZARD CLI - Cordova Setup Wizard
------------------------------------
Primary interface: resolves configuration and answers, shows which
platforms need work, runs the Cordova integration and renders the report.

Author: SymWizard Team
Date: 2026-10-19
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.logging import RichHandler
from rich.markup import escape

from symwizard.cli.formatter import WizardFormatter
from symwizard.cli.prompts import ask_answers, load_answers
from symwizard.core.config import WizardConfig, load_config
from symwizard.core.engine import PatchEngine
from symwizard.core.errors import ConfigError
from symwizard.core.output import console
from symwizard.integrations.cordova import CordovaIntegration, RunReport

VERSION = "1.0.0"

logger = logging.getLogger("symwizard.cli")


class SymWizardCLI:
    """
    CLI wrapper that translates user commands into integration actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="symwizard",
            description="SymWizard - configure Cordova projects to upload debug symbols to Sentry",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="Run from the root of your Cordova project."
        )
        self.formatter = WizardFormatter(console)
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-v", "--version", action="version", version=f"symwizard v{VERSION}")
        self.parser.add_argument("--debug", action="store_true", help="Verbose diagnostic logging")
        self.parser.add_argument("--quiet", action="store_true", help="Never prompt; use defaults and --answers")
        self.parser.add_argument("--uninstall", action="store_true", help="Remove the upload build phase again")
        self.parser.add_argument("--dry-run", action="store_true", help="Preview results without writing")
        self.parser.add_argument("--diff", action="store_true", help="Show a diff of each patched project file")
        self.parser.add_argument("--url", help="Sentry server URL (default: https://sentry.io/)")
        self.parser.add_argument("--platform", action="append", dest="platforms", metavar="PLATFORM",
                                 help="Platform to configure (repeatable, default: ios and android)")
        self.parser.add_argument("--config", type=Path, help="Path to a .symwizard.yml file")
        self.parser.add_argument("--answers", type=Path, help="YAML file with pre-filled answers")
        self.parser.add_argument("--project-root", type=Path, default=Path("."),
                                 help="Cordova project root (default: current directory)")

    def _configure_logging(self, debug: bool):
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.WARNING,
            format="%(name)s: %(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )

    def _resolve_config(self, args: argparse.Namespace) -> WizardConfig:
        config = load_config(args.project_root, args.config)
        return config.merged({"url": args.url, "platforms": args.platforms})

    def _collect_answers(self, args: argparse.Namespace, plan: Dict[str, bool]) -> Dict[str, Any]:
        answers: Dict[str, Any] = load_answers(args.answers) if args.answers else {}
        answers["uninstall"] = args.uninstall or bool(answers.get("uninstall"))
        if args.url:
            answers["url"] = args.url
        if args.answers or args.quiet:
            answers.setdefault("platforms", list(plan))
        else:
            answers = ask_answers(console, plan, answers)
        answers["should_configure_platforms"] = plan
        return answers

    def _render(self, args: argparse.Namespace, report: RunReport):
        if args.diff:
            for result in report.patch_results():
                if result.changed:
                    self.formatter.display_diff(result.original, result.content, str(result.path))
        self.formatter.print_final_table(report)

    async def _run(self, args: argparse.Namespace) -> RunReport:
        config = self._resolve_config(args)
        root = args.project_root.resolve()
        engine = PatchEngine(
            label=config.phase_label,
            shell_path=config.shell_path,
            script=config.shell_script,
            dry_run=args.dry_run,
        )
        integration = CordovaIntegration(root, config, engine=engine, uninstall=args.uninstall)

        plan = await integration.should_configure(config.platforms)
        self.formatter.print_plan(plan, args.uninstall)
        answers = self._collect_answers(args, plan)
        return await integration.emit(answers)

    def run(self, argv: Optional[List[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        self._configure_logging(args.debug)

        if not args.project_root.is_dir():
            console.print(f"[bold red]Error:[/bold red] Path '{escape(str(args.project_root))}' not found.")
            return 2

        subtitle = "Uninstall" if args.uninstall else "Cordova Setup"
        self.formatter.print_header(subtitle, VERSION)

        try:
            report = asyncio.run(self._run(args))
        except ConfigError as e:
            console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
            return 2

        self._render(args, report)
        if args.dry_run:
            console.print("[yellow]Dry run: no files were written.[/yellow]")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point with interrupt handling."""
    try:
        return SymWizardCLI().run(argv)
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
