#!/usr/bin/env python3
"""
SYMWIZARD PROMPTS - Answers Source
----------------------------------
Collects the answers the Cordova integration consumes, either
interactively through rich prompts or from a YAML answers file.

Author: SymWizard Team
Date: 2026-10-19
"""

from pathlib import Path
from typing import Any, Dict, Mapping

from rich.console import Console
from rich.prompt import Confirm, Prompt

from symwizard.core.config import load_yaml
from symwizard.core.errors import ConfigError


def load_answers(path: Path) -> Dict[str, Any]:
    data = load_yaml(Path(path)) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    platforms = data.get("platforms")
    if isinstance(platforms, str):
        data["platforms"] = [platforms]
    return data


def _ask(console: Console, question: str, default: Any, password: bool = False) -> str:
    if default:
        return Prompt.ask(question, console=console, default=default, password=password)
    return Prompt.ask(question, console=console, password=password)


def ask_answers(console: Console, plan: Mapping[str, bool], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Asks which platforms to set up (only those the plan marked as needing
    work) and for the sentry-cli project coordinates.
    """
    answers: Dict[str, Any] = dict(defaults)
    chosen = []
    for platform, needed in plan.items():
        if not needed:
            console.print(f"[dim]{platform} is already configured, skipping.[/dim]")
            continue
        if Confirm.ask(f"Do you want to configure [bold]{platform}[/bold]?", default=True, console=console):
            chosen.append(platform)
    answers["platforms"] = chosen

    if answers.get("uninstall") or not chosen:
        return answers

    config = dict(answers.get("config") or {})
    org = _ask(console, "Organization slug", (config.get("organization") or {}).get("slug"))
    project = _ask(console, "Project slug", (config.get("project") or {}).get("slug"))
    token = _ask(console, "Auth token", (config.get("auth") or {}).get("token"), password=True)
    config["organization"] = {"slug": org or None}
    config["project"] = {"slug": project or None}
    config["auth"] = {"token": token or None}
    answers["config"] = config
    return answers
