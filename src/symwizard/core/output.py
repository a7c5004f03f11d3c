"""
Shared rich console and the colored status helpers used by the
integrations. Keeps user-facing lines separate from diagnostic logging.
"""

from rich.console import Console

console = Console()


def _say(message, style: str) -> None:
    # Messages often carry paths or exception text; never read them as markup.
    console.print(str(message), style=style, markup=False, highlight=False)


def green(message) -> None:
    _say(message, "green")


def red(message) -> None:
    _say(message, "bold red")


def dim(message) -> None:
    _say(message, "dim")


def nl() -> None:
    console.print()
