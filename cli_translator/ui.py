from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel

console = Console()

AFFIRMATIVE_ANSWERS = {"y", "yes"}


def is_affirmative(answer: Optional[str]) -> bool:
    """Only 'y' or 'yes' (any case) count as consent; anything else declines."""
    if answer is None:
        return False
    return answer.strip().lower() in AFFIRMATIVE_ANSWERS


def _ask(prompt: str) -> str:
    try:
        return console.input(prompt)
    except EOFError:
        console.print()
        return ""


def confirm_command(command: str) -> bool:
    """Shows the command in green and asks whether to run it."""
    return is_affirmative(_ask(f"run [green]{escape(command)}[/green] \\[y/n]? "))


def confirm_backup(command: str) -> bool:
    """Warns about a deletion command and asks whether to back up its targets first."""
    console.print("[bold yellow]WARNING: This will delete files/directories:[/bold yellow]")
    console.print(f"  {escape(command)}", highlight=False)
    return is_affirmative(_ask("Backup targets before deletion? \\[y/N]: "))


def print_error(message: str) -> None:
    console.print(f"[bold red]Error: {escape(message)}[/bold red]")


def print_info(message: str) -> None:
    console.print(escape(message), highlight=False)


def print_failure(exit_code: int) -> None:
    console.print(f"[yellow]→ Command failed with exit code {exit_code}[/yellow]")


def print_usage(prog: str) -> None:
    console.print(f"Usage: {prog} <description of command>", highlight=False)
    console.print(f"Example: {prog} list all files sorted by size", highlight=False)
    console.print(f"         {prog} analyze 'src/**/*.py' --question 'What does this code do?'", highlight=False)


def display_analysis(text: str, title: str = "Analysis") -> None:
    console.print(Panel(Markdown(text), title=title, border_style="green"))
