"""Interactive terminal prompts and status output."""

from dataclasses import dataclass
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt

from branchhop.git import BranchSummary

NAME_COLUMN_WIDTH = 30
CANCEL_KEY = 0


@dataclass(frozen=True)
class SelectionChoice:
    """A menu entry. A value of None is the cancel entry."""

    label: str
    value: Optional[str]


def build_choices(branches: Sequence[BranchSummary]) -> list[Optional[SelectionChoice]]:
    """Build menu entries for branches, in order.

    A None entry marks the separator placed before the trailing Cancel entry.
    """
    choices: list[Optional[SelectionChoice]] = [
        SelectionChoice(
            label=(
                f"[cyan]{escape(branch.name.ljust(NAME_COLUMN_WIDTH))}[/cyan] "
                f"[bright_black]{escape(branch.relative_time)}[/bright_black]"
            ),
            value=branch.name,
        )
        for branch in branches
    ]
    choices.append(None)
    choices.append(SelectionChoice(label="[bright_black]Cancel[/bright_black]", value=None))
    return choices


class Prompter:
    """Asks the user questions on a rich console."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def select_branch(self, branches: Sequence[BranchSummary]) -> Optional[str]:
        """Show a numbered branch menu and return the chosen name, or None for Cancel."""
        entries: dict[int, SelectionChoice] = {}
        number = 0
        for choice in build_choices(branches):
            if choice is None:
                self.console.rule(style="bright_black")
                continue
            if choice.value is None:
                key = CANCEL_KEY
            else:
                number += 1
                key = number
            entries[key] = choice
            self.console.print(f"  [bold]{key}[/bold]  {choice.label}")

        answer = IntPrompt.ask(
            "Select a branch to checkout",
            console=self.console,
            choices=[str(key) for key in entries],
            show_choices=False,
        )
        return entries[answer].value

    def confirm(self, question: str, default: bool = True) -> bool:
        return Confirm.ask(question, console=self.console, default=default)


class Spinner:
    """Transient status line with success, warning and failure end states."""

    def __init__(self, text: str, console: Console) -> None:
        self.console = console
        self._status = console.status(text)

    def start(self) -> "Spinner":
        self._status.start()
        return self

    def update(self, text: str) -> None:
        self._status.update(text)

    def stop(self) -> None:
        """Stop the animation without printing a final line."""
        self._status.stop()

    def succeed(self, message: str) -> None:
        self._finish("[green]✔[/green]", f"[green]{message}[/green]")

    def warn(self, message: str) -> None:
        self._finish("[yellow]⚠[/yellow]", f"[yellow]{message}[/yellow]")

    def fail(self, message: str) -> None:
        self._finish("[red]✖[/red]", f"[red]{message}[/red]")

    def _finish(self, symbol: str, message: str) -> None:
        self.stop()
        self.console.print(f"{symbol} {message}")
