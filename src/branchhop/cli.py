"""Command line interface for branchhop."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from branchhop.git import MAX_RECENT_BRANCHES, GitCommands, RepositoryProbe
from branchhop.switch import SwitchState, switch_branch
from branchhop.ui import Prompter

app = typer.Typer(help="Switch to a recently used git branch", add_completion=False)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.WARNING) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def run(commands: GitCommands, prompter: Prompter, out: Console, err: Console) -> int:
    """Pick a branch and switch to it. Returns the process exit code."""
    out.print("\n[bold blue]🌿 Git Branch Switcher[/bold blue]\n")

    probe = RepositoryProbe(commands, err)
    if not probe.is_repository():
        err.print("[red]Error: Not in a git repository![/red]")
        err.print("[yellow]Please run this command from within a git repository.[/yellow]")
        return 1

    current = probe.current_branch()
    if current:
        out.print(f"[bright_black]Current branch: [cyan]{escape(current)}[/cyan][/bright_black]\n")

    branches = probe.recent_branches(MAX_RECENT_BRANCHES)
    if not branches:
        out.print("[yellow]No other branches found in this repository.[/yellow]")
        return 0

    selected = prompter.select_branch(branches)
    if selected is None:
        out.print("\n[bright_black]Operation cancelled.[/bright_black]")
        return 0

    state = switch_branch(commands, selected, prompter, out)
    logger.debug("switch to %s finished as %s", selected, state.value)
    # Declining to stash is the user's choice, not an error
    return 1 if state is SwitchState.FAILED else 0


@app.command()
def main() -> None:
    """Pick one of the most recently committed-to branches and check it out."""
    setup_logging()
    try:
        code = run(GitCommands(), Prompter(console), console, err_console)
    except KeyboardInterrupt as err:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(code=130) from err
    except EOFError as err:
        err_console.print("\n[red]Error: input ended before an answer was given[/red]")
        raise typer.Exit(code=1) from err
    except Exception as err:
        err_console.print(f"[red]Fatal error: {escape(str(err))}[/red]")
        raise typer.Exit(code=1) from err
    raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
