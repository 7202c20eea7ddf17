"""Git repository operations."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from git import Git, GitCommandError, GitCommandNotFound
from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)

MAX_RECENT_BRANCHES = 5
BRANCH_FIELD_SEPARATOR = "|"
BRANCH_FORMAT = BRANCH_FIELD_SEPARATOR.join(
    ["%(refname:short)", "%(committerdate:relative)", "%(committerdate:unix)"]
)


class GitError(Exception):
    """Git operation error."""

    def __init__(self, command: str, message: str) -> None:
        """Initialize error.

        Args:
            command: The git subcommand that failed
            message: Error text reported by git
        """
        super().__init__(message)
        self.command = command


@dataclass(frozen=True)
class BranchSummary:
    """A local branch and the date of its last commit."""

    name: str
    relative_time: str
    timestamp: int
    is_current: bool = False


def _stderr_text(err: GitCommandError) -> str:
    """Extract the text git wrote to stderr from a GitCommandError."""
    # GitPython formats it as "\n  stderr: '...'"
    text = str(err.stderr).strip()
    return text.removeprefix("stderr:").strip().strip("'").strip()


class GitCommands:
    """Thin gateway running the git commands this tool needs.

    Every method shells out to the ``git`` executable in ``path`` and raises
    GitError when the command exits non-zero or git cannot be found.
    """

    def __init__(self, path: Path = Path(".")) -> None:
        self.git = Git(str(path))

    def _run(self, command: str, *args: str) -> str:
        logger.debug("git %s %s", command, " ".join(args))
        try:
            return str(getattr(self.git, command.replace("-", "_"))(*args))
        except GitCommandError as err:
            raise GitError(command, _stderr_text(err) or str(err)) from err
        except GitCommandNotFound as err:
            raise GitError(command, f"git executable not found: {err}") from err

    def is_inside_work_tree(self) -> str:
        """Ask git whether the working directory is inside a work tree."""
        return self._run("rev-parse", "--is-inside-work-tree")

    def show_current_branch(self) -> str:
        """Get the checked out branch name, empty when HEAD is detached."""
        return self._run("branch", "--show-current")

    def list_branches_by_date(self) -> str:
        """List local branches, most recently committed first."""
        return self._run("for-each-ref", "--sort=-committerdate", f"--format={BRANCH_FORMAT}", "refs/heads/")

    def status_porcelain(self) -> str:
        """Get the machine-readable working tree status."""
        return self._run("status", "--porcelain")

    def stash_push(self, message: str) -> str:
        """Stash uncommitted changes under ``message``."""
        return self._run("stash", "push", "-m", message)

    def checkout(self, branch: str) -> str:
        """Check out ``branch``. Output is captured, never echoed."""
        return self._run("checkout", branch)


def parse_branch_line(line: str, current: Optional[str]) -> Optional[BranchSummary]:
    """Parse one ``name|relative time|unix timestamp`` line.

    Branch names may contain the separator, so fields are taken from the
    right. Returns None for lines that do not have that shape.
    """
    parts = line.rsplit(BRANCH_FIELD_SEPARATOR, 2)
    if len(parts) != 3:
        return None
    name, relative_time, timestamp = (part.strip() for part in parts)
    try:
        seconds = int(timestamp)
    except ValueError:
        return None
    return BranchSummary(name=name, relative_time=relative_time, timestamp=seconds, is_current=name == current)


class RepositoryProbe:
    """Read-only queries about the repository in the working directory."""

    def __init__(self, commands: GitCommands, console: Console) -> None:
        self.commands = commands
        self.console = console

    def is_repository(self) -> bool:
        """Check whether the working directory is inside a git work tree."""
        try:
            return self.commands.is_inside_work_tree().strip() == "true"
        except GitError as err:
            logger.debug("Not inside a work tree: %s", err)
            return False

    def current_branch(self) -> Optional[str]:
        """Get current branch name, or None when detached or on error."""
        try:
            name = self.commands.show_current_branch().strip()
        except GitError as err:
            self.console.print(f"[red]Error getting current branch: {escape(str(err))}[/red]")
            return None
        # An empty answer means HEAD is detached
        return name or None

    def recent_branches(self, limit: int = MAX_RECENT_BRANCHES) -> list[BranchSummary]:
        """Get local branches by descending commit date, excluding the current one."""
        try:
            output = self.commands.list_branches_by_date()
        except GitError as err:
            self.console.print(f"[red]Error getting branches: {escape(str(err))}[/red]")
            return []

        current = self.current_branch()
        branches = []
        for line in output.splitlines():
            if not line.strip():
                continue
            branch = parse_branch_line(line, current)
            if branch is None:
                self.console.print(f"[yellow]Skipping unreadable branch line: {escape(line)}[/yellow]")
                continue
            if branch.is_current:
                continue
            branches.append(branch)
        return branches[:limit]
