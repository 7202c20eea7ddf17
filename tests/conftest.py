"""Test configuration and fixtures."""

import io
import time
from pathlib import Path
from typing import Optional, Sequence

import pytest
from git import Actor, Repo
from rich.console import Console

from branchhop.git import BranchSummary, GitError

HOUR = 60 * 60
DAY = 24 * HOUR


def commit_on_branch(repo: Repo, path: Path, branch: str, seconds_ago: int, author: Actor) -> None:
    """Create ``branch`` from the current HEAD with one commit dated ``seconds_ago``."""
    head = repo.create_head(branch)
    head.checkout()
    test_file = path / f"{branch}.txt"
    test_file.write_text(f"{branch} content")
    repo.index.add([test_file.name])
    date = f"{int(time.time()) - seconds_ago} +0000"
    repo.index.commit(f"Add {branch}", author=author, committer=author, author_date=date, commit_date=date)


@pytest.fixture
def git_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a repository with ``main`` checked out and two older feature branches.

    Commit recency: feature-x (2 hours ago), bugfix-y (2 days ago), main (3 days ago).
    """
    path = tmp_path / "repo"
    path.mkdir()
    repo = Repo.init(path)

    author = Actor("Test User", "test@example.com")
    with repo.config_writer() as config:
        config.set_value("user", "name", author.name)
        config.set_value("user", "email", author.email)

    readme = path / "README.md"
    readme.write_text("# Test Repository")
    repo.index.add(["README.md"])
    date = f"{int(time.time()) - 3 * DAY} +0000"
    repo.index.commit("Initial commit", author=author, committer=author, author_date=date, commit_date=date)
    # Normalise the default branch name regardless of init.defaultBranch
    repo.git.branch("-M", "main")

    commit_on_branch(repo, path, "bugfix-y", 2 * DAY, author)
    repo.heads.main.checkout()
    commit_on_branch(repo, path, "feature-x", 2 * HOUR, author)
    repo.heads.main.checkout()

    monkeypatch.chdir(path)
    return path


@pytest.fixture
def outside_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A plain directory that git will not treat as part of any work tree."""
    path = tmp_path / "plain"
    path.mkdir()
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.chdir(path)
    return path


@pytest.fixture
def console() -> Console:
    """A console that records output instead of writing to a terminal."""
    return Console(file=io.StringIO(), width=120)


def output_of(console: Console) -> str:
    return console.file.getvalue()


class FakeGit:
    """In-memory stand-in for GitCommands that records every call."""

    def __init__(
        self,
        current: str = "main",
        branches: Sequence[str] = (),
        status: str = "",
        failing: Sequence[str] = (),
    ) -> None:
        self.current = current
        self.branch_lines = list(branches)
        self.status = status
        self.failing = set(failing)
        self.calls: list[tuple[str, ...]] = []

    def _call(self, name: str, *args: str, result: str = "") -> str:
        self.calls.append((name, *args))
        if name in self.failing:
            raise GitError(name, f"{name} went wrong")
        return result

    def called(self, name: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == name]

    def is_inside_work_tree(self) -> str:
        return self._call("rev-parse", result="true")

    def show_current_branch(self) -> str:
        return self._call("branch", result=self.current)

    def list_branches_by_date(self) -> str:
        return self._call("for-each-ref", result="\n".join(self.branch_lines))

    def status_porcelain(self) -> str:
        return self._call("status", result=self.status)

    def stash_push(self, message: str) -> str:
        return self._call("stash", message)

    def checkout(self, branch: str) -> str:
        return self._call("checkout", branch)


class ScriptedPrompter:
    """Prompter that answers from a script and records what it was asked."""

    def __init__(self, selection: Optional[str] = None, stash: bool = True) -> None:
        self.selection = selection
        self.stash = stash
        self.offered: Optional[list[BranchSummary]] = None
        self.questions: list[str] = []

    def select_branch(self, branches: Sequence[BranchSummary]) -> Optional[str]:
        self.offered = list(branches)
        return self.selection

    def confirm(self, question: str, default: bool = True) -> bool:
        self.questions.append(question)
        return self.stash
