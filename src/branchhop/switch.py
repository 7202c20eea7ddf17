"""Switch the working tree to another branch."""

import logging
from enum import Enum

from rich.console import Console
from rich.markup import escape

from branchhop.git import GitCommands, GitError
from branchhop.ui import Prompter, Spinner

logger = logging.getLogger(__name__)

STASH_MESSAGE = "Auto-stash before branch switch"


class SwitchState(Enum):
    """Steps of a branch switch."""

    START = "start"
    CHECK_DIRTY = "check-dirty"
    CLEAN = "clean"
    DIRTY = "dirty"
    PROMPT_STASH = "prompt-stash"
    STASH = "stash"
    DECLINE = "decline"
    CHECKOUT = "checkout"
    ABORTED = "aborted"
    DONE = "done"
    FAILED = "failed"


def switch_branch(commands: GitCommands, branch: str, prompter: Prompter, console: Console) -> SwitchState:
    """Check out ``branch``, offering to stash uncommitted changes first.

    Returns the final state: DONE, ABORTED (the user declined to stash) or
    FAILED (git reported an error). Every outcome is reported on ``console``.
    """
    if not branch:
        raise ValueError("branch name must not be empty")

    label = f"[cyan]{escape(branch)}[/cyan]"
    state = SwitchState.START
    spinner = Spinner(f"Switching to branch {label}", console).start()

    def advance(next_state: SwitchState) -> SwitchState:
        logger.debug("switch %s: %s -> %s", branch, state.value, next_state.value)
        return next_state

    try:
        state = advance(SwitchState.CHECK_DIRTY)
        if commands.status_porcelain().strip():
            state = advance(SwitchState.DIRTY)
            spinner.warn("You have uncommitted changes.")
            state = advance(SwitchState.PROMPT_STASH)
            if not prompter.confirm("Would you like to stash your changes before switching?", default=True):
                state = advance(SwitchState.DECLINE)
                spinner.fail("Branch switch cancelled")
                return advance(SwitchState.ABORTED)

            state = advance(SwitchState.STASH)
            spinner.update("Stashing changes...")
            spinner.start()
            commands.stash_push(STASH_MESSAGE)
            spinner.succeed("Changes stashed")
            spinner.update(f"Switching to branch {label}")
            spinner.start()
        else:
            state = advance(SwitchState.CLEAN)

        state = advance(SwitchState.CHECKOUT)
        commands.checkout(branch)
    except GitError as err:
        spinner.fail(f"Failed to checkout branch: {escape(str(err))}")
        return advance(SwitchState.FAILED)
    finally:
        # Interrupts at the prompt or during git leave no animation running
        spinner.stop()

    spinner.succeed(f"Successfully switched to branch {label}")
    return advance(SwitchState.DONE)


def checkout_branch(commands: GitCommands, branch: str, prompter: Prompter, console: Console) -> bool:
    """Switch to ``branch`` and report whether the checkout happened."""
    return switch_branch(commands, branch, prompter, console) is SwitchState.DONE
