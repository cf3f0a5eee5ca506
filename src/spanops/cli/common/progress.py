"""Progress display for the provisioning lifecycle."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator

from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from spanops.cli.common.output import console
from spanops.core.models import ProvisioningState

_LABELS = {
    ProvisioningState.ABSENT: "idle",
    ProvisioningState.INSTANCE_CREATING: "creating instance",
    ProvisioningState.INSTANCE_READY: "instance ready",
    ProvisioningState.DATABASE_CREATING: "creating database",
    ProvisioningState.DATABASE_READY: "database ready, running CRUD steps",
    ProvisioningState.DATABASE_DROPPING: "dropping database",
    ProvisioningState.INSTANCE_DELETING: "deleting instance",
    ProvisioningState.FAILED: "failed",
}


def _style_for(state: ProvisioningState) -> str:
    if state in (ProvisioningState.INSTANCE_READY, ProvisioningState.DATABASE_READY):
        return "green"
    if state is ProvisioningState.FAILED:
        return "red"
    if state is ProvisioningState.ABSENT:
        return "dim"
    return "yellow"


def describe_state(state: ProvisioningState) -> str:
    """Return a short human-readable label for a provisioning state."""
    return _LABELS.get(state, state.value.lower())


@contextmanager
def state_progress() -> Iterator[Callable[[ProvisioningState], None]]:
    """
    Show one spinner row that follows the provisioning state machine.

    Yields a callback suitable for ``Provisioner.on_state``. The row
    keeps its elapsed timer running until the block exits.
    """
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]lifecycle[/]"),
        TextColumn("[{task.fields[style]}]{task.fields[label]}[/{task.fields[style]}]"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    task_id = progress.add_task(
        "",
        total=1,
        label=describe_state(ProvisioningState.ABSENT),
        style=_style_for(ProvisioningState.ABSENT),
    )

    def _on_state(state: ProvisioningState) -> None:
        progress.update(task_id, label=describe_state(state), style=_style_for(state))

    with progress:
        yield _on_state
        progress.update(task_id, completed=1)
