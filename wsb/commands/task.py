"""
Task commands: add, remove, rename, values, status, members and dependencies.

Task ids are dotted paths such as 2.1.3; the root is "".
"""
import click

from wsb.commands import get_core
from wsb.exceptions import WsbError


@click.command(name="add")
@click.argument("parent_id")
@click.argument("name")
def add(parent_id: str, name: str):
    """Add task NAME as the last child of PARENT_ID ("" for top level)."""
    core = get_core()
    try:
        task = core.add_task(parent_id, name)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(f"Added task {task.id}: {task.name}")


@click.command(name="remove")
@click.argument("task_id")
def remove(task_id: str):
    """Remove work package TASK_ID; later siblings are renumbered."""
    core = get_core()
    try:
        task = core.remove_task(task_id)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(f"Removed task {task_id}: {task.name}")


@click.command(name="rename")
@click.argument("task_id")
@click.argument("name")
def rename(task_id: str, name: str):
    """Rename task TASK_ID to NAME."""
    core = get_core()
    try:
        core.rename_task(task_id, name)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(f"Renamed task {task_id} to {name}")


@click.command(name="set-value")
@click.argument("task_id")
@click.argument("value", type=float)
def set_value(task_id: str, value: float):
    """Set the planned value of work package TASK_ID."""
    core = get_core()
    try:
        task = core.set_planned_value(task_id, value)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(task.display())


@click.command(name="set-cost")
@click.argument("task_id")
@click.argument("value", type=float)
def set_cost(task_id: str, value: float):
    """Set the actual cost of work package TASK_ID."""
    core = get_core()
    try:
        task = core.set_actual_cost(task_id, value)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(task.display())


@click.command(name="done")
@click.argument("task_id")
def done(task_id: str):
    """Mark work package TASK_ID as done."""
    core = get_core()
    try:
        task = core.mark_done(task_id)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(f"Completed task {task.id}: {task.name}")


@click.command(name="reopen")
@click.argument("task_id")
def reopen(task_id: str):
    """Mark work package TASK_ID as in progress again."""
    core = get_core()
    try:
        task = core.mark_in_progress(task_id)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(f"Reopened task {task.id}: {task.name}")


@click.command(name="assign")
@click.argument("task_id")
@click.argument("member")
def assign(task_id: str, member: str):
    """Assign MEMBER to work package TASK_ID."""
    core = get_core()
    try:
        core.assign_member(task_id, member)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(f"Assigned {member} to task {task_id}")


@click.command(name="unassign")
@click.argument("task_id")
@click.argument("member")
def unassign(task_id: str, member: str):
    """Remove MEMBER from work package TASK_ID."""
    core = get_core()
    try:
        core.remove_member(task_id, member)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(f"Removed {member} from task {task_id}")


@click.command(name="depend")
@click.argument("task_id")
@click.argument("dependency_id")
def depend(task_id: str, dependency_id: str):
    """Record that TASK_ID depends on DEPENDENCY_ID (shown in views only)."""
    core = get_core()
    try:
        core.add_dependency(task_id, dependency_id)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(f"Task {task_id} depends on {dependency_id}")


@click.command(name="undepend")
@click.argument("task_id")
@click.argument("dependency_id")
def undepend(task_id: str, dependency_id: str):
    """Drop the recorded dependency of TASK_ID on DEPENDENCY_ID."""
    core = get_core()
    try:
        core.remove_dependency(task_id, dependency_id)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(f"Task {task_id} no longer depends on {dependency_id}")
