"""
Project-level commands: init, tree, graph, evm and list.
"""
import json

import click

from wsb.commands import get_core
from wsb.exceptions import WsbError


@click.command(name="init")
@click.argument("name")
@click.option("-f", "--force", is_flag=True, help="Replace an existing project.")
def init(name: str, force: bool):
    """Create a new project whose root task is NAME."""
    core = get_core()
    try:
        core.init_project(name, force=force)
    except WsbError as e:
        raise click.ClickException(str(e))
    click.echo(f"Created project '{name}' in {core.storage.wsb_dir}")


@click.command(name="tree")
def tree():
    """Print the work breakdown structure as a tree."""
    core = get_core()
    try:
        click.echo(core.tree_text(), nl=False)
    except WsbError as e:
        raise click.ClickException(str(e))


@click.command(name="graph")
@click.option(
    "-o",
    "--output",
    type=click.File("w", encoding="utf-8"),
    default="-",
    help="Write the digraph to this file (default: stdout).",
)
def graph(output):
    """Write the work breakdown structure as a Graphviz digraph."""
    core = get_core()
    try:
        text = core.graph_text()
    except WsbError as e:
        raise click.ClickException(str(e))
    output.write(text)


@click.command(name="evm")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
def evm(json_output: bool):
    """Print earned value management figures for the project."""
    core = get_core()
    try:
        summary = core.evm_summary()
    except WsbError as e:
        raise click.ClickException(str(e))

    if json_output:
        click.echo(json.dumps(summary.model_dump(), indent=2))
        return

    click.echo(f"Planned value:  {summary.planned_value}")
    click.echo(f"Actual cost:    {summary.actual_cost}")
    click.echo(f"Completion:     {summary.completion_percentage * 100:.1f}%")
    click.echo(f"Earned value:   {summary.earned_value}")
    click.echo(f"SPI:            {summary.spi}")
    click.echo(f"SV:             {summary.sv}")
    click.echo(f"CPI:            {summary.cpi}")
    click.echo(f"CV:             {summary.cv}")


@click.command(name="list")
@click.option("--all", "which", flag_value="all", default=True, help="All work packages (default).")
@click.option("--todo", "which", flag_value="todo", help="Work packages not done yet.")
@click.option("--in-progress", "which", flag_value="in-progress", help="Work packages in progress.")
@click.option("--done", "which", flag_value="done", help="Work packages that are done.")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
def list_tasks(which: str, json_output: bool):
    """List work packages (tasks without subtasks)."""
    core = get_core()
    try:
        tasks = core.list_tasks(which)
    except WsbError as e:
        raise click.ClickException(str(e))

    if json_output:
        click.echo(json.dumps([{"id": str(t.id), **t.to_record()} for t in tasks], indent=2))
        return

    if not tasks:
        click.echo("No tasks found.")
        return
    for task in tasks:
        click.echo(task.display(with_dependencies=True))
