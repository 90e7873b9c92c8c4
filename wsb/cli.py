"""
CLI for the WSB tracker using .wsb/ folder-based storage.

Uses WsbCore exclusively.
"""
import logging
from pathlib import Path
from typing import Optional

import click

from wsb.commands.project import evm, graph, init, list_tasks, tree
from wsb.commands.task import (
    add,
    assign,
    depend,
    done,
    remove,
    rename,
    reopen,
    set_cost,
    set_value,
    unassign,
    undepend,
)
from wsb.constants import ConfigManager, get_log_dir, set_config_manager
from wsb.exceptions import WsbError
from wsb.logging_setup import setup_logging


@click.group()
@click.option(
    "--wsb-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory (default: .wsb in the current directory).",
)
@click.option("--log-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Also write debug logs to this directory (default: log_dir from config.json).")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs on stderr.")
@click.pass_context
def cli(ctx: click.Context, wsb_dir: Optional[Path], log_dir: Optional[Path], verbose: bool):
    """Track a work breakdown structure and its earned value figures."""
    ctx.ensure_object(dict)
    ctx.obj["wsb_dir"] = wsb_dir
    if wsb_dir is not None:
        set_config_manager(ConfigManager(wsb_dir=wsb_dir))
    if log_dir is None:
        try:
            log_dir = get_log_dir()
        except WsbError as e:
            raise click.ClickException(str(e))
    setup_logging(
        log_dir=log_dir,
        console_level=logging.DEBUG if verbose else logging.WARNING,
    )


cli.add_command(init)
cli.add_command(tree)
cli.add_command(graph)
cli.add_command(evm)
cli.add_command(list_tasks)
cli.add_command(add)
cli.add_command(remove)
cli.add_command(rename)
cli.add_command(set_value)
cli.add_command(set_cost)
cli.add_command(done)
cli.add_command(reopen)
cli.add_command(assign)
cli.add_command(unassign)
cli.add_command(depend)
cli.add_command(undepend)


if __name__ == '__main__':
    cli()
