"""
Click commands for the WSB CLI.
"""

import click

from wsb.core import WsbCore


def get_core() -> WsbCore:
    """Build a WsbCore for the directory given to the root command, if any."""
    ctx = click.get_current_context(silent=True)
    wsb_dir = None
    if ctx is not None:
        obj = ctx.find_root().obj
        if obj:
            wsb_dir = obj.get("wsb_dir")
    return WsbCore(wsb_dir)
