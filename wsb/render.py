"""
Read-only text views of a work breakdown structure.

- tree_text: indented tree with box-drawing connectors
- graph_text: Graphviz digraph with the EVM figures as graph label
"""

from typing import List, Optional

from wsb.constants import TREE_BLANK, TREE_BRANCH, TREE_CONTINUATION, TREE_LAST_BRANCH
from wsb.exceptions import NoNextSiblingError
from wsb.managers.evm_tracker import EvmTracker
from wsb.managers.wsb_engine import WsbEngine
from wsb.models.store import TaskStore
from wsb.models.task_id import TaskId


def _subtasks_to_tree_text(
    engine: WsbEngine, task_id: TaskId, prefix: str, store: TaskStore
) -> List[str]:
    lines: List[str] = []
    task = engine.lookup(task_id, store)

    for child_id in task.child_ids():
        child = engine.lookup(child_id, store)
        try:
            engine.next_sibling(child_id, store)
        except NoNextSiblingError:
            lines.append(f"{prefix}{TREE_LAST_BRANCH}{child.display()}")
            lines.extend(_subtasks_to_tree_text(engine, child_id, prefix + TREE_BLANK, store))
        else:
            lines.append(f"{prefix}{TREE_BRANCH}{child.display()}")
            lines.extend(_subtasks_to_tree_text(engine, child_id, prefix + TREE_CONTINUATION, store))
    return lines


def tree_text(store: TaskStore, engine: Optional[WsbEngine] = None) -> str:
    """Render the tree, one line per task, root first.

    Example:
        Project (pv: 2.0, ac: 0.0) ✗
        ├─ 1 - A (pv: 2.0, ac: 0.0) ✗
        │  └─ 1.1 - B (pv: 2.0, ac: 0.0) ✗
        └─ 2 - C (pv: 0.0, ac: 0.0) ✗
    """
    engine = engine or WsbEngine()
    root = engine.lookup(TaskId.root(), store)
    lines = [root.display()] + _subtasks_to_tree_text(engine, TaskId.root(), "", store)
    return "\n".join(lines) + "\n"


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _subtasks_to_graph_text(engine: WsbEngine, task_id: TaskId, store: TaskStore) -> List[str]:
    lines: List[str] = []
    task = engine.lookup(task_id, store)
    task_label = _quote(task.display(with_dependencies=True))

    for child_id in task.child_ids():
        child = engine.lookup(child_id, store)
        lines.append(f"\t{task_label} -> {_quote(child.display(with_dependencies=True))}")
        lines.extend(_subtasks_to_graph_text(engine, child_id, store))
    return lines


def graph_text(
    store: TaskStore,
    engine: Optional[WsbEngine] = None,
    tracker: Optional[EvmTracker] = None,
) -> str:
    """Render the tree as a Graphviz digraph, one edge per parent/child pair.

    The text ends with a newline after the closing brace.
    """
    engine = engine or WsbEngine()
    tracker = tracker or EvmTracker(engine)
    stats = (
        f"earned value: {tracker.earned_value(store)}, "
        f"spi: {tracker.spi(store)}, "
        f"sv: {tracker.sv(store)}, "
        f"cpi: {tracker.cpi(store)}, "
        f"cv: {tracker.cv(store)}"
    )
    lines = ["digraph G {", f"label={_quote(stats)}"]
    lines.extend(_subtasks_to_graph_text(engine, TaskId.root(), store))
    lines.append("}")
    return "\n".join(lines) + "\n"
