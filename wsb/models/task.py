"""
Task model for the WSB tracker.

A task is a node of the work breakdown structure. Leaves (work packages)
carry authored planned value and actual cost; trunks (summary tasks) carry
the sums of their children. The aggregate fields, the child count and the
status are read-only outside the engine, which keeps them consistent.
"""

from enum import Enum
from typing import Any, Dict, List, Set

from pydantic import BaseModel, Field, PrivateAttr

from wsb.constants import (
    STATUS_DONE,
    STATUS_IN_PROGRESS,
    get_done_glyph,
    get_in_progress_glyph,
)
from wsb.models.task_id import TaskId


class TaskStatus(str, Enum):
    """Completion status of a task."""

    IN_PROGRESS = STATUS_IN_PROGRESS
    DONE = STATUS_DONE

    def to_icon(self) -> str:
        """Glyph shown next to the task in rendered views."""
        if self is TaskStatus.DONE:
            return get_done_glyph()
        return get_in_progress_glyph()


class Task(BaseModel):
    """
    A node of the work breakdown structure.

    Public fields:
    - name: Task name
    - dependencies: Ids this task depends on (display only)
    - dependents: Ids depending on this task (inverse of dependencies)
    - members: Names assigned to this work package

    Engine-maintained (read-only properties):
    - id, planned_value, actual_cost, num_child, status
    """

    name: str
    dependencies: Set[TaskId] = Field(default_factory=set)
    dependents: Set[TaskId] = Field(default_factory=set)
    members: Set[str] = Field(default_factory=set)
    _id: TaskId = PrivateAttr(default_factory=TaskId.root)
    _planned_value: float = PrivateAttr(default=0.0)
    _actual_cost: float = PrivateAttr(default=0.0)
    _num_child: int = PrivateAttr(default=0)
    _status: TaskStatus = PrivateAttr(default=TaskStatus.IN_PROGRESS)

    @classmethod
    def new(cls, task_id: TaskId, name: str) -> "Task":
        """Create a leaf task with zero aggregates, in progress."""
        task = cls(name=name)
        task._id = task_id
        return task

    @property
    def id(self) -> TaskId:
        return self._id

    @property
    def planned_value(self) -> float:
        return self._planned_value

    @property
    def actual_cost(self) -> float:
        return self._actual_cost

    @property
    def num_child(self) -> int:
        return self._num_child

    @property
    def status(self) -> TaskStatus:
        return self._status

    def is_trunk(self) -> bool:
        return self._num_child > 0

    def is_leaf(self) -> bool:
        return self._num_child == 0

    def is_done(self) -> bool:
        return self._status is TaskStatus.DONE

    def child_ids(self) -> List[TaskId]:
        """Identifiers of the direct children, in index order."""
        return self._id.children(self._num_child)

    # =========================================================================
    # Engine-side mutators
    # These bypass the tree invariants; only WsbEngine and TaskStore call them.
    # =========================================================================

    def add_child_slot(self) -> TaskId:
        """Reserve the next child index and return the new child's identifier."""
        self._num_child += 1
        return self._id.new_child(self._num_child)

    def drop_child_slot(self) -> None:
        self._num_child -= 1

    def set_status(self, status: TaskStatus) -> None:
        self._status = status

    def relabel(self, task_id: TaskId) -> None:
        self._id = task_id

    def set_planned_value(self, planned_value: float) -> None:
        self._planned_value = planned_value

    def set_actual_cost(self, actual_cost: float) -> None:
        self._actual_cost = actual_cost

    def add_planned_value(self, diff: float) -> None:
        self._planned_value += diff

    def add_actual_cost(self, diff: float) -> None:
        self._actual_cost += diff

    @classmethod
    def from_record(cls, task_id: TaskId, record: Any) -> "Task":
        """Rebuild a task from a validated TaskRecord."""
        task = cls.new(task_id, record.name)
        task._planned_value = record.planned_value
        task._actual_cost = record.actual_cost
        task._num_child = record.num_child
        task._status = record.status
        task.dependencies = {TaskId.parse(d) for d in record.dependencies}
        task.dependents = {TaskId.parse(d) for d in record.dependents}
        task.members = set(record.members)
        return task

    def display(self, with_dependencies: bool = False) -> str:
        """Render the task on one line.

        Non-root tasks show "<id> - <name>"; the root shows only its name.
        Aggregates and the status glyph follow.

        Args:
            with_dependencies: Append the dependency ids, if any.

        Returns:
            Display text.
        """
        label = self.name if self._id.is_root else f"{self._id} - {self.name}"
        text = f"{label} (pv: {self._planned_value}, ac: {self._actual_cost}) {self._status.to_icon()}"
        if with_dependencies and self.dependencies:
            deps = ", ".join(str(d) for d in sorted(self.dependencies))
            text += f" [deps: {deps}]"
        return text

    def __str__(self) -> str:
        return self.display()

    def to_record(self) -> Dict[str, Any]:
        """Plain field mapping used by the store encoding."""
        return {
            "name": self.name,
            "planned_value": self._planned_value,
            "actual_cost": self._actual_cost,
            "num_child": self._num_child,
            "status": self._status.value,
            "dependencies": sorted(str(d) for d in self.dependencies),
            "dependents": sorted(str(d) for d in self.dependents),
            "members": sorted(self.members),
        }
