"""
Task store for the WSB tracker.

The store is the sole holder of task data: a mapping from identifier to task,
forming an implicit tree through the identifiers' prefixes. The engine owns
all structural changes; the store only guarantees that no two live tasks
share an identifier.
"""

import math
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from wsb.exceptions import InvalidOperationError, ValidationError
from wsb.models.files import TaskRecord
from wsb.models.task import Task
from wsb.models.task_id import TaskId


class TaskStore:
    """
    Identifier-keyed mapping of tasks.

    Encoded for persistence as a plain {dotted id: task fields} mapping via
    to_dict()/from_dict().
    """

    def __init__(self) -> None:
        self._tasks: Dict[TaskId, Task] = {}

    def __contains__(self, task_id: TaskId) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[TaskId]:
        return iter(self._tasks)

    def get(self, task_id: TaskId) -> Optional[Task]:
        return self._tasks.get(task_id)

    def ids(self) -> List[TaskId]:
        """All identifiers, in tree (pre-order) order."""
        return sorted(self._tasks)

    def values(self) -> List[Task]:
        """All tasks, in tree (pre-order) order."""
        return [self._tasks[task_id] for task_id in self.ids()]

    def items(self) -> List[Tuple[TaskId, Task]]:
        return [(task_id, self._tasks[task_id]) for task_id in self.ids()]

    def insert(self, task: Task) -> None:
        """Add a task under its own identifier.

        Raises:
            InvalidOperationError: If the identifier is already in use.
        """
        if task.id in self._tasks:
            raise InvalidOperationError(f"Task id '{task.id}' is already in use.")
        self._tasks[task.id] = task

    def pop(self, task_id: TaskId) -> Optional[Task]:
        """Remove and return the task under task_id, or None if absent."""
        return self._tasks.pop(task_id, None)

    # =========================================================================
    # Encoding
    # =========================================================================

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Plain mapping of dotted id to task fields."""
        return {str(task_id): task.to_record() for task_id, task in self.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskStore":
        """Rebuild a store from the mapping produced by to_dict().

        Args:
            data: Mapping of dotted id to task fields.

        Returns:
            The rebuilt store.

        Raises:
            ValidationError: If a record is malformed or the tree is inconsistent.
        """
        store = cls()
        for text, fields in data.items():
            task_id = TaskId.parse(text)
            try:
                record = TaskRecord.model_validate(fields)
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid record for task '{text}': {e}")

            store.insert(Task.from_record(task_id, record))

        store.validate()
        return store

    # =========================================================================
    # Invariants
    # =========================================================================

    def validate(self) -> None:
        """Check the structural and aggregate invariants of the tree.

        - the root exists
        - every task's parent exists
        - each parent's children occupy exactly 1..num_child
        - every trunk's aggregates equal the sums over its children
        - dependency links point at existing tasks and are recorded on both ends

        Raises:
            ValidationError: On the first violation found.
        """
        if TaskId.root() not in self._tasks:
            raise ValidationError("Store has no root task.")

        expected = {TaskId.root()}
        for task in self._tasks.values():
            expected.update(task.child_ids())
        if expected != set(self._tasks):
            missing = sorted(expected - set(self._tasks))
            extra = sorted(set(self._tasks) - expected)
            raise ValidationError(
                f"Task ids are not contiguous (missing: {[str(i) for i in missing]}, "
                f"unexpected: {[str(i) for i in extra]})."
            )

        for task in self._tasks.values():
            if task.is_leaf():
                continue
            children = [self._tasks[child_id] for child_id in task.child_ids()]
            planned = sum(child.planned_value for child in children)
            actual = sum(child.actual_cost for child in children)
            if not math.isclose(task.planned_value, planned, abs_tol=1e-6):
                raise ValidationError(
                    f"Planned value of '{task.id}' is {task.planned_value}, children sum to {planned}."
                )
            if not math.isclose(task.actual_cost, actual, abs_tol=1e-6):
                raise ValidationError(
                    f"Actual cost of '{task.id}' is {task.actual_cost}, children sum to {actual}."
                )

        for task in self._tasks.values():
            for dependency_id in task.dependencies:
                dependency = self._tasks.get(dependency_id)
                if dependency is None or task.id not in dependency.dependents:
                    raise ValidationError(
                        f"Task '{task.id}' depends on '{dependency_id}', which is missing or not linked back."
                    )
            for dependent_id in task.dependents:
                dependent = self._tasks.get(dependent_id)
                if dependent is None or task.id not in dependent.dependencies:
                    raise ValidationError(
                        f"Task '{task.id}' lists dependent '{dependent_id}', which is missing or not linked back."
                    )
