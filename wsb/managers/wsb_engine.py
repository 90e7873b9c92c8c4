"""
WsbEngine for structural mutation and aggregate propagation.

The engine is stateless: every operation takes the identifiers involved plus
the TaskStore it acts on. It is the only writer of a task's identifier,
aggregates, child count and status, and it keeps these invariants:

- every non-root task's parent is in the store
- each parent's children occupy exactly the indices 1..num_child
- every trunk's planned value and actual cost equal the sums over its children
"""

import logging
import math
from typing import Callable, Dict, Iterable, List, Set, Tuple

from wsb.exceptions import (
    CannotRemoveMemberFromTaskError,
    InvalidDependencyError,
    InvalidValueError,
    LeafHasValuesError,
    TaskNotFoundError,
    TrunkCannotAddMemberError,
    TrunkCannotBeRemovedError,
    TrunkCannotChangeCostError,
    TrunkCannotChangeStatusError,
    TrunkCannotChangeValueError,
    TrunkCannotRemoveMemberError,
    NoNextSiblingError,
    NoPrevSiblingError,
    ValidationError,
    WsbError,
)
from wsb.constants import VALIDATION_NAME_REQUIRED
from wsb.models.store import TaskStore
from wsb.models.task import Task, TaskStatus
from wsb.models.task_id import TaskId

logger = logging.getLogger(__name__)


class WsbEngine:
    """
    Structural operations on a work breakdown structure.

    Handles:
    - Root construction, task insertion and removal with sibling renumbering
    - Planned value / actual cost propagation to ancestors
    - Completion status of leaves and cascading completion of trunks
    - Member assignment and inert dependency links
    - Leaf listings filtered by status
    """

    # =========================================================================
    # Root
    # =========================================================================

    def construct(self, name: str, store: TaskStore) -> Task:
        """Insert the root task named name into an empty store."""
        _require_name(name)
        root = Task.new(TaskId.root(), name)
        store.insert(root)
        logger.debug("Created project '%s'", name)
        return root

    def _root(self, store: TaskStore) -> Task:
        # The root is inserted by construct() and never removed.
        root = store.get(TaskId.root())
        if root is None:
            raise RuntimeError("Store has no root task; it was not built by WsbEngine.construct")
        return root

    def name(self, store: TaskStore) -> str:
        return self._root(store).name

    def planned_value(self, store: TaskStore) -> float:
        return self._root(store).planned_value

    def actual_cost(self, store: TaskStore) -> float:
        return self._root(store).actual_cost

    # =========================================================================
    # Lookup
    # =========================================================================

    def lookup(self, task_id: TaskId, store: TaskStore) -> Task:
        """Get the task under task_id.

        Raises:
            TaskNotFoundError: If no task has this identifier.
        """
        task = store.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def lookup_mutable(self, task_id: TaskId, store: TaskStore) -> Task:
        """Get the task under task_id for editing its public fields.

        Aggregates, child count and status stay read-only; change them
        through the engine.

        Raises:
            TaskNotFoundError: If no task has this identifier.
        """
        return self.lookup(task_id, store)

    def next_sibling(self, task_id: TaskId, store: TaskStore) -> Task:
        """Get the sibling right after task_id.

        Raises:
            NoNextSiblingError: If there is none.
        """
        try:
            return self.lookup(task_id.next_sibling(), store)
        except WsbError as e:
            raise NoNextSiblingError(task_id) from e

    def prev_sibling(self, task_id: TaskId, store: TaskStore) -> Task:
        """Get the sibling right before task_id.

        Raises:
            NoPrevSiblingError: If there is none.
        """
        try:
            return self.lookup(task_id.prev_sibling(), store)
        except WsbError as e:
            raise NoPrevSiblingError(task_id) from e

    def _apply_along_path(
        self, task_id: TaskId, func: Callable[[Task], None], store: TaskStore
    ) -> None:
        """Apply func to every task from the root down to task_id inclusive."""
        for path_id in task_id.path():
            func(self.lookup(path_id, store))

    # =========================================================================
    # Insertion
    # =========================================================================

    def add_task(self, parent_id: TaskId, name: str, store: TaskStore) -> Task:
        """Add a new work package as the last child of parent_id.

        The new task is a leaf with zero aggregates, in progress. Since it is
        not done, every task on its path is set back to in progress.

        Args:
            parent_id: Identifier of the parent task.
            name: Name of the new task.
            store: Store to insert into.

        Returns:
            The new task.

        Raises:
            ValidationError: If the name is empty.
            TaskNotFoundError: If the parent does not exist.
            LeafHasValuesError: If the parent is a leaf with authored values.
        """
        _require_name(name)
        parent = self.lookup(parent_id, store)
        if parent.is_leaf() and (parent.planned_value != 0.0 or parent.actual_cost != 0.0):
            raise LeafHasValuesError(parent_id)

        task_id = parent.add_child_slot()
        task = Task.new(task_id, name)
        store.insert(task)

        self._apply_along_path(task_id, _mark_in_progress, store)

        logger.debug("Added task %s '%s'", task_id, name)
        return task

    def expand(self, pairs: Iterable[Tuple[str, str]], store: TaskStore) -> List[Task]:
        """Add several tasks in order from (parent id text, name) pairs."""
        return [self.add_task(TaskId.parse(parent_text), name, store) for parent_text, name in pairs]

    def rename(self, task_id: TaskId, name: str, store: TaskStore) -> Task:
        _require_name(name)
        task = self.lookup_mutable(task_id, store)
        task.name = name
        return task

    # =========================================================================
    # Aggregates
    # =========================================================================

    def set_planned_value(self, task_id: TaskId, planned_value: float, store: TaskStore) -> None:
        """Set the planned value of a work package and propagate the change.

        Raises:
            NoParentError: If task_id is the root.
            TaskNotFoundError: If the task does not exist.
            TrunkCannotChangeValueError: If the task has subtasks.
            InvalidValueError: If the value is negative or not finite, or an
                ancestor's total would overflow.
        """
        parent_id = task_id.parent()
        task = self.lookup(task_id, store)
        if task.is_trunk():
            raise TrunkCannotChangeValueError(task_id)
        if not math.isfinite(planned_value) or planned_value < 0:
            raise InvalidValueError(task_id, planned_value)

        diff = planned_value - task.planned_value
        self._check_totals(task_id, planned_value, diff, lambda t: t.planned_value, store)
        task.set_planned_value(planned_value)
        self._apply_along_path(parent_id, lambda ancestor: ancestor.add_planned_value(diff), store)
        logger.debug("Planned value of %s set to %s", task_id, planned_value)

    def set_actual_cost(self, task_id: TaskId, actual_cost: float, store: TaskStore) -> None:
        """Set the actual cost of a work package and propagate the change.

        Completion of the ancestors is re-evaluated afterwards.

        Raises:
            NoParentError: If task_id is the root.
            TaskNotFoundError: If the task does not exist.
            TrunkCannotChangeCostError: If the task has subtasks.
            InvalidValueError: If the value is not finite, or an ancestor's
                total would overflow.
        """
        parent_id = task_id.parent()
        task = self.lookup(task_id, store)
        if task.is_trunk():
            raise TrunkCannotChangeCostError(task_id)
        if not math.isfinite(actual_cost):
            raise InvalidValueError(task_id, actual_cost)

        diff = actual_cost - task.actual_cost
        self._check_totals(task_id, actual_cost, diff, lambda t: t.actual_cost, store)
        task.set_actual_cost(actual_cost)
        self._apply_along_path(parent_id, lambda ancestor: ancestor.add_actual_cost(diff), store)
        logger.debug("Actual cost of %s set to %s", task_id, actual_cost)

        self._update_completion(task_id, store)

    def _check_totals(
        self,
        task_id: TaskId,
        value: float,
        diff: float,
        field: Callable[[Task], float],
        store: TaskStore,
    ) -> None:
        """Reject a change that would push any ancestor's total past float range."""
        for path_id in task_id.parent().path():
            if not math.isfinite(field(self.lookup(path_id, store)) + diff):
                raise InvalidValueError(task_id, value)

    # =========================================================================
    # Status
    # =========================================================================

    def _children_are_done(self, task: Task, store: TaskStore) -> bool:
        return all(self.lookup(child_id, store).is_done() for child_id in task.child_ids())

    def _update_completion(self, task_id: TaskId, store: TaskStore) -> None:
        """Walk from task_id to the root; a trunk is done iff all its children are."""
        for path_id in reversed(task_id.path()):
            task = self.lookup(path_id, store)
            if task.is_leaf():
                continue
            if self._children_are_done(task, store):
                if not task.is_done():
                    logger.debug("Task %s completed", path_id)
                task.set_status(TaskStatus.DONE)
            else:
                task.set_status(TaskStatus.IN_PROGRESS)

    def mark_done(self, task_id: TaskId, store: TaskStore) -> Task:
        """Mark a work package done and cascade completion upward.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TrunkCannotChangeStatusError: If the task has subtasks.
        """
        task = self.lookup(task_id, store)
        if task.is_trunk():
            raise TrunkCannotChangeStatusError(task_id)
        task.set_status(TaskStatus.DONE)
        self._update_completion(task_id, store)
        return task

    def mark_in_progress(self, task_id: TaskId, store: TaskStore) -> Task:
        """Reopen a work package; every task on its path is in progress again.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TrunkCannotChangeStatusError: If the task has subtasks.
        """
        task = self.lookup(task_id, store)
        if task.is_trunk():
            raise TrunkCannotChangeStatusError(task_id)
        self._apply_along_path(task_id, _mark_in_progress, store)
        return task

    # =========================================================================
    # Removal
    # =========================================================================

    def remove(self, task_id: TaskId, store: TaskStore) -> Task:
        """Remove a work package and renumber its later siblings.

        Every later sibling's subtree is relabelled one index down at the
        removal depth, so the parent's children stay 1..num_child. The cost
        is proportional to the size of those subtrees.

        Args:
            task_id: Identifier of the leaf to remove.
            store: Store to remove from.

        Returns:
            The removed task, with zeroed aggregates.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TrunkCannotBeRemovedError: If the task has subtasks.
            NoParentError: If task_id is the root.
        """
        task = self.lookup(task_id, store)
        if task.is_trunk():
            raise TrunkCannotBeRemovedError(task_id)
        parent_id = task_id.parent()

        self.set_actual_cost(task_id, 0.0, store)
        self.set_planned_value(task_id, 0.0, store)

        parent = self.lookup(parent_id, store)
        siblings = parent.child_ids()
        parent.drop_child_slot()

        layer_idx = task_id.depth - 1
        removed_index = task_id.child_index()
        removed = store.pop(task_id)
        self._unlink_dependencies(removed, store)

        renamed: Dict[TaskId, TaskId] = {}
        for sibling_id in siblings:
            if sibling_id.child_index() > removed_index:
                self._shift_subtree(sibling_id, layer_idx, store, renamed)

        # The last index at this depth is vacated by the chain of shifts.
        store.pop(parent_id.new_child(len(siblings)))

        self._relabel_dependencies(renamed, store)
        self._update_completion(parent_id, store)

        logger.debug("Removed task %s '%s', renumbered %d task(s)", task_id, removed.name, len(renamed))
        return removed

    def _shift_subtree(
        self,
        task_id: TaskId,
        layer_idx: int,
        store: TaskStore,
        renamed: Dict[TaskId, TaskId],
    ) -> None:
        """Move task_id and its subtree one index down at layer_idx.

        The old entry is popped before the new one is inserted, so two live
        tasks never share an identifier.
        """
        task = store.pop(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        new_id = task_id.with_index(layer_idx, task_id.segments[layer_idx] - 1)
        task.relabel(new_id)
        store.insert(task)
        renamed[task_id] = new_id

        # Children are addressed by the pre-shift identifier.
        for child_id in task_id.children(task.num_child):
            self._shift_subtree(child_id, layer_idx, store, renamed)

    # =========================================================================
    # Members
    # =========================================================================

    def assign_member(self, task_id: TaskId, name: str, store: TaskStore) -> None:
        """Assign a member to a work package.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TrunkCannotAddMemberError: If the task has subtasks.
        """
        task = self.lookup(task_id, store)
        if task.is_trunk():
            raise TrunkCannotAddMemberError(task_id)
        task.members.add(name)

    def remove_member(self, task_id: TaskId, name: str, store: TaskStore) -> None:
        """Remove a member from a work package.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TrunkCannotRemoveMemberError: If the task has subtasks.
            CannotRemoveMemberFromTaskError: If the member is not assigned.
        """
        task = self.lookup(task_id, store)
        if task.is_trunk():
            raise TrunkCannotRemoveMemberError(task_id)
        if name not in task.members:
            raise CannotRemoveMemberFromTaskError(task_id, name)
        task.members.discard(name)

    def members(self, task_id: TaskId, store: TaskStore) -> Set[str]:
        """Members working on task_id: its own plus those of its whole subtree."""
        task = self.lookup(task_id, store)
        names = set(task.members)
        for child_id in task.child_ids():
            names |= self.members(child_id, store)
        return names

    # =========================================================================
    # Dependencies (recorded for display only)
    # =========================================================================

    def add_dependency(self, task_id: TaskId, dependency_id: TaskId, store: TaskStore) -> None:
        """Record that task_id depends on dependency_id.

        Raises:
            TaskNotFoundError: If either task does not exist.
            InvalidDependencyError: If a task would depend on itself.
        """
        task = self.lookup(task_id, store)
        dependency = self.lookup(dependency_id, store)
        if task_id == dependency_id:
            raise InvalidDependencyError(task_id, dependency_id)
        task.dependencies.add(dependency_id)
        dependency.dependents.add(task_id)

    def remove_dependency(self, task_id: TaskId, dependency_id: TaskId, store: TaskStore) -> None:
        """Drop a recorded dependency.

        Raises:
            TaskNotFoundError: If task_id does not exist.
            InvalidDependencyError: If the dependency was not recorded.
        """
        task = self.lookup(task_id, store)
        if dependency_id not in task.dependencies:
            raise InvalidDependencyError(task_id, dependency_id)
        task.dependencies.discard(dependency_id)
        dependency = store.get(dependency_id)
        if dependency is not None:
            dependency.dependents.discard(task_id)

    def _unlink_dependencies(self, removed: Task, store: TaskStore) -> None:
        for dependency_id in removed.dependencies:
            dependency = store.get(dependency_id)
            if dependency is not None:
                dependency.dependents.discard(removed.id)
        for dependent_id in removed.dependents:
            dependent = store.get(dependent_id)
            if dependent is not None:
                dependent.dependencies.discard(removed.id)

    def _relabel_dependencies(self, renamed: Dict[TaskId, TaskId], store: TaskStore) -> None:
        if not renamed:
            return
        for task in store.values():
            if task.dependencies:
                task.dependencies = {renamed.get(d, d) for d in task.dependencies}
            if task.dependents:
                task.dependents = {renamed.get(d, d) for d in task.dependents}

    # =========================================================================
    # Listings (work packages only)
    # =========================================================================

    def tasks(self, store: TaskStore) -> List[Task]:
        return [task for task in store.values() if task.is_leaf()]

    def todo_tasks(self, store: TaskStore) -> List[Task]:
        return [task for task in store.values() if task.is_leaf() and task.status != TaskStatus.DONE]

    def in_progress_tasks(self, store: TaskStore) -> List[Task]:
        return [
            task for task in store.values()
            if task.is_leaf() and task.status == TaskStatus.IN_PROGRESS
        ]

    def done_tasks(self, store: TaskStore) -> List[Task]:
        return [task for task in store.values() if task.is_leaf() and task.status == TaskStatus.DONE]


def _mark_in_progress(task: Task) -> None:
    task.set_status(TaskStatus.IN_PROGRESS)


def _require_name(name: str) -> None:
    if not name or not name.strip():
        raise ValidationError(VALIDATION_NAME_REQUIRED)
