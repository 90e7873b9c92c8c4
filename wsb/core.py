"""
WsbCore - Core business logic for the WSB tracker using .wsb/ storage.

Orchestrates the engine, the EVM tracker and the storage manager.
Identifiers are accepted as dotted text and parsed here.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

from wsb.exceptions import InvalidOperationError
from wsb.managers import EvmSummary, EvmTracker, StorageManager, WsbEngine
from wsb.models.store import TaskStore
from wsb.models.task import Task
from wsb.models.task_id import TaskId
from wsb.render import graph_text, tree_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

TASK_FILTERS = ("all", "todo", "in-progress", "done")


class WsbCore:
    """
    Core class for business logic operations.

    Orchestrates:
    - StorageManager: Persistence to .wsb/ folder
    - WsbEngine: Structural operations on the task store
    - EvmTracker: EVM figures

    Every operation runs under one lock per store, so a mutation runs to
    completion before any other mutation or read starts.
    """

    def __init__(self, wsb_dir: Optional[Path] = None) -> None:
        """
        Initialize the WsbCore with a .wsb/ directory.

        Args:
            wsb_dir: Path to .wsb/ directory. Defaults to .wsb/ in current directory.
        """
        self.storage = StorageManager(wsb_dir)
        self.engine = WsbEngine()
        self.evm = EvmTracker(self.engine)
        self._lock = threading.RLock()
        self._store: Optional[TaskStore] = None

    @property
    def store(self) -> TaskStore:
        """The task store, loaded from disk on first access."""
        with self._lock:
            if self._store is None:
                self._store = self.storage.load()
            return self._store

    def _mutate(self, func: Callable[[TaskStore], T]) -> T:
        """Run func against the store under the lock and save on success."""
        with self._lock:
            result = func(self.store)
            self.storage.save(self.store)
            return result

    def _read(self, func: Callable[[TaskStore], T]) -> T:
        with self._lock:
            return func(self.store)

    # =========================================================================
    # Project
    # =========================================================================

    def init_project(self, name: str, force: bool = False) -> Task:
        """Create a new project with a root task named name.

        Raises:
            InvalidOperationError: If a project exists and force is not set.
        """
        with self._lock:
            if self.storage.exists() and not force:
                raise InvalidOperationError(
                    f"A project already exists at {self.storage.store_path}. Use --force to replace it."
                )
            store = TaskStore()
            root = self.engine.construct(name, store)
            self.storage.save(store)
            self._store = store
            logger.info("Initialized project '%s' at %s", name, self.storage.store_path)
            return root

    # =========================================================================
    # Tasks
    # =========================================================================

    def get_task(self, task_id: str) -> Task:
        return self._read(lambda store: self.engine.lookup(TaskId.parse(task_id), store))

    def add_task(self, parent_id: str, name: str) -> Task:
        return self._mutate(lambda store: self.engine.add_task(TaskId.parse(parent_id), name, store))

    def remove_task(self, task_id: str) -> Task:
        return self._mutate(lambda store: self.engine.remove(TaskId.parse(task_id), store))

    def rename_task(self, task_id: str, name: str) -> Task:
        return self._mutate(lambda store: self.engine.rename(TaskId.parse(task_id), name, store))

    def set_planned_value(self, task_id: str, value: float) -> Task:
        def _set(store: TaskStore) -> Task:
            parsed = TaskId.parse(task_id)
            self.engine.set_planned_value(parsed, value, store)
            return self.engine.lookup(parsed, store)

        return self._mutate(_set)

    def set_actual_cost(self, task_id: str, value: float) -> Task:
        def _set(store: TaskStore) -> Task:
            parsed = TaskId.parse(task_id)
            self.engine.set_actual_cost(parsed, value, store)
            return self.engine.lookup(parsed, store)

        return self._mutate(_set)

    def mark_done(self, task_id: str) -> Task:
        return self._mutate(lambda store: self.engine.mark_done(TaskId.parse(task_id), store))

    def mark_in_progress(self, task_id: str) -> Task:
        return self._mutate(lambda store: self.engine.mark_in_progress(TaskId.parse(task_id), store))

    def assign_member(self, task_id: str, member: str) -> None:
        self._mutate(lambda store: self.engine.assign_member(TaskId.parse(task_id), member, store))

    def remove_member(self, task_id: str, member: str) -> None:
        self._mutate(lambda store: self.engine.remove_member(TaskId.parse(task_id), member, store))

    def add_dependency(self, task_id: str, dependency_id: str) -> None:
        self._mutate(
            lambda store: self.engine.add_dependency(
                TaskId.parse(task_id), TaskId.parse(dependency_id), store
            )
        )

    def remove_dependency(self, task_id: str, dependency_id: str) -> None:
        self._mutate(
            lambda store: self.engine.remove_dependency(
                TaskId.parse(task_id), TaskId.parse(dependency_id), store
            )
        )

    def list_tasks(self, which: str = "all") -> List[Task]:
        """List work packages, optionally filtered by status.

        Args:
            which: One of "all", "todo", "in-progress", "done".
        """
        listings = {
            "all": self.engine.tasks,
            "todo": self.engine.todo_tasks,
            "in-progress": self.engine.in_progress_tasks,
            "done": self.engine.done_tasks,
        }
        if which not in listings:
            raise InvalidOperationError(f"Unknown task filter '{which}'. Use one of {', '.join(TASK_FILTERS)}.")
        return self._read(listings[which])

    # =========================================================================
    # Views
    # =========================================================================

    def tree_text(self) -> str:
        return self._read(lambda store: tree_text(store, self.engine))

    def graph_text(self) -> str:
        return self._read(lambda store: graph_text(store, self.engine, self.evm))

    def evm_summary(self) -> EvmSummary:
        return self._read(self.evm.summary)
