"""
Data models for the WSB tracker.

Import models explicitly from their modules:
    from wsb.models.task_id import TaskId
    from wsb.models.task import Task, TaskStatus
    from wsb.models.store import TaskStore
    from wsb.models.files import StoreFile, TaskRecord
"""

from .task_id import TaskId
from .task import Task, TaskStatus
from .store import TaskStore

__all__ = ["TaskId", "Task", "TaskStatus", "TaskStore"]
