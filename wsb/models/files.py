"""
File models for the WSB tracker.

Models representing the structure of the JSON store file in the .wsb/ directory.
"""

from typing import Dict, List

from pydantic import BaseModel, Field, NonNegativeInt

from wsb.constants import STORE_FORMAT_VERSION
from wsb.models.task import TaskStatus


class TaskRecord(BaseModel):
    """Plain field mapping of one task, keyed by its dotted id in StoreFile."""

    name: str = Field(min_length=1)
    planned_value: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    actual_cost: float = Field(default=0.0, allow_inf_nan=False)
    num_child: NonNegativeInt = 0
    status: TaskStatus = TaskStatus.IN_PROGRESS
    dependencies: List[str] = Field(default_factory=list)
    dependents: List[str] = Field(default_factory=list)
    members: List[str] = Field(default_factory=list)


class StoreFile(BaseModel):
    """Model for project.json file.

    Flat mapping of dotted task id to task record. The root task is keyed by "".
    """

    version: int = STORE_FORMAT_VERSION
    tasks: Dict[str, TaskRecord] = Field(default_factory=dict)
