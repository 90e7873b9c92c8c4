"""
Hierarchical task identifier.

A TaskId is the path of 1-based sibling indices from the root to a task,
written as dot-separated decimals ("2.1.3"). The root is the empty path and
renders as the empty string.
"""

import re
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from wsb.constants import TASK_ID_SEPARATOR
from wsb.exceptions import (
    BadTaskIdNumError,
    BadTaskIdStringError,
    NoChildIndexError,
    NoParentError,
)

_SEGMENT_PATTERN = re.compile(r"[0-9]+")


class TaskId(BaseModel):
    """Immutable path of sibling indices. Equality and hashing are by value."""

    model_config = ConfigDict(frozen=True)

    segments: Tuple[int, ...] = ()

    @field_validator("segments")
    @classmethod
    def validate_segments(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        """Child indices are 1-based."""
        if any(n < 1 for n in v):
            raise ValueError("Task id segments must be positive integers")
        return v

    @classmethod
    def of(cls, *segments: int) -> "TaskId":
        """Build an identifier from its indices, e.g. TaskId.of(2, 1)."""
        return cls(segments=tuple(segments))

    @classmethod
    def root(cls) -> "TaskId":
        """The identifier of the root task."""
        return cls(segments=())

    @classmethod
    def parse(cls, text: str) -> "TaskId":
        """Parse dotted identifier text.

        Args:
            text: Identifier text such as "2.1.3", or "" for the root.

        Returns:
            The parsed identifier.

        Raises:
            BadTaskIdStringError: If any segment is empty, non-numeric or zero.
        """
        if text == "":
            return cls.root()

        segments: List[int] = []
        for part in text.split(TASK_ID_SEPARATOR):
            if not _SEGMENT_PATTERN.fullmatch(part):
                raise BadTaskIdStringError(text)
            index = int(part)
            if index == 0:
                raise BadTaskIdStringError(text)
            segments.append(index)
        return cls(segments=tuple(segments))

    def to_text(self) -> str:
        return TASK_ID_SEPARATOR.join(str(n) for n in self.segments)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"TaskId('{self.to_text()}')"

    def __lt__(self, other: "TaskId") -> bool:
        if not isinstance(other, TaskId):
            return NotImplemented
        return self.segments < other.segments

    @property
    def depth(self) -> int:
        """Number of indices in the path; 0 for the root."""
        return len(self.segments)

    @property
    def is_root(self) -> bool:
        return not self.segments

    def parent(self) -> "TaskId":
        """Return the identifier with the last index dropped.

        Raises:
            NoParentError: If this is the root identifier.
        """
        if self.is_root:
            raise NoParentError(self)
        return TaskId(segments=self.segments[:-1])

    def child_index(self) -> int:
        """Return the last index of the path.

        Raises:
            NoChildIndexError: If this is the root identifier.
        """
        if self.is_root:
            raise NoChildIndexError(self)
        return self.segments[-1]

    def new_child(self, child_num: int) -> "TaskId":
        """Append a child index.

        Raises:
            BadTaskIdNumError: If child_num is 0.
        """
        if child_num == 0:
            raise BadTaskIdNumError()
        return TaskId(segments=self.segments + (child_num,))

    def next_sibling(self) -> "TaskId":
        """Identifier one index to the right. Existence is not checked."""
        return self.parent().new_child(self.child_index() + 1)

    def prev_sibling(self) -> "TaskId":
        """Identifier one index to the left. Existence is not checked."""
        return self.parent().new_child(self.child_index() - 1)

    def children(self, num_child: int) -> List["TaskId"]:
        """The first num_child direct child identifiers, in index order."""
        return [TaskId(segments=self.segments + (n,)) for n in range(1, num_child + 1)]

    def path(self) -> List["TaskId"]:
        """Identifiers from the root down to and including this one."""
        return [TaskId(segments=self.segments[:depth]) for depth in range(len(self.segments) + 1)]

    def with_index(self, layer_idx: int, child_num: int) -> "TaskId":
        """Copy of this identifier with the index at layer_idx replaced."""
        segments = list(self.segments)
        segments[layer_idx] = child_num
        return TaskId(segments=tuple(segments))
