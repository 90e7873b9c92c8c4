"""
Custom exceptions for the WSB tracker.

Every engine failure is a deterministic rejection of a request against the
current tree state. Each exception carries the offending values as attributes.
"""


class WsbError(Exception):
    """Base exception for all WSB-related errors."""
    pass


class ValidationError(WsbError):
    """Raised when a value or identifier fails validation."""
    pass


class NotFoundError(WsbError):
    """Raised when a requested task is not found."""
    pass


class InvalidOperationError(WsbError):
    """Raised when an operation is not allowed in the current state."""
    pass


class ConfigurationError(WsbError):
    """Raised when there's a configuration or setup issue."""
    pass


class StorageError(WsbError):
    """Raised when the store file cannot be read or written."""
    pass


# =============================================================================
# Identifier errors
# =============================================================================


class NoParentError(ValidationError):
    """Raised when asking the root identifier for its parent."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__("The root task has no parent.")


class NoChildIndexError(ValidationError):
    """Raised when asking the root identifier for its child index."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__("The root task has no child index.")


class BadTaskIdStringError(ValidationError):
    """Raised when identifier text is not dot-separated positive integers."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(
            f"Invalid task id '{text}'. Expected dot-separated positive integers, e.g. '2.1.3'."
        )


class BadTaskIdNumError(ValidationError):
    """Raised when a child index of 0 is requested (indices are 1-based)."""

    def __init__(self) -> None:
        super().__init__("Child indices start at 1.")


# =============================================================================
# Lookup errors
# =============================================================================


class TaskNotFoundError(NotFoundError):
    """Raised when no task exists under an identifier."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' not found.")


class NoNextSiblingError(NotFoundError):
    """Raised when a task has no following sibling."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' has no next sibling.")


class NoPrevSiblingError(NotFoundError):
    """Raised when a task has no preceding sibling."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' has no previous sibling.")


# =============================================================================
# Trunk/leaf rule violations
# =============================================================================


class TrunkCannotBeRemovedError(InvalidOperationError):
    """Raised when removing a task that still has children."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' has subtasks and cannot be removed.")


class TrunkCannotChangeCostError(InvalidOperationError):
    """Raised when setting the actual cost of a summary task."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__(
            f"Task '{task_id}' has subtasks; its actual cost is the sum of theirs."
        )


class TrunkCannotChangeValueError(InvalidOperationError):
    """Raised when setting the planned value of a summary task."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__(
            f"Task '{task_id}' has subtasks; its planned value is the sum of theirs."
        )


class TrunkCannotChangeStatusError(InvalidOperationError):
    """Raised when setting the status of a summary task directly."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__(
            f"Task '{task_id}' has subtasks; it is done when all of them are done."
        )


class TrunkCannotAddMemberError(InvalidOperationError):
    """Raised when assigning a member to a summary task."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__(
            f"Task '{task_id}' has subtasks; assign members to a work package instead."
        )


class TrunkCannotRemoveMemberError(InvalidOperationError):
    """Raised when removing a member from a summary task."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__(
            f"Task '{task_id}' has subtasks; remove members from a work package instead."
        )


class CannotRemoveMemberFromTaskError(InvalidOperationError):
    """Raised when removing a member that is not assigned to the task."""

    def __init__(self, task_id, name: str) -> None:
        self.task_id = task_id
        self.name = name
        super().__init__(f"'{name}' is not assigned to task '{task_id}'.")


# =============================================================================
# Value errors
# =============================================================================


class InvalidValueError(ValidationError):
    """Raised when a planned value or actual cost is out of range."""

    def __init__(self, task_id, value: float) -> None:
        self.task_id = task_id
        self.value = value
        super().__init__(f"Invalid value {value} for task '{task_id}'.")


class InvalidDependencyError(ValidationError):
    """Raised when a dependency link cannot be recorded."""

    def __init__(self, task_id, dependency_id) -> None:
        self.task_id = task_id
        self.dependency_id = dependency_id
        super().__init__(f"Task '{task_id}' cannot depend on '{dependency_id}'.")


class LeafHasValuesError(InvalidOperationError):
    """Raised when splitting a work package that still carries authored values."""

    def __init__(self, task_id) -> None:
        self.task_id = task_id
        super().__init__(
            f"Task '{task_id}' carries a planned value or actual cost; "
            "set both to 0 before adding subtasks."
        )
