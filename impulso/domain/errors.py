from __future__ import annotations

from uuid import UUID


class TaskError(Exception):
    """Base class for every error raised by the task core."""


class ValidationError(TaskError):
    pass


class IndexOutOfRangeError(ValidationError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Index {index} is outside the current view (size {size})")
        self.index = index
        self.size = size


class NotFoundError(TaskError):
    def __init__(self, task_id: UUID) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class PersistError(TaskError):
    pass


class BackupError(TaskError):
    FILE_NOT_FOUND = "Backup file not found"
    INVALID_BACKUP = "Invalid backup file"
    EXPORT_FAILED = "Failed to export data"
    IMPORT_FAILED = "Failed to import data"
