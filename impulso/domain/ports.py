from __future__ import annotations

from typing import Protocol

from .entities import TaskEntity


class TaskPersistence(Protocol):
    def load_all(self) -> list[TaskEntity]: ...

    def save_all(self, tasks: list[TaskEntity]) -> None: ...

    def delete_all(self) -> None: ...
