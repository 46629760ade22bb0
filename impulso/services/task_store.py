from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable
from uuid import UUID, uuid4

from impulso.domain.entities import TaskEntity, TaskMetrics, utcnow
from impulso.domain.enums import MetricType, MetricValue, SortPreference, ViewState
from impulso.domain.errors import IndexOutOfRangeError, NotFoundError, PersistError, ValidationError
from impulso.domain.filters import TaskQuery, apply_query
from impulso.domain.ports import TaskPersistence
from impulso.infra.snapshot import TaskData, task_to_record

from .priority import PriorityCalculator

logger = logging.getLogger(__name__)

Listener = Callable[["TaskStore"], None]


class TaskStore:
    def __init__(
        self,
        persistence: TaskPersistence,
        calculator: PriorityCalculator | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._persistence = persistence
        self._calculator = calculator or PriorityCalculator()
        self._clock = clock
        self._tasks: dict[UUID, TaskEntity] = {task.id: task for task in persistence.load_all()}
        self._listeners: list[Listener] = []
        self.current_view = ViewState.ACTIVE
        self.sort_preference = SortPreference.MANUAL
        logger.info("TaskStore ready total=%s", len(self._tasks))

    def get(self, task_id: UUID) -> TaskEntity:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def query(
        self,
        view: ViewState | None = None,
        sort: SortPreference | None = None,
    ) -> list[TaskEntity]:
        return apply_query(self._tasks.values(), self._resolve_query(view, sort))

    def all_tasks(self) -> list[TaskEntity]:
        return list(self._tasks.values())

    def get_stats(self) -> dict[str, int]:
        tasks = self._tasks.values()
        return {
            "total": len(self._tasks),
            "active": sum(1 for task in tasks if task.is_active),
            "focused": sum(1 for task in tasks if task.has_focus),
            "backlog": len(self.query(ViewState.BACKLOG)),
            "completed": sum(1 for task in tasks if task.is_completed),
        }

    def create(self, description: str) -> TaskEntity:
        text = (description or "").strip()
        if not text:
            raise ValidationError("Task description must not be empty")
        task = TaskEntity(
            id=uuid4(),
            description=text,
            created_at=self._clock(),
            order=len(self.query(ViewState.ACTIVE)),
        )
        self._tasks[task.id] = task
        self._commit("create", task.id)
        return task

    def update_metrics(self, task_id: UUID, metrics: TaskMetrics) -> TaskEntity:
        task = self.get(task_id)
        return self._put(
            replace(task, metrics=metrics, priority_score=self._calculator.calculate_priority(metrics)),
            "update_metrics",
        )

    def update_metric(self, task_id: UUID, metric_type: MetricType, value: MetricValue) -> TaskEntity:
        task = self.get(task_id)
        metrics = (task.metrics or TaskMetrics()).update(metric_type, value)
        return self.update_metrics(task_id, metrics)

    def focus(self, task_id: UUID) -> TaskEntity:
        task = self.get(task_id)
        if task.is_focused:
            return task
        return self._put(replace(task, is_focused=True), "focus")

    def unfocus(self, task_id: UUID) -> TaskEntity:
        task = self.get(task_id)
        if not task.is_focused:
            return task
        return self._put(replace(task, is_focused=False), "unfocus")

    def toggle_focus(self, task_id: UUID) -> TaskEntity:
        if self.get(task_id).is_focused:
            return self.unfocus(task_id)
        return self.focus(task_id)

    def complete(self, task_id: UUID) -> TaskEntity:
        task = self.get(task_id)
        return self._put(replace(task, completed_at=self._clock()), "complete")

    def toggle_completion(self, task_id: UUID) -> TaskEntity:
        task = self.get(task_id)
        if task.is_completed:
            return self._put(replace(task, completed_at=None), "uncomplete")
        return self.complete(task_id)

    def move_to_backlog(self, task_id: UUID) -> TaskEntity:
        task = self.get(task_id)
        if task.is_backlogged:
            return task
        return self._put(replace(task, is_backlogged=True), "move_to_backlog")

    def restore_from_backlog(self, task_id: UUID) -> TaskEntity:
        task = self.get(task_id)
        if not task.is_backlogged:
            return task
        return self._put(replace(task, is_backlogged=False), "restore_from_backlog")

    def set_notes(self, task_id: UUID, notes: str | None) -> TaskEntity:
        task = self.get(task_id)
        normalized = notes if notes and notes.strip() else None
        return self._put(replace(task, notes=normalized), "set_notes")

    def delete(self, task_id: UUID) -> None:
        if self._tasks.pop(task_id, None) is None:
            logger.debug("delete ignored, unknown task %s", task_id)
            return
        self._commit("delete", task_id)

    def delete_all(self) -> None:
        self._tasks.clear()
        try:
            self._persistence.delete_all()
        except PersistError:
            logger.exception("delete_all failed to persist")
            raise
        self._notify()

    def reorder(
        self,
        source_index: int,
        destination_index: int,
        view: ViewState | None = None,
        sort: SortPreference | None = None,
    ) -> list[TaskEntity]:
        ordered = self.query(view, sort)
        size = len(ordered)
        for index in (source_index, destination_index):
            if not 0 <= index < size:
                raise IndexOutOfRangeError(index, size)

        moved = ordered.pop(source_index)
        ordered.insert(destination_index, moved)
        renumbered = [replace(task, order=index) for index, task in enumerate(ordered)]
        for task in renumbered:
            self._tasks[task.id] = task
        self._commit("reorder", moved.id)
        return renumbered

    def snapshot(self) -> list[TaskData]:
        ordered = sorted(self._tasks.values(), key=lambda task: (task.order, task.created_at))
        return [task_to_record(task) for task in ordered]

    def restore(self, tasks: Iterable[TaskEntity]) -> None:
        incoming = list(tasks)
        ids = [task.id for task in incoming]
        if len(set(ids)) != len(ids):
            raise ValidationError("Snapshot contains duplicate task ids")
        for task in incoming:
            if not task.description.strip() or task.created_at is None:
                raise ValidationError(f"Snapshot task {task.id} is missing a description or creation time")
        self._tasks = {task.id: task for task in incoming}
        self._commit("restore", None)

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _resolve_query(self, view: ViewState | None, sort: SortPreference | None) -> TaskQuery:
        return TaskQuery(
            view=view or self.current_view,
            sort=sort or self.sort_preference,
        )

    def _put(self, task: TaskEntity, action: str) -> TaskEntity:
        self._tasks[task.id] = task
        self._commit(action, task.id)
        return task

    def _commit(self, action: str, task_id: UUID | None) -> None:
        logger.debug("%s task=%s", action, task_id)
        try:
            self._persistence.save_all(list(self._tasks.values()))
        except PersistError:
            logger.exception("Failed to persist %s for task %s", action, task_id)
            raise
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
