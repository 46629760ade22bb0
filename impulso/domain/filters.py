from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .entities import TaskEntity
from .enums import SortPreference, ViewState


@dataclass(frozen=True)
class TaskQuery:
    view: ViewState = ViewState.ACTIVE
    sort: SortPreference = SortPreference.MANUAL


def matches_view(task: TaskEntity, view: ViewState) -> bool:
    if view == ViewState.COMPLETED:
        return task.is_completed
    if view == ViewState.BACKLOG:
        return task.is_backlogged and not task.is_completed
    return task.is_active


def _manual_key(task: TaskEntity) -> tuple:
    return (task.order, task.created_at)


def _priority_key(task: TaskEntity) -> tuple:
    return (-task.priority_score, task.order, task.created_at)


def apply_query(tasks: Iterable[TaskEntity], query: TaskQuery) -> list[TaskEntity]:
    selected = [task for task in tasks if matches_view(task, query.view)]
    if query.view == ViewState.COMPLETED:
        # completed_at is always set inside this view
        return sorted(selected, key=lambda task: task.completed_at, reverse=True)
    if query.sort == SortPreference.PRIORITY:
        return sorted(selected, key=_priority_key)
    return sorted(selected, key=_manual_key)
