from __future__ import annotations

import logging
from typing import Callable
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from impulso.domain.entities import TaskEntity, TaskMetrics
from impulso.domain.enums import MetricType, MetricValue
from impulso.domain.errors import PersistError

from .db import SessionLocal
from .models import TaskModel

logger = logging.getLogger(__name__)


def _metrics_to_row(metrics: TaskMetrics | None) -> dict[str, int] | None:
    if metrics is None:
        return None
    return {name: int(value) for name, value in metrics.as_dict().items()}


def _metrics_from_row(data: dict | None) -> TaskMetrics | None:
    if data is None:
        return None
    return TaskMetrics(**{
        metric.value: MetricValue(data.get(metric.value, MetricValue.UNSET))
        for metric in MetricType
    })


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=UUID(model.id),
        description=model.description,
        created_at=model.created_at,
        completed_at=model.completed_at,
        order=model.sort_order,
        is_focused=model.is_focused,
        is_backlogged=model.is_backlogged,
        notes=model.notes,
        metrics=_metrics_from_row(model.metrics),
        priority_score=model.priority_score,
    )


def _apply(model: TaskModel, task: TaskEntity) -> None:
    model.description = task.description
    model.created_at = task.created_at
    model.completed_at = task.completed_at
    model.sort_order = task.order
    model.is_focused = task.is_focused
    model.is_backlogged = task.is_backlogged
    model.notes = task.notes
    model.metrics = _metrics_to_row(task.metrics)
    model.priority_score = task.priority_score


class SqlTaskRepository:
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self._session_factory = session_factory

    def load_all(self) -> list[TaskEntity]:
        try:
            with self._session_factory() as session:
                stmt = select(TaskModel).order_by(TaskModel.sort_order.asc(), TaskModel.created_at.asc())
                return [_to_entity(task) for task in session.scalars(stmt)]
        except SQLAlchemyError as exc:
            raise PersistError(f"Failed to load tasks: {exc}") from exc

    def save_all(self, tasks: list[TaskEntity]) -> None:
        try:
            with self._session_factory() as session:
                existing = {model.id: model for model in session.scalars(select(TaskModel))}
                keep: set[str] = set()
                for task in tasks:
                    key = str(task.id)
                    model = existing.get(key)
                    if model is None:
                        model = TaskModel(id=key)
                        session.add(model)
                    _apply(model, task)
                    keep.add(key)
                for key, model in existing.items():
                    if key not in keep:
                        session.delete(model)
                session.commit()
        except SQLAlchemyError as exc:
            raise PersistError(f"Failed to save tasks: {exc}") from exc
        logger.debug("Saved %s tasks", len(tasks))

    def delete_all(self) -> None:
        try:
            with self._session_factory() as session:
                session.execute(delete(TaskModel))
                session.commit()
        except SQLAlchemyError as exc:
            raise PersistError(f"Failed to delete tasks: {exc}") from exc
