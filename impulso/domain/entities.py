from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from uuid import UUID

from .enums import MetricType, MetricValue


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class TaskMetrics:
    impact: MetricValue = MetricValue.UNSET
    fun: MetricValue = MetricValue.UNSET
    momentum: MetricValue = MetricValue.UNSET
    alignment: MetricValue = MetricValue.UNSET
    effort: MetricValue = MetricValue.UNSET

    def __post_init__(self) -> None:
        for metric in MetricType:
            object.__setattr__(self, metric.value, MetricValue(getattr(self, metric.value)))

    def value(self, metric_type: MetricType) -> MetricValue:
        return getattr(self, MetricType(metric_type).value)

    def update(self, metric_type: MetricType, value: MetricValue) -> TaskMetrics:
        return replace(self, **{MetricType(metric_type).value: MetricValue(value)})

    def as_dict(self) -> dict[str, MetricValue]:
        return {metric.value: self.value(metric) for metric in MetricType}


@dataclass(frozen=True)
class TaskEntity:
    id: UUID
    description: str
    created_at: datetime
    completed_at: Optional[datetime] = None
    order: int = 0
    is_focused: bool = False
    is_backlogged: bool = False
    notes: str | None = None
    metrics: TaskMetrics | None = None
    priority_score: float = 0.0

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def is_active(self) -> bool:
        return not self.is_completed and not self.is_backlogged

    @property
    def has_focus(self) -> bool:
        return self.is_focused and not self.is_completed


@dataclass(frozen=True)
class BackupRecord:
    id: UUID
    created_at: datetime
    path: Path
