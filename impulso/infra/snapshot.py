"""JSON snapshot codec used for exports and backups.

A snapshot is a JSON array of task records::

    {"id": "...", "description": "...", "created_at": "2026-01-01T09:00:00",
     "completed_at": null, "order": 0, "is_focused": false,
     "is_backlogged": false, "notes": null,
     "metrics": {"impact": "high", ...} | null, "priority_score": 96.6}
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable
from uuid import UUID

from impulso.domain.entities import TaskEntity, TaskMetrics
from impulso.domain.enums import MetricType, MetricValue
from impulso.domain.errors import BackupError

TaskData = dict[str, Any]


def _format_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_dt(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def task_to_record(task: TaskEntity) -> TaskData:
    metrics = None
    if task.metrics is not None:
        metrics = {name: value.name.lower() for name, value in task.metrics.as_dict().items()}
    return {
        "id": str(task.id),
        "description": task.description,
        "created_at": _format_dt(task.created_at),
        "completed_at": _format_dt(task.completed_at),
        "order": task.order,
        "is_focused": task.is_focused,
        "is_backlogged": task.is_backlogged,
        "notes": task.notes,
        "metrics": metrics,
        "priority_score": task.priority_score,
    }


def record_to_task(record: TaskData) -> TaskEntity:
    metrics = None
    if record.get("metrics") is not None:
        raw = record["metrics"]
        metrics = TaskMetrics(**{
            metric.value: MetricValue[str(raw.get(metric.value, "unset")).upper()]
            for metric in MetricType
        })
    description = record["description"]
    if not isinstance(description, str) or not description.strip():
        raise BackupError(BackupError.INVALID_BACKUP)
    created_at = _parse_dt(record.get("created_at"))
    if created_at is None:
        raise BackupError(BackupError.INVALID_BACKUP)
    return TaskEntity(
        id=UUID(record["id"]),
        description=description.strip(),
        created_at=created_at,
        completed_at=_parse_dt(record.get("completed_at")),
        order=int(record.get("order", 0)),
        is_focused=bool(record.get("is_focused", False)),
        is_backlogged=bool(record.get("is_backlogged", False)),
        notes=record.get("notes") or None,
        metrics=metrics,
        priority_score=float(record.get("priority_score", 0.0)),
    )


def dump_records(records: Iterable[TaskData]) -> str:
    return json.dumps(list(records), indent=2, sort_keys=True, ensure_ascii=False)


def dumps(tasks: Iterable[TaskEntity]) -> str:
    return dump_records(task_to_record(task) for task in tasks)


def loads(payload: str) -> list[TaskEntity]:
    try:
        records = json.loads(payload)
        if not isinstance(records, list):
            raise TypeError("snapshot must be a JSON array")
        return [record_to_task(record) for record in records]
    except (ValueError, TypeError, KeyError, AttributeError) as exc:
        raise BackupError(BackupError.INVALID_BACKUP) from exc


def write_snapshot(path: Path, tasks: Iterable[TaskEntity]) -> Path:
    return write_records(path, [task_to_record(task) for task in tasks])


def write_records(path: Path, records: Iterable[TaskData]) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_text(dump_records(records), encoding="utf-8")
        tmp_path.replace(path)
    except OSError as exc:
        raise BackupError(BackupError.EXPORT_FAILED) from exc
    return path


def read_snapshot(path: Path) -> list[TaskEntity]:
    if not path.exists():
        raise BackupError(BackupError.FILE_NOT_FOUND)
    try:
        payload = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BackupError(BackupError.IMPORT_FAILED) from exc
    return loads(payload)
