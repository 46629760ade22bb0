from __future__ import annotations

from datetime import timedelta
from enum import IntEnum, StrEnum


class MetricValue(IntEnum):
    UNSET = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class MetricType(StrEnum):
    IMPACT = "impact"
    FUN = "fun"
    MOMENTUM = "momentum"
    ALIGNMENT = "alignment"
    EFFORT = "effort"


class ViewState(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    BACKLOG = "backlog"


class SortPreference(StrEnum):
    MANUAL = "manual"
    PRIORITY = "priority"


class BackupFrequency(IntEnum):
    NEVER = 0
    DAILY = 1
    WEEKLY = 2
    MONTHLY = 3

    @property
    def interval(self) -> timedelta:
        return _BACKUP_INTERVALS[self]

    @classmethod
    def from_name(cls, name: str) -> BackupFrequency:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown backup frequency: {name!r}") from None


_BACKUP_INTERVALS = {
    BackupFrequency.NEVER: timedelta(0),
    BackupFrequency.DAILY: timedelta(days=1),
    BackupFrequency.WEEKLY: timedelta(days=7),
    BackupFrequency.MONTHLY: timedelta(days=30),
}
