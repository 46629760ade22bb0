from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable
from uuid import UUID, uuid4

from impulso.domain.entities import BackupRecord, utcnow
from impulso.domain.enums import BackupFrequency
from impulso.domain.errors import BackupError
from impulso.infra import snapshot

from .task_store import TaskStore

logger = logging.getLogger(__name__)

HISTORY_FILE = "backup_history.json"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


class BackupService:
    def __init__(
        self,
        store: TaskStore,
        backup_dir: Path | str,
        frequency: BackupFrequency = BackupFrequency.NEVER,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._backup_dir = Path(backup_dir)
        self._clock = clock
        self._frequency = frequency
        self._history: list[BackupRecord] = []
        self._load_state()

    @property
    def frequency(self) -> BackupFrequency:
        return self._frequency

    @property
    def last_backup_at(self) -> datetime | None:
        records = self.list_backups()
        return max((record.created_at for record in records), default=None)

    def set_frequency(self, frequency: BackupFrequency) -> None:
        self._frequency = BackupFrequency(frequency)
        self._save_state()
        logger.info("Automatic backups set to %s", self._frequency.name.lower())

    def list_backups(self) -> list[BackupRecord]:
        return [record for record in self._history if record.path.exists()]

    def perform_backup(self) -> BackupRecord:
        now = self._clock()
        path = self._unique_path(self._backup_dir, f"Impulso_{now.strftime(TIMESTAMP_FORMAT)}", ".backup")
        snapshot.write_records(path, self._store.snapshot())
        record = BackupRecord(id=uuid4(), created_at=now, path=path)
        self._history.append(record)
        self._save_state()
        logger.info("Backup written to %s", path)
        return record

    def restore_backup(self, record: BackupRecord) -> None:
        if not record.path.exists():
            raise BackupError(BackupError.FILE_NOT_FOUND)
        tasks = snapshot.read_snapshot(record.path)
        self._store.restore(tasks)
        logger.info("Restored %s tasks from %s", len(tasks), record.path)

    def delete_backup(self, record: BackupRecord) -> None:
        try:
            record.path.unlink(missing_ok=True)
        except OSError as exc:
            raise BackupError(f"Failed to delete backup {record.path}") from exc
        self._history = [item for item in self._history if item.id != record.id]
        self._save_state()

    def is_backup_due(self, now: datetime | None = None) -> bool:
        if self._frequency == BackupFrequency.NEVER:
            return False
        last = self.last_backup_at
        if last is None:
            return True
        return (now or self._clock()) - last >= self._frequency.interval

    def backup_if_due(self, now: datetime | None = None) -> BackupRecord | None:
        if not self.is_backup_due(now):
            return None
        try:
            return self.perform_backup()
        except BackupError:
            logger.exception("Automatic backup failed")
            raise

    def export_data(self, directory: Path | str) -> Path:
        now = self._clock()
        path = self._unique_path(Path(directory), f"Impulso_Export_{now.strftime(TIMESTAMP_FORMAT)}", ".json")
        records = self._store.snapshot()
        snapshot.write_records(path, records)
        logger.info("Exported %s tasks to %s", len(records), path)
        return path

    def import_data(self, path: Path | str) -> int:
        tasks = snapshot.read_snapshot(Path(path))
        self._store.restore(tasks)
        logger.info("Imported %s tasks from %s", len(tasks), path)
        return len(tasks)

    @staticmethod
    def _unique_path(directory: Path, stem: str, suffix: str) -> Path:
        path = directory / f"{stem}{suffix}"
        counter = 1
        while path.exists():
            path = directory / f"{stem}_{counter}{suffix}"
            counter += 1
        return path

    def _state_path(self) -> Path:
        return self._backup_dir / HISTORY_FILE

    def _load_state(self) -> None:
        path = self._state_path()
        if not path.exists():
            return
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise TypeError("backup history must be a JSON object")
            self._frequency = BackupFrequency.from_name(data.get("frequency", self._frequency.name))
            self._history = [
                BackupRecord(
                    id=UUID(item["id"]),
                    created_at=datetime.fromisoformat(item["created_at"]),
                    path=Path(item["path"]),
                )
                for item in data.get("history", [])
            ]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Ignoring unreadable backup history %s: %s", path, exc)
            self._history = []

    def _save_state(self) -> None:
        data = {
            "frequency": self._frequency.name.lower(),
            "history": [
                {
                    "id": str(record.id),
                    "created_at": record.created_at.isoformat(),
                    "path": str(record.path),
                }
                for record in self._history
            ],
        }
        try:
            self._backup_dir.mkdir(parents=True, exist_ok=True)
            self._state_path().write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            raise BackupError(f"Failed to save backup history: {exc}") from exc
