from __future__ import annotations

import json
from datetime import datetime, timedelta

import pytest

from impulso.domain.enums import BackupFrequency, ViewState
from impulso.domain.errors import BackupError
from impulso.services.backup_service import BackupService
from impulso.services.task_store import TaskStore


@pytest.fixture()
def backups(store: TaskStore, clock, tmp_path) -> BackupService:
    return BackupService(store, tmp_path / "backups", clock=clock)


def test_perform_backup_records_history(store: TaskStore, backups: BackupService) -> None:
    store.create("Water plants")

    record = backups.perform_backup()

    assert record.path.exists()
    assert record.path.name.startswith("Impulso_")
    assert record.path.suffix == ".backup"
    assert backups.list_backups() == [record]
    assert backups.last_backup_at == record.created_at


def test_history_survives_restart(store: TaskStore, backups: BackupService, clock, tmp_path) -> None:
    backups.set_frequency(BackupFrequency.WEEKLY)
    record = backups.perform_backup()

    reopened = BackupService(store, tmp_path / "backups", clock=clock)

    assert reopened.frequency == BackupFrequency.WEEKLY
    assert reopened.list_backups() == [record]


def test_list_skips_missing_files(backups: BackupService) -> None:
    record = backups.perform_backup()
    record.path.unlink()

    assert backups.list_backups() == []
    assert backups.last_backup_at is None


def test_restore_backup_replaces_tasks(store: TaskStore, backups: BackupService) -> None:
    kept = store.create("Before backup")
    record = backups.perform_backup()
    store.create("After backup")
    store.complete(kept.id)

    backups.restore_backup(record)

    active = store.query(ViewState.ACTIVE)
    assert [task.id for task in active] == [kept.id]
    assert store.query(ViewState.COMPLETED) == []


def test_restore_missing_backup_raises(backups: BackupService) -> None:
    record = backups.perform_backup()
    record.path.unlink()

    with pytest.raises(BackupError):
        backups.restore_backup(record)


def test_delete_backup(backups: BackupService) -> None:
    record = backups.perform_backup()

    backups.delete_backup(record)

    assert not record.path.exists()
    assert backups.list_backups() == []


def test_backup_due_follows_frequency(backups: BackupService, clock) -> None:
    assert not backups.is_backup_due()

    backups.set_frequency(BackupFrequency.DAILY)
    assert backups.is_backup_due()

    record = backups.backup_if_due()
    assert record is not None
    assert backups.backup_if_due(record.created_at + timedelta(hours=23)) is None
    assert backups.is_backup_due(record.created_at + timedelta(days=1))


def test_export_and_import(store: TaskStore, backups: BackupService, tmp_path) -> None:
    task = store.create("Export me")
    store.set_notes(task.id, "with notes")
    path = backups.export_data(tmp_path / "exports")

    assert path.name.startswith("Impulso_Export_")
    assert path.suffix == ".json"

    store.delete_all()
    assert backups.import_data(path) == 1
    assert store.get(task.id).notes == "with notes"


def test_import_invalid_file_keeps_tasks(store: TaskStore, backups: BackupService, tmp_path) -> None:
    store.create("Safe")
    bad = tmp_path / "bad.json"
    bad.write_text("{broken", encoding="utf-8")

    with pytest.raises(BackupError):
        backups.import_data(bad)

    assert len(store.all_tasks()) == 1


def test_backups_in_same_second_get_unique_names(store: TaskStore, tmp_path) -> None:
    fixed = datetime(2026, 4, 1, 12, 0, 0)
    service = BackupService(store, tmp_path / "backups", clock=lambda: fixed)

    first = service.perform_backup()
    second = service.perform_backup()

    assert first.path != second.path
    assert len(service.list_backups()) == 2


@pytest.mark.parametrize("content", ["[]", '"text"', '{"history": ["not-a-record"]}', "{broken"])
def test_unreadable_history_is_ignored(store: TaskStore, clock, tmp_path, content: str) -> None:
    backup_dir = tmp_path / "backups"
    backup_dir.mkdir()
    (backup_dir / "backup_history.json").write_text(content, encoding="utf-8")

    service = BackupService(store, backup_dir, clock=clock)

    assert service.list_backups() == []
    assert service.perform_backup().path.exists()


def test_backup_writes_store_snapshot(store: TaskStore, backups: BackupService) -> None:
    store.create("Snapshot me")

    record = backups.perform_backup()

    assert json.loads(record.path.read_text(encoding="utf-8")) == store.snapshot()
