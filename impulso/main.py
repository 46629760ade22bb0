from __future__ import annotations

import logging
from dataclasses import dataclass

from impulso.config import PROJECT_ROOT, SETTINGS
from impulso.infra.db import init_db
from impulso.infra.logging import setup_logging
from impulso.infra.repository import SqlTaskRepository
from impulso.services.backup_service import BackupService
from impulso.services.task_store import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class Application:
    store: TaskStore
    backups: BackupService


def build_application() -> Application:
    setup_logging()
    init_db()
    store = TaskStore(SqlTaskRepository())
    backups = BackupService(
        store,
        PROJECT_ROOT / SETTINGS.backup_dir,
        frequency=SETTINGS.backup_frequency,
    )
    return Application(store=store, backups=backups)


def main() -> None:
    app = build_application()
    record = app.backups.backup_if_due()
    if record:
        logger.info("Automatic backup created at %s", record.path)
    logger.info("Tasks: %s", app.store.get_stats())


if __name__ == "__main__":
    main()
