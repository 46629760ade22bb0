from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from impulso.domain.entities import TaskEntity
from impulso.domain.errors import PersistError
from impulso.infra.db import init_db
from impulso.services.task_store import TaskStore


class FakeRepo:
    def __init__(self, tasks: list[TaskEntity] | None = None) -> None:
        self.tasks: list[TaskEntity] = list(tasks or [])
        self.save_calls = 0
        self.fail_saves = False

    def load_all(self) -> list[TaskEntity]:
        return list(self.tasks)

    def save_all(self, tasks: list[TaskEntity]) -> None:
        if self.fail_saves:
            raise PersistError("disk full")
        self.save_calls += 1
        self.tasks = list(tasks)

    def delete_all(self) -> None:
        if self.fail_saves:
            raise PersistError("disk full")
        self.tasks = []


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 9, 0, 0)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture()
def repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(repo: FakeRepo, clock: FakeClock) -> TaskStore:
    return TaskStore(repo, clock=clock)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


@pytest.fixture()
def make_store(clock: FakeClock):
    def _make(tasks: list[TaskEntity] | None = None) -> tuple[TaskStore, FakeRepo]:
        fake = FakeRepo(tasks)
        return TaskStore(fake, clock=clock), fake

    return _make
