import dataclasses
import itertools
from datetime import datetime

import pytest

from rollover import config
from rollover.config import Settings
from rollover.core.models import COMPLETED, RunStat, Task, TaskList


@pytest.fixture
def tmp_rollover_dir(tmp_path, monkeypatch):
    home = tmp_path / ".rollover"
    monkeypatch.setattr(config, "ROLLOVER_DIR", home)
    monkeypatch.setattr(config, "DB_PATH", home / "rollover.db")
    monkeypatch.setattr(config, "CONFIG_PATH", home / "config.yaml")
    monkeypatch.setattr(config, "LOG_FILE", home / "rollover.log")
    monkeypatch.setattr(config, "LOCK_PATH", home / "run.lock")
    return home


class FakeStore:
    """In-memory task store that records every mutating call."""

    def __init__(self):
        self.lists: dict[str, TaskList] = {}
        self.tasks: dict[str, list[Task]] = {}
        self.calls: list[tuple] = []
        self._ids = itertools.count(1)
        self.fail_on: set[str] = set()

    def _next(self, prefix: str) -> str:
        return f"{prefix}{next(self._ids)}"

    def _check(self, op: str) -> None:
        if op in self.fail_on:
            raise RuntimeError(f"{op} exploded")

    def add_list(self, title: str) -> TaskList:
        task_list = TaskList(id=self._next("L"), title=title)
        self.lists[task_list.id] = task_list
        self.tasks[task_list.id] = []
        return task_list

    def add_task(self, list_id: str, title: str, **fields) -> Task:
        task = Task(id=self._next("T"), title=title, **fields)
        self.tasks[list_id].append(task)
        return task

    def titles(self, list_id: str) -> list[str]:
        return [t.title for t in self.tasks[list_id]]

    def list_by_title(self, title: str) -> TaskList | None:
        return next((tl for tl in self.lists.values() if tl.title == title), None)

    def list_lists(self) -> list[TaskList]:
        return list(self.lists.values())

    def create_list(self, title: str) -> TaskList:
        self._check("create_list")
        self.calls.append(("create_list", title))
        return self.add_list(title)

    def delete_list(self, list_id: str) -> None:
        self._check("delete_list")
        self.calls.append(("delete_list", list_id))
        del self.lists[list_id]
        del self.tasks[list_id]

    def list_tasks(self, list_id: str, include_completed: bool = False) -> list[Task]:
        self._check("list_tasks")
        tasks = list(self.tasks[list_id])
        if include_completed:
            return tasks
        return [t for t in tasks if t.status != COMPLETED]

    def insert_task(self, list_id: str, task: Task) -> Task:
        self._check("insert_task")
        created = dataclasses.replace(task, id=self._next("T"))
        self.calls.append(("insert_task", list_id, created.title))
        self.tasks[list_id].append(created)
        return created

    def patch_task(self, list_id: str, task_id: str, title=None, notes=None) -> Task:
        self.calls.append(("patch_task", list_id, task_id))
        tasks = self.tasks[list_id]
        for i, task in enumerate(tasks):
            if task.id == task_id:
                changes = {k: v for k, v in {"title": title, "notes": notes}.items() if v is not None}
                tasks[i] = dataclasses.replace(task, **changes)
                return tasks[i]
        raise KeyError(task_id)

    def delete_task(self, list_id: str, task_id: str) -> None:
        self._check("delete_task")
        self.calls.append(("delete_task", list_id, task_id))
        self.tasks[list_id] = [t for t in self.tasks[list_id] if t.id != task_id]


class MovingStore(FakeStore):
    supports_move = True

    def move_task(self, list_id: str, task_id: str, dest_list_id: str) -> Task:
        self.calls.append(("move_task", list_id, task_id, dest_list_id))
        task = next(t for t in self.tasks[list_id] if t.id == task_id)
        self.tasks[list_id].remove(task)
        self.tasks[dest_list_id].append(task)
        return task


class FakeLock:
    def __init__(self, available: bool = True):
        self.available = available
        self.acquired = 0
        self.released = 0
        self.timeouts: list[int] = []

    def try_acquire(self, timeout_ms: int) -> bool:
        self.timeouts.append(timeout_ms)
        if self.available:
            self.acquired += 1
        return self.available

    def release(self) -> None:
        self.released += 1


class FakeRunLog:
    def __init__(self, fail: bool = False):
        self.runs: list[RunStat] = []
        self.fail = fail

    def append_run(self, stat: RunStat) -> None:
        if self.fail:
            raise RuntimeError("sheet gone")
        self.runs.append(stat)

    def since(self, cutoff: datetime) -> list[RunStat]:
        return [r for r in self.runs if r.timestamp >= cutoff]


class FakeMail:
    def __init__(self):
        self.sent: list[dict] = []

    def send(self, recipient: str, subject: str, body: str, html: str | None = None) -> None:
        self.sent.append({"to": recipient, "subject": subject, "body": body, "html": html})

    def subjects(self) -> list[str]:
        return [m["subject"] for m in self.sent]


class TickingClock:
    """Monotonic clock advancing `step` seconds per reading."""

    def __init__(self, step: float = 0.0, start: float = 0.0):
        self.step = step
        self.value = start - step

    def __call__(self) -> float:
        self.value += self.step
        return self.value


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def settings():
    return Settings(time_zone="UTC")
