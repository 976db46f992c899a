"""Collaborator contracts the rollover core depends on."""

from typing import Protocol

from .models import RunStat, Task, TaskList


class TaskStore(Protocol):
    def list_lists(self) -> list[TaskList]: ...

    def create_list(self, title: str) -> TaskList: ...

    def delete_list(self, list_id: str) -> None: ...

    def list_tasks(self, list_id: str, include_completed: bool = False) -> list[Task]: ...

    def insert_task(self, list_id: str, task: Task) -> Task: ...

    def patch_task(
        self, list_id: str, task_id: str, title: str | None = None, notes: str | None = None
    ) -> Task: ...

    def delete_task(self, list_id: str, task_id: str) -> None: ...


class Lock(Protocol):
    def try_acquire(self, timeout_ms: int) -> bool: ...

    def release(self) -> None: ...


class RunSink(Protocol):
    def append_run(self, stat: RunStat) -> None: ...


class Notifier(Protocol):
    def send(self, recipient: str, subject: str, body: str, html: str | None = None) -> None: ...
