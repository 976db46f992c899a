import dataclasses
from datetime import datetime

NEEDS_ACTION = "needsAction"
COMPLETED = "completed"


@dataclasses.dataclass(frozen=True)
class TaskList:
    id: str
    title: str


@dataclasses.dataclass(frozen=True)
class Link:
    type: str
    link: str
    description: str | None = None


@dataclasses.dataclass(frozen=True)
class Task:
    id: str
    title: str
    notes: str = ""
    status: str = NEEDS_ACTION
    due: str | None = None
    completed: str | None = None
    recurrence: str | None = None
    links: list[Link] = dataclasses.field(default_factory=list, hash=False)

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    @property
    def is_recurring(self) -> bool:
        return bool(self.recurrence)


@dataclasses.dataclass(frozen=True)
class CompletedTask:
    task_name: str
    completed_at: str | None


@dataclasses.dataclass(frozen=True)
class RunStat:
    timestamp: datetime
    inbox_adds: int = 0
    inbox_moves: int = 0
    lists_deleted: int = 0
    lists_created: int = 0
    completed_tasks: tuple[CompletedTask, ...] = ()
    notes: str = ""
