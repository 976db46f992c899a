import dataclasses
from datetime import datetime

from .core.models import CompletedTask, RunStat, Task

PAUSED_NOTE = "Run paused due to execution timeout."


@dataclasses.dataclass
class RunStats:
    """Counters for one invocation; frozen into a RunStat when the run ends."""

    timestamp: datetime
    inbox_adds: int = 0
    inbox_moves: int = 0
    lists_deleted: int = 0
    lists_created: int = 0
    completed_tasks: list[CompletedTask] = dataclasses.field(default_factory=list)
    notes: str = ""
    paused: bool = False

    def record_completed(self, task: Task) -> None:
        self.completed_tasks.append(CompletedTask(task_name=task.title, completed_at=task.completed))

    def pause(self) -> None:
        self.paused = True
        self.notes = PAUSED_NOTE

    def fail(self, error: BaseException) -> None:
        self.notes = f"FATAL: {error}"

    def summary(self) -> str:
        text = (
            f"Run completed successfully. Tasks moved: {self.inbox_adds}. "
            f"Lists deleted: {self.lists_deleted}."
        )
        if self.inbox_moves:
            text += f" Due tasks moved from inbox: {self.inbox_moves}."
        return text

    def freeze(self) -> RunStat:
        return RunStat(
            timestamp=self.timestamp,
            inbox_adds=self.inbox_adds,
            inbox_moves=self.inbox_moves,
            lists_deleted=self.lists_deleted,
            lists_created=self.lists_created,
            completed_tasks=tuple(self.completed_tasks),
            notes=self.notes or self.summary(),
        )
