import dataclasses
import time
from collections.abc import Callable, Iterable

from .core.models import TaskList
from .core.types import TaskStore
from .lib.log import log
from .migrate import TaskMigrator
from .stats import RunStats

Clock = Callable[[], float]


class Deadline:
    """Soft execution budget measured from the start of the run."""

    def __init__(self, budget_seconds: float, clock: Clock = time.monotonic):
        self.clock = clock
        self.budget_seconds = budget_seconds
        self.started = clock()

    def elapsed(self) -> float:
        return self.clock() - self.started

    def expired(self) -> bool:
        return self.elapsed() > self.budget_seconds


@dataclasses.dataclass(frozen=True)
class SweepResult:
    today_list: TaskList
    stats: RunStats


def partition(
    all_lists: Iterable[TaskList], daily_prefix: str, today_title: str
) -> tuple[TaskList | None, list[TaskList]]:
    today: TaskList | None = None
    stale: list[TaskList] = []
    for task_list in all_lists:
        if task_list.title == today_title:
            if today is None:
                today = task_list
        elif task_list.title.startswith(daily_prefix):
            stale.append(task_list)
    return today, stale


class StaleListSweeper:
    def __init__(self, store: TaskStore, migrator: TaskMigrator, track_rollover: bool = True):
        self.store = store
        self.migrator = migrator
        self.track_rollover = track_rollover

    def sweep(
        self,
        all_lists: Iterable[TaskList],
        daily_prefix: str,
        today_title: str,
        inbox_id: str,
        deadline: Deadline,
        stats: RunStats,
    ) -> SweepResult:
        today, stale = partition(all_lists, daily_prefix, today_title)
        stale = [s for s in stale if s.id != inbox_id]

        for stale_list in stale:
            if deadline.expired():
                stats.pause()
                log(f"execution budget of {deadline.budget_seconds}s exceeded, pausing run")
                break
            self._retire(stale_list, inbox_id, stats)

        if today is None:
            today = self.store.create_list(today_title)
            stats.lists_created += 1
            log(f"created list '{today_title}'")

        return SweepResult(today_list=today, stats=stats)

    def _retire(self, stale_list: TaskList, inbox_id: str, stats: RunStats) -> None:
        incomplete = [t for t in self.store.list_tasks(stale_list.id) if not t.is_completed]
        for task in incomplete:
            self.migrator.move(task, stale_list.id, inbox_id, track_rollover=self.track_rollover)
            stats.inbox_adds += 1
        log(f"moved {len(incomplete)} incomplete tasks from '{stale_list.title}'")

        for task in self.store.list_tasks(stale_list.id, include_completed=True):
            if task.is_completed:
                stats.record_completed(task)

        self.store.delete_list(stale_list.id)
        stats.lists_deleted += 1
