from datetime import date

from .core.types import TaskStore
from .lib.dates import due_date
from .lib.log import log
from .migrate import TaskMigrator


class InboxDueSweep:
    """Pulls non-recurring inbox tasks due today into today's list."""

    def __init__(self, store: TaskStore, migrator: TaskMigrator):
        self.store = store
        self.migrator = migrator

    def sweep(self, inbox_id: str, dest_list_id: str, today: date) -> int:
        moved = 0
        for task in self.store.list_tasks(inbox_id, include_completed=True):
            if task.is_completed or task.is_recurring:
                continue
            if due_date(task.due) != today:
                continue
            self.migrator.move(task, inbox_id, dest_list_id, track_rollover=False)
            moved += 1
        if moved:
            log(f"moved {moved} due tasks from inbox to today's list")
        return moved
