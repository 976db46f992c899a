import time
from collections.abc import Callable
from datetime import datetime

from .config import Settings
from .core.errors import InboxNotFoundError
from .core.models import RunStat, TaskList
from .core.types import Lock, Notifier, RunSink, TaskStore
from .digest import DigestMailer
from .inbox import InboxDueSweep
from .lib.dates import daily_list_title, local_now, resolve_zone, sunday_based_weekday
from .lib.log import log
from .migrate import TaskMigrator
from .stats import RunStats
from .sweep import Clock, Deadline, StaleListSweeper

FAILURE_SUBJECT = "Rollover has failed!"
LOG_FAILURE_SUBJECT = "Rollover Logging Failure"


class RolloverOrchestrator:
    """One daily rollover: sweep stale lists, ensure today's list, sweep the inbox.

    Every collaborator is injected. `run` returns the RunStat handed to the run
    log, or None when another run holds the lock.
    """

    def __init__(
        self,
        store: TaskStore,
        lock: Lock,
        run_log: RunSink,
        notifier: Notifier,
        settings: Settings,
        recipient: str,
        digest: DigestMailer | None = None,
        clock: Clock = time.monotonic,
        now: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.lock = lock
        self.run_log = run_log
        self.notifier = notifier
        self.settings = settings
        self.recipient = recipient
        self.digest = digest
        self.clock = clock
        self.zone = resolve_zone(settings.time_zone)
        self.now = now if now else lambda: local_now(self.zone)

        self.migrator = TaskMigrator(store)
        self.sweeper = StaleListSweeper(store, self.migrator, settings.track_rollover_count)
        self.inbox_sweep = InboxDueSweep(store, self.migrator)

    def run(self) -> RunStat | None:
        if not self.lock.try_acquire(self.settings.lock_timeout_seconds * 1000):
            log("aborting run: could not acquire lock, another instance is likely running")
            return None

        deadline = Deadline(self.settings.execution_timeout_seconds, clock=self.clock)
        started = self.now()
        stats = RunStats(timestamp=started)
        emitted = False
        try:
            self._rollover(stats, deadline, started)
            result = stats.freeze()
            self._emit(result)
            emitted = True
            if sunday_based_weekday(started.date()) == self.settings.weekly_digest_day and self.digest:
                self.digest.send_weekly_digest(started)
            return result
        except Exception as e:
            log(f"fatal error in rollover run: {type(e).__name__}: {e}")
            stats.fail(e)
            result = stats.freeze()
            if not emitted:
                self._emit(result)
            self.notifier.send(
                self.recipient,
                FAILURE_SUBJECT,
                "The daily task rollover encountered a fatal error and could not complete."
                f"\n\nError: {e}",
            )
            return result
        finally:
            self.lock.release()

    def _rollover(self, stats: RunStats, deadline: Deadline, started: datetime) -> None:
        all_lists = self.store.list_lists()
        inbox = self._inbox(all_lists)
        today_title = daily_list_title(self.settings.daily_list_prefix, started.date())

        swept = self.sweeper.sweep(
            all_lists,
            self.settings.daily_list_prefix,
            today_title,
            inbox.id,
            deadline,
            stats,
        )

        if self.settings.auto_move_due_tasks:
            stats.inbox_moves += self.inbox_sweep.sweep(inbox.id, swept.today_list.id, started.date())

    def _inbox(self, all_lists: list[TaskList]) -> TaskList:
        for task_list in all_lists:
            if self.settings.inbox_list_id and task_list.id == self.settings.inbox_list_id:
                return task_list
        for task_list in all_lists:
            if task_list.title == self.settings.inbox_list_name:
                return task_list
        raise InboxNotFoundError(self.settings.inbox_list_id or self.settings.inbox_list_name)

    def _emit(self, stat: RunStat) -> None:
        """Hand the record to the run log. A failing log never fails the run."""
        try:
            self.run_log.append_run(stat)
        except Exception as e:
            log(f"failed to write run log: {e}")
            try:
                self.notifier.send(
                    self.recipient,
                    LOG_FAILURE_SUBJECT,
                    f"The run could not be written to the run log.\n\nError: {e}\n\nRun: {stat.notes}",
                )
            except Exception as mail_error:
                log(f"failed to report run log failure: {mail_error}")
