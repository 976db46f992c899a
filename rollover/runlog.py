import json
from datetime import datetime, timedelta
from pathlib import Path

from fncli import cli

from . import db
from .core.models import CompletedTask, RunStat
from .lib.errors import echo

RunRow = tuple[object, ...]

# widest gap between two UTC offsets
OFFSET_SLACK = timedelta(hours=26)

_COLUMNS = "timestamp, inbox_adds, inbox_moves, lists_deleted, lists_created, completed_tasks, notes"


def row_to_run(row: RunRow) -> RunStat:
    """
    Converts a raw `runs` row into a RunStat.
    Expected row format: (timestamp, inbox_adds, inbox_moves, lists_deleted, lists_created, completed_tasks, notes)
    """
    completed = json.loads(str(row[5] or "[]"))
    return RunStat(
        timestamp=datetime.fromisoformat(str(row[0])),
        inbox_adds=int(row[1] or 0),
        inbox_moves=int(row[2] or 0),
        lists_deleted=int(row[3] or 0),
        lists_created=int(row[4] or 0),
        completed_tasks=tuple(
            CompletedTask(task_name=c["taskName"], completed_at=c.get("completed_timestamp"))
            for c in completed
        ),
        notes=str(row[6] or ""),
    )


class RunLog:
    """Append-only table of run records."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path
        self._ready = False

    def _ensure(self) -> None:
        if not self._ready:
            db.init(self.db_path)
            self._ready = True

    def append_run(self, stat: RunStat) -> None:
        self._ensure()
        completed = [
            {"taskName": c.task_name, "completed_timestamp": c.completed_at}
            for c in stat.completed_tasks
        ]
        with db.get_db(self.db_path) as conn:
            conn.execute(
                f"INSERT INTO runs ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",  # noqa: S608
                (
                    stat.timestamp.isoformat(),
                    stat.inbox_adds,
                    stat.inbox_moves,
                    stat.lists_deleted,
                    stat.lists_created,
                    json.dumps(completed),
                    stat.notes,
                ),
            )

    def since(self, cutoff: datetime) -> list[RunStat]:
        """Runs whose timestamp is at or after `cutoff`, oldest first."""
        self._ensure()
        # stored offsets vary (DST), so the string bound is widened and refined below
        bound = (cutoff - OFFSET_SLACK).isoformat()
        with db.get_db(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM runs WHERE timestamp >= ? ORDER BY id",  # noqa: S608
                (bound,),
            ).fetchall()
        runs = [row_to_run(r) for r in rows]
        return [r for r in runs if r.timestamp >= cutoff]

    def last(self, limit: int = 10) -> list[RunStat]:
        self._ensure()
        with db.get_db(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM runs ORDER BY id DESC LIMIT ?",  # noqa: S608
                (limit,),
            ).fetchall()
        return [row_to_run(r) for r in rows]


@cli("rollover")
def runs(limit: int = 10) -> None:
    """Show recent run records"""
    records = RunLog().last(limit)
    if not records:
        echo("no runs logged")
        return
    for r in records:
        echo(
            f"{r.timestamp:%Y-%m-%d %H:%M}  +{r.inbox_adds} rolled  "
            f"{r.inbox_moves} due  -{r.lists_deleted} lists  {r.notes}"
        )
