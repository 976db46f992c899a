from datetime import timedelta

from fncli import cli

from .config import Settings, load_settings
from .core.models import COMPLETED, Task
from .core.types import TaskStore
from .lib.dates import daily_list_title, local_now, resolve_zone
from .lib.errors import echo

DUMMY_TASKS = [
    Task(id="", title="Incomplete Task 1 (Simple)"),
    Task(id="", title="Incomplete Task 2 (With Notes)", notes="This task has some notes."),
    Task(id="", title="Completed Task", status=COMPLETED),
    Task(
        id="",
        title="Task with existing rollover",
        notes="This task has been rolled over before.\n\nRollover Count: 3",
    ),
    Task(id="", title="Another incomplete task"),
]


def seed_yesterday(store: TaskStore, settings: Settings) -> str | None:
    """Create yesterday's daily list filled with dummy tasks.

    Returns the list title, or None when the list already exists.
    """
    yesterday = local_now(resolve_zone(settings.time_zone)).date() - timedelta(days=1)
    title = daily_list_title(settings.daily_list_prefix, yesterday)
    if any(existing.title == title for existing in store.list_lists()):
        return None
    task_list = store.create_list(title)
    for task in DUMMY_TASKS:
        store.insert_task(task_list.id, task)
    return title


@cli("rollover")
def seed() -> None:
    """Create yesterday's daily list with dummy tasks for a test run"""
    from .app import build_store

    settings = load_settings()
    title = seed_yesterday(build_store(settings), settings)
    if title is None:
        echo("yesterday's list already exists, nothing created")
        return
    echo(f"created {title} with {len(DUMMY_TASKS)} tasks")
