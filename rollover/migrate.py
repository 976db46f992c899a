import dataclasses

from .core.models import Task
from .core.types import TaskStore
from .lib.annotation import bump_rollover

EMAIL_LINK_TYPE = "email"
FROM_EMAIL_SUFFIX = " [from email]"


def _email_link(task: Task) -> str | None:
    for link in task.links:
        if link.type == EMAIL_LINK_TYPE:
            return link.link or None
    return None


def prepare(task: Task, track_rollover: bool) -> Task:
    """The task as it should appear in its destination list."""
    title = task.title
    notes = task.notes or ""

    if track_rollover:
        notes = bump_rollover(notes)

    email = _email_link(task)
    if email and email not in notes:
        title += FROM_EMAIL_SUFFIX
        notes += f"\n\n---\nOriginal Email: {email}"

    return dataclasses.replace(task, title=title, notes=notes)


class TaskMigrator:
    """Moves single tasks between lists.

    Stores without a native move get insert-then-delete, never the reverse: a
    failed delete leaves a duplicate, never a lost task.
    """

    def __init__(self, store: TaskStore):
        self.store = store

    def move(self, task: Task, source_list_id: str, dest_list_id: str, track_rollover: bool) -> str:
        moved = prepare(task, track_rollover)

        if getattr(self.store, "supports_move", False):
            if moved.title != task.title or moved.notes != (task.notes or ""):
                self.store.patch_task(source_list_id, task.id, title=moved.title, notes=moved.notes)
            native = self.store.move_task(source_list_id, task.id, dest_list_id)  # type: ignore[attr-defined]
            return native.id

        created = self.store.insert_task(
            dest_list_id, Task(id="", title=moved.title, notes=moved.notes, due=moved.due)
        )
        self.store.delete_task(source_list_id, task.id)
        return created.id
