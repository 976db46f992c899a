from typing import Any

from googleapiclient.errors import HttpError

from rollover.core.errors import StoreError
from rollover.core.models import COMPLETED, Link, Task, TaskList

PAGE_SIZE = 100


def to_task(item: dict[str, Any]) -> Task:
    recurrence = item.get("recurrence")
    if isinstance(recurrence, list):
        recurrence = "\n".join(recurrence)
    return Task(
        id=item["id"],
        title=item.get("title", ""),
        notes=item.get("notes") or "",
        status=item.get("status", "needsAction"),
        due=item.get("due"),
        completed=item.get("completed"),
        recurrence=recurrence or None,
        links=[
            Link(type=link.get("type", ""), link=link.get("link", ""), description=link.get("description"))
            for link in item.get("links") or []
        ],
    )


def to_resource(task: Task) -> dict[str, Any]:
    body: dict[str, Any] = {"title": task.title, "notes": task.notes}
    if task.due:
        body["due"] = task.due
    if task.is_completed:
        body["status"] = COMPLETED
    return body


class GoogleTaskStore:
    """Task lists and tasks through the Google Tasks v1 API.

    Transient failures (429, 5xx, connection resets) are retried by
    googleapiclient with exponential backoff; exhausted retries raise StoreError.
    """

    def __init__(self, service, retries: int = 5, native_move: bool = False):
        self.service = service
        self.retries = retries
        self.supports_move = native_move

    def _execute(self, request, action: str):
        try:
            return request.execute(num_retries=self.retries)
        except HttpError as e:
            raise StoreError(f"{action} failed: {e}") from e

    def list_lists(self) -> list[TaskList]:
        lists: list[TaskList] = []
        page_token = None
        while True:
            result = self._execute(
                self.service.tasklists().list(maxResults=PAGE_SIZE, pageToken=page_token),
                "list task lists",
            )
            lists.extend(TaskList(id=i["id"], title=i.get("title", "")) for i in result.get("items") or [])
            page_token = result.get("nextPageToken")
            if not page_token:
                return lists

    def create_list(self, title: str) -> TaskList:
        item = self._execute(self.service.tasklists().insert(body={"title": title}), "create list")
        return TaskList(id=item["id"], title=item.get("title", title))

    def delete_list(self, list_id: str) -> None:
        self._execute(self.service.tasklists().delete(tasklist=list_id), f"delete list {list_id}")

    def list_tasks(self, list_id: str, include_completed: bool = False) -> list[Task]:
        params: dict[str, Any] = {
            "tasklist": list_id,
            "maxResults": PAGE_SIZE,
            "showCompleted": include_completed,
            "showHidden": include_completed,
        }
        tasks: list[Task] = []
        page_token = None
        while True:
            result = self._execute(
                self.service.tasks().list(**params, pageToken=page_token),
                f"list tasks of {list_id}",
            )
            tasks.extend(to_task(i) for i in result.get("items") or [])
            page_token = result.get("nextPageToken")
            if not page_token:
                return tasks

    def insert_task(self, list_id: str, task: Task) -> Task:
        item = self._execute(
            self.service.tasks().insert(tasklist=list_id, body=to_resource(task)),
            f"insert task into {list_id}",
        )
        return to_task(item)

    def patch_task(
        self, list_id: str, task_id: str, title: str | None = None, notes: str | None = None
    ) -> Task:
        body: dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if notes is not None:
            body["notes"] = notes
        item = self._execute(
            self.service.tasks().patch(tasklist=list_id, task=task_id, body=body),
            f"patch task {task_id}",
        )
        return to_task(item)

    def delete_task(self, list_id: str, task_id: str) -> None:
        self._execute(
            self.service.tasks().delete(tasklist=list_id, task=task_id),
            f"delete task {task_id}",
        )

    def move_task(self, list_id: str, task_id: str, dest_list_id: str) -> Task:
        item = self._execute(
            self.service.tasks().move(tasklist=list_id, task=task_id, destinationTasklist=dest_list_id),
            f"move task {task_id}",
        )
        return to_task(item)
