"""Task routes."""
import logging

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

from donezo.api.deps import Authenticated, DatabaseHandle
from donezo.errors import BadRequest, NotFound
from donezo.schemas.task import TaskCreate, TaskReorder, TaskResponse, TaskUpdate
from donezo.services.task_service import (
    create_task,
    delete_task,
    get_task,
    list_open_tasks,
    list_tasks,
    reorder_tasks,
    update_task,
)
from donezo.telemetry import task_changes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["tasks"])

EMPTY_TITLE = "Title cannot be empty"


@router.get("", response_model=list[TaskResponse])
def list_all_tasks(_auth: Authenticated, db: DatabaseHandle):
    """
    List all tasks in display order.

    Args:
        db: Store handle

    Returns:
        List of tasks
    """
    tasks = list_tasks(db)
    logger.info(f"Listed {len(tasks)} tasks")
    return tasks


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_new_task(task_data: TaskCreate, _auth: Authenticated, db: DatabaseHandle):
    """
    Create a task at the end of the list.

    Args:
        task_data: Task creation data
        db: Store handle

    Returns:
        Created task

    Raises:
        BadRequest: If the title is blank
    """
    title = task_data.title.strip()
    if not title:
        raise BadRequest(EMPTY_TITLE)

    task = create_task(db, title)
    task_changes.add(1, {"operation": "create"})
    logger.info(f"Created task id={task.id} title={task.title!r}")
    return task


@router.put("/reorder", response_model=list[TaskResponse])
def reorder(reorder_data: TaskReorder, _auth: Authenticated, db: DatabaseHandle):
    """
    Reorder tasks by the given ID sequence.

    Args:
        reorder_data: Task IDs in their new order
        db: Store handle

    Returns:
        All tasks in their new display order
    """
    tasks = reorder_tasks(db, reorder_data.ids)
    task_changes.add(1, {"operation": "reorder"})
    logger.info(f"Reordered {len(reorder_data.ids)} tasks")
    return tasks


@router.get("/plain", response_class=PlainTextResponse)
def plain_text_tasks(_auth: Authenticated, db: DatabaseHandle):
    """
    Open task titles as plain text, one per line.

    Args:
        db: Store handle

    Returns:
        Newline-terminated titles of tasks that are not completed
    """
    return "".join(f"{task.title}\n" for task in list_open_tasks(db))


@router.get("/{task_id}", response_model=TaskResponse)
def get_single_task(task_id: int, _auth: Authenticated, db: DatabaseHandle):
    """
    Get a specific task.

    Raises:
        NotFound: If no task has this ID
    """
    task = get_task(db, task_id)
    if task is None:
        raise NotFound()
    return task


@router.put("/{task_id}", response_model=TaskResponse)
def update_existing_task(
    task_id: int,
    task_data: TaskUpdate,
    _auth: Authenticated,
    db: DatabaseHandle,
):
    """
    Update a task's title and/or completion state.

    Args:
        task_id: Task ID
        task_data: Fields to change
        db: Store handle

    Returns:
        Updated task

    Raises:
        BadRequest: If a blank title is given
        NotFound: If no task has this ID
    """
    title = task_data.title
    if title is not None:
        title = title.strip()
        if not title:
            raise BadRequest(EMPTY_TITLE)

    task = update_task(db, task_id, title=title, completed=task_data.completed)
    if task is None:
        raise NotFound()
    task_changes.add(1, {"operation": "update"})
    logger.info(f"Updated task id={task.id} completed={task.completed}")
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_existing_task(task_id: int, _auth: Authenticated, db: DatabaseHandle):
    """
    Delete a task.

    Raises:
        NotFound: If no task has this ID
    """
    if not delete_task(db, task_id):
        raise NotFound()
    task_changes.add(1, {"operation": "delete"})
    logger.info(f"Deleted task id={task_id}")
