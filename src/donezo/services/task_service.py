"""Task service: the position-ordered task list."""

import logging
from collections.abc import Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from donezo.database import Database
from donezo.models import Task
from donezo.types import utc_now

logger = logging.getLogger(__name__)


def _ordered(session: Session, open_only: bool = False) -> list[Task]:
    stmt = select(Task).order_by(Task.position.asc(), Task.id.asc())
    if open_only:
        stmt = stmt.where(Task.completed.is_(False))
    return list(session.execute(stmt).scalars().all())


def list_tasks(db: Database) -> list[Task]:
    """List all tasks in display order."""
    with db.session() as session:
        return _ordered(session)


def list_open_tasks(db: Database) -> list[Task]:
    """List tasks that are not completed, in display order."""
    with db.session() as session:
        return _ordered(session, open_only=True)


def create_task(db: Database, title: str) -> Task:
    """
    Append a new task to the end of the list.

    Args:
        db: Store handle
        title: Task title, already validated by the caller

    Returns:
        Created task, positioned after every existing task
    """
    with db.session() as session:
        max_position = session.execute(
            select(func.coalesce(func.max(Task.position), 0))
        ).scalar_one()
        now = utc_now()
        task = Task(
            title=title,
            completed=False,
            position=max_position + 1,
            created_at=now,
            updated_at=now,
        )
        session.add(task)
        session.flush()
        return task


def get_task(db: Database, task_id: int) -> Task | None:
    """Get a task by ID."""
    with db.session() as session:
        return session.get(Task, task_id)


def update_task(
    db: Database,
    task_id: int,
    title: str | None = None,
    completed: bool | None = None,
) -> Task | None:
    """
    Partially update a task.

    Fields left as None are unchanged. When no field is given the task is
    returned as stored, without touching ``updated_at``.

    Args:
        db: Store handle
        task_id: Task ID
        title: New title
        completed: New completion state

    Returns:
        Updated task, or None if no task has this ID
    """
    with db.session() as session:
        task = session.get(Task, task_id)
        if task is None:
            return None
        if title is None and completed is None:
            return task

        if title is not None:
            task.title = title
        if completed is not None:
            task.completed = completed
        task.updated_at = utc_now()
        session.flush()
        return task


def reorder_tasks(db: Database, ids: Sequence[int]) -> list[Task]:
    """
    Assign positions by index in ``ids`` and return the resulting order.

    The whole operation runs under a single lock scope. The sequence is not
    checked against the stored tasks: unknown ids update nothing and tasks
    left out keep their previous position, which may now collide with a
    reassigned one.

    Args:
        db: Store handle
        ids: Task IDs in their new display order

    Returns:
        All tasks in display order after the reorder
    """
    with db.session() as session:
        now = utc_now()
        for position, task_id in enumerate(ids):
            session.execute(
                update(Task)
                .where(Task.id == task_id)
                .values(position=position, updated_at=now)
                .execution_options(synchronize_session=False)
            )
        return _ordered(session)


def delete_task(db: Database, task_id: int) -> bool:
    """Delete a task. Remaining positions are not renumbered."""
    with db.session() as session:
        result = session.execute(
            delete(Task)
            .where(Task.id == task_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
