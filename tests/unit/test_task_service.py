"""Unit tests for the task service."""
import threading
import time

from sqlalchemy import event

from donezo.database import Database
from donezo.services.task_service import (
    create_task,
    delete_task,
    get_task,
    list_open_tasks,
    list_tasks,
    reorder_tasks,
    update_task,
)


def _titles(tasks) -> list[str]:
    return [task.title for task in tasks]


def test_create_task_appends(db: Database):
    """New tasks land after every existing task."""
    first = create_task(db, "first")
    second = create_task(db, "second")

    assert first.position == 1
    assert second.position == 2
    assert first.completed is False
    assert first.created_at == first.updated_at
    assert _titles(list_tasks(db)) == ["first", "second"]


def test_create_task_after_reorder_goes_last(db: Database):
    a = create_task(db, "a")
    b = create_task(db, "b")
    reorder_tasks(db, [b.id, a.id])

    create_task(db, "c")

    assert _titles(list_tasks(db)) == ["b", "a", "c"]


def test_get_task(db: Database):
    created = create_task(db, "read me")

    task = get_task(db, created.id)

    assert task is not None
    assert task.title == "read me"
    assert get_task(db, created.id + 1) is None


def test_update_task_title(db: Database):
    task = create_task(db, "old")

    updated = update_task(db, task.id, title="new")

    assert updated.title == "new"
    assert updated.completed is False
    assert updated.updated_at > task.updated_at
    assert updated.created_at == task.created_at


def test_update_task_completed(db: Database):
    task = create_task(db, "finish me")

    updated = update_task(db, task.id, completed=True)

    assert updated.completed is True
    assert updated.title == "finish me"


def test_update_task_without_fields_is_noop(db: Database):
    """An empty update returns the task without touching updated_at."""
    task = create_task(db, "same")

    unchanged = update_task(db, task.id)

    assert unchanged.title == "same"
    assert unchanged.updated_at == task.updated_at


def test_update_missing_task(db: Database):
    assert update_task(db, 42, title="nope") is None


def test_reorder_reverses(db: Database):
    """Positions follow the index in the given sequence."""
    tasks = [create_task(db, title) for title in ("a", "b", "c")]

    result = reorder_tasks(db, [t.id for t in reversed(tasks)])

    assert _titles(result) == ["c", "b", "a"]
    assert [t.position for t in result] == [0, 1, 2]
    assert _titles(list_tasks(db)) == ["c", "b", "a"]


def test_reorder_with_omitted_ids_keeps_their_position(db: Database):
    """Tasks left out keep their old position; ties break by id."""
    a = create_task(db, "a")  # position 1
    b = create_task(db, "b")  # position 2
    c = create_task(db, "c")  # position 3

    result = reorder_tasks(db, [c.id, a.id])

    positions = {t.title: t.position for t in result}
    assert positions == {"c": 0, "a": 1, "b": 2}
    assert _titles(result) == ["c", "a", "b"]
    assert get_task(db, b.id).position == 2


def test_reorder_collision_breaks_ties_by_id(db: Database):
    a = create_task(db, "a")  # position 1
    b = create_task(db, "b")  # position 2

    result = reorder_tasks(db, [b.id, b.id])

    # b ends at position 1, colliding with a
    assert [(t.title, t.position) for t in result] == [("a", 1), ("b", 1)]
    assert a.id < b.id


def test_reorder_ignores_unknown_ids(db: Database):
    a = create_task(db, "a")

    result = reorder_tasks(db, [999, a.id])

    assert [(t.title, t.position) for t in result] == [("a", 1)]


def test_reorder_empty_sequence(db: Database):
    create_task(db, "a")

    assert _titles(reorder_tasks(db, [])) == ["a"]


def test_list_open_tasks(db: Database):
    """Completed tasks are left out of the open listing."""
    create_task(db, "open 1")
    done = create_task(db, "done")
    create_task(db, "open 2")
    update_task(db, done.id, completed=True)

    assert _titles(list_open_tasks(db)) == ["open 1", "open 2"]
    assert len(list_tasks(db)) == 3


def test_delete_task_does_not_renumber(db: Database):
    a = create_task(db, "a")
    b = create_task(db, "b")
    c = create_task(db, "c")

    assert delete_task(db, b.id) is True
    assert delete_task(db, b.id) is False

    remaining = list_tasks(db)
    assert [(t.id, t.position) for t in remaining] == [(a.id, 1), (c.id, 3)]


def test_list_tasks_empty(db: Database):
    assert list_tasks(db) == []
    assert list_open_tasks(db) == []


def test_reorder_is_atomic_for_concurrent_callers(db: Database):
    """Readers and writers arriving mid-reorder see only the finished order."""
    tasks = [create_task(db, title) for title in ("a", "b", "c", "d")]
    new_order = [t.id for t in reversed(tasks)]
    started = threading.Event()

    def slow_position_updates(conn, cursor, statement, parameters, context, executemany):
        if statement.startswith("UPDATE todos"):
            started.set()
            time.sleep(0.05)

    event.listen(db.engine, "before_cursor_execute", slow_position_updates)
    try:
        worker = threading.Thread(target=reorder_tasks, args=(db, new_order))
        worker.start()
        assert started.wait(timeout=5)

        observed = [_titles(list_tasks(db)) for _ in range(3)]
        appended = create_task(db, "e")
        worker.join(timeout=5)
    finally:
        event.remove(db.engine, "before_cursor_execute", slow_position_updates)

    assert not worker.is_alive()
    assert observed == [["d", "c", "b", "a"]] * 3
    assert appended.position == 4
    assert _titles(list_tasks(db)) == ["d", "c", "b", "a", "e"]
