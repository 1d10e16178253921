import pytest
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskboard.db.models import Base, BoardList, Task
from taskboard.db.schemas import BoardCreate, BoardPatch, ListCreate, ListPatch, TaskCreate, TaskPatch, UserCreate, UserPatch
from taskboard.db.session import enable_sqlite_foreign_keys
from taskboard.services import boards, lists, sample, tasks, users


def make_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    owner = users.create_user(db, UserCreate(email="owner@taskboard.local", full_name="Owner"))
    stranger = users.create_user(db, UserCreate(email="stranger@taskboard.local"))
    board = boards.create_board(db, BoardCreate(title="Launch", description="Q3 launch"), owner.id)

    return db, {"owner": owner, "stranger": stranger, "board_id": board.id}


def make_lists(db, board_id: int, *titles: str) -> list[int]:
    return [lists.create_list(db, ListCreate(title=title, board_id=board_id)).id for title in titles]


def make_tasks(db, list_id: int, *titles: str) -> list[int]:
    return [tasks.create_task(db, TaskCreate(title=title, list_id=list_id)).id for title in titles]


def test_create_list_and_task_append_at_end():
    db, seeded = make_session()

    list_ids = make_lists(db, seeded["board_id"], "To Do", "Doing")
    task_ids = make_tasks(db, list_ids[0], "Write copy", "Design banner", "Ship")

    assert [item.position for item in lists.get_lists_by_board(db, seeded["board_id"])] == [0, 1]
    assert [item.id for item in tasks.get_tasks_by_list(db, list_ids[0])] == task_ids
    assert [item.position for item in tasks.get_tasks_by_list(db, list_ids[0])] == [0, 1, 2]
    assert tasks.get_tasks_by_list(db, list_ids[1]) == []


def test_new_task_defaults():
    db, seeded = make_session()
    (list_id,) = make_lists(db, seeded["board_id"], "To Do")

    task = tasks.create_task(db, TaskCreate(title="Plan", list_id=list_id, priority="high"))

    assert task.status == "todo"
    assert task.priority == "high"
    assert task.description is None


def test_create_task_in_missing_list_returns_none():
    db, _ = make_session()

    assert tasks.create_task(db, TaskCreate(title="Nowhere", list_id=404)) is None
    assert db.query(Task).count() == 0


def test_get_board_sorts_lists_and_tasks_by_position():
    db, seeded = make_session()
    todo, doing, done = make_lists(db, seeded["board_id"], "To Do", "Doing", "Done")
    first, second = make_tasks(db, todo, "First", "Second")

    assert lists.reorder_lists(db, seeded["board_id"], [done, todo, doing]) is True
    assert tasks.reorder_tasks(db, todo, [second, first]) is True

    detail = boards.get_board(db, seeded["board_id"])

    assert detail is not None
    assert [item.title for item in detail.lists] == ["Done", "To Do", "Doing"]
    assert [item.title for item in detail.lists[1].tasks] == ["Second", "First"]


def test_get_missing_board_returns_none():
    db, _ = make_session()

    assert boards.get_board(db, 12345) is None


def test_get_boards_newest_first_and_only_for_owner():
    db, seeded = make_session()
    newer = boards.create_board(db, BoardCreate(title="Later"), seeded["owner"].id)
    boards.create_board(db, BoardCreate(title="Not mine"), seeded["stranger"].id)

    owned = boards.get_boards(db, seeded["owner"].id)

    assert [board.id for board in owned] == [newer.id, seeded["board_id"]]


def test_user_owns_board():
    db, seeded = make_session()

    assert boards.user_owns_board(db, seeded["owner"], seeded["board_id"]) is True
    assert boards.user_owns_board(db, seeded["stranger"], seeded["board_id"]) is False


def test_update_board_applies_only_given_fields():
    db, seeded = make_session()

    updated = boards.update_board(db, seeded["board_id"], BoardPatch(title="Launch v2"))

    assert updated.title == "Launch v2"
    assert updated.description == "Q3 launch"
    assert boards.update_board(db, 999, BoardPatch(title="x")) is None


def test_delete_board_removes_lists_and_tasks():
    db, seeded = make_session()
    (list_id,) = make_lists(db, seeded["board_id"], "To Do")
    make_tasks(db, list_id, "A", "B")

    assert boards.delete_board(db, seeded["board_id"]) is True

    assert db.query(BoardList).count() == 0
    assert db.query(Task).count() == 0
    assert boards.delete_board(db, seeded["board_id"]) is False


def test_delete_list_closes_gap_and_drops_its_tasks():
    db, seeded = make_session()
    todo, doing, done = make_lists(db, seeded["board_id"], "To Do", "Doing", "Done")
    make_tasks(db, doing, "A", "B")
    (kept,) = make_tasks(db, done, "C")

    assert lists.delete_list(db, doing) is True

    assert [(item.id, item.position) for item in lists.get_lists_by_board(db, seeded["board_id"])] == [
        (todo, 0),
        (done, 1),
    ]
    assert [task.id for task in db.query(Task).all()] == [kept]


def test_delete_task_closes_gap():
    db, seeded = make_session()
    (list_id,) = make_lists(db, seeded["board_id"], "To Do")
    a_id, b_id, c_id = make_tasks(db, list_id, "A", "B", "C")

    assert tasks.delete_task(db, a_id) is True

    assert [(item.id, item.position) for item in tasks.get_tasks_by_list(db, list_id)] == [(b_id, 0), (c_id, 1)]
    assert tasks.delete_task(db, a_id) is False


def test_move_task_to_other_list_does_not_shift_siblings():
    db, seeded = make_session()
    todo, done = make_lists(db, seeded["board_id"], "To Do", "Done")
    (moving,) = make_tasks(db, todo, "Moving")
    resident, other = make_tasks(db, done, "Resident", "Other")

    assert tasks.move_task(db, moving, done, 0) is True

    db.expire_all()
    moved = db.get(Task, moving)
    assert (moved.list_id, moved.position) == (done, 0)
    assert db.get(Task, resident).position == 0
    assert db.get(Task, other).position == 1


def test_move_task_to_missing_list_fails():
    db, seeded = make_session()
    (todo,) = make_lists(db, seeded["board_id"], "To Do")
    (task_id,) = make_tasks(db, todo, "Stay")

    assert tasks.move_task(db, task_id, 777, 0) is False

    db.expire_all()
    assert db.get(Task, task_id).list_id == todo


def test_reorder_tasks_with_foreign_task_changes_nothing():
    db, seeded = make_session()
    todo, done = make_lists(db, seeded["board_id"], "To Do", "Done")
    a_id, b_id = make_tasks(db, todo, "A", "B")
    (foreign,) = make_tasks(db, done, "Foreign")

    assert tasks.reorder_tasks(db, todo, [b_id, foreign, a_id]) is False

    assert [(item.id, item.position) for item in tasks.get_tasks_by_list(db, todo)] == [(a_id, 0), (b_id, 1)]


def test_update_task_and_list():
    db, seeded = make_session()
    (list_id,) = make_lists(db, seeded["board_id"], "To Do")
    (task_id,) = make_tasks(db, list_id, "Draft")

    task = tasks.update_task(db, task_id, TaskPatch(status="in_progress", description="half way"))
    renamed = lists.update_list(db, list_id, ListPatch(title="Now"))

    assert (task.status, task.description, task.title) == ("in_progress", "half way", "Draft")
    assert renamed.title == "Now"
    assert tasks.update_task(db, 999, TaskPatch(status="completed")) is None
    assert lists.update_list(db, 999, ListPatch(title="x")) is None


def test_payload_validation_happens_before_any_write():
    with pytest.raises(ValidationError):
        BoardCreate(title="")
    with pytest.raises(ValidationError):
        TaskPatch(priority="urgent")
    with pytest.raises(ValidationError):
        TaskPatch(status="blocked")


def test_user_profile_read_and_update():
    db, seeded = make_session()

    profile = users.update_user_profile(db, seeded["owner"].id, UserPatch(avatar_url="https://img.local/a.png"))

    assert profile.full_name == "Owner"
    assert profile.avatar_url == "https://img.local/a.png"
    assert users.get_user_profile(db, 999) is None
    assert users.update_user_profile(db, 999, UserPatch(full_name="x")) is None


def test_duplicate_user_email_returns_none():
    db, _ = make_session()

    assert users.create_user(db, UserCreate(email="owner@taskboard.local")) is None


def test_sample_board_layout():
    db, seeded = make_session()

    detail = sample.create_sample_board(db, seeded["stranger"].id)

    assert detail is not None
    assert detail.title == sample.SAMPLE_BOARD_TITLE
    assert detail.user_id == seeded["stranger"].id
    assert [item.title for item in detail.lists] == list(sample.SAMPLE_LISTS)
    assert [item.position for item in detail.lists] == [0, 1, 2]
    for item in detail.lists:
        assert [task.title for task in item.tasks] == [task["title"] for task in sample.SAMPLE_LISTS[item.title]]
        assert [task.position for task in item.tasks] == list(range(len(item.tasks)))


def test_sample_board_for_missing_user_returns_none():
    db, _ = make_session()

    assert sample.create_sample_board(db, 4242) is None
