import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.db.models import Task
from taskboard.db.schemas import TaskCreate, TaskPatch
from taskboard.ordering.service import OrderingService
from taskboard.ordering.sql import task_store


logger = logging.getLogger(__name__)


def get_tasks_by_list(db: Session, list_id: int) -> list[Task]:
    try:
        return (
            db.query(Task)
            .filter(Task.list_id == list_id)
            .order_by(Task.position.asc(), Task.id.asc())
            .all()
        )
    except SQLAlchemyError:
        logger.error("Error fetching tasks for list %s", list_id, exc_info=True)
        return []


def create_task(db: Session, payload: TaskCreate) -> Task | None:
    fields = payload.model_dump(exclude={"list_id"})
    member = OrderingService(task_store(db)).insert_member(payload.list_id, fields)
    if member is None:
        return None
    return db.get(Task, member.id)


def update_task(db: Session, task_id: int, payload: TaskPatch) -> Task | None:
    task = db.get(Task, task_id)
    if not task:
        logger.error("Error updating task %s: not found", task_id)
        return None

    patch_data = payload.model_dump(exclude_unset=True)
    if not patch_data:
        return task

    for key, value in patch_data.items():
        setattr(task, key, value)

    try:
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        db.rollback()
        logger.error("Error updating task %s", task_id, exc_info=True)
        return None
    return task


def delete_task(db: Session, task_id: int) -> bool:
    """Delete a task and close the gap it leaves in its list."""
    return OrderingService(task_store(db)).remove_member(task_id)


def move_task(db: Session, task_id: int, list_id: int, position: int) -> bool:
    """Put a task in ``list_id`` at ``position`` without shifting its new siblings."""
    return OrderingService(task_store(db)).move_member(task_id, list_id, position)


def reorder_tasks(db: Session, list_id: int, task_ids: Sequence[int]) -> bool:
    return OrderingService(task_store(db)).reorder_group(list_id, task_ids)
