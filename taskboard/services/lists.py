import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.db.models import BoardList
from taskboard.db.schemas import ListCreate, ListPatch
from taskboard.ordering.service import OrderingService
from taskboard.ordering.sql import list_store


logger = logging.getLogger(__name__)


def get_lists_by_board(db: Session, board_id: int) -> list[BoardList]:
    try:
        return (
            db.query(BoardList)
            .filter(BoardList.board_id == board_id)
            .order_by(BoardList.position.asc(), BoardList.id.asc())
            .all()
        )
    except SQLAlchemyError:
        logger.error("Error fetching lists for board %s", board_id, exc_info=True)
        return []


def create_list(db: Session, payload: ListCreate) -> BoardList | None:
    member = OrderingService(list_store(db)).insert_member(payload.board_id, {"title": payload.title})
    if member is None:
        return None
    return db.get(BoardList, member.id)


def update_list(db: Session, list_id: int, payload: ListPatch) -> BoardList | None:
    board_list = db.get(BoardList, list_id)
    if not board_list:
        logger.error("Error updating list %s: not found", list_id)
        return None

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(board_list, key, value)

    try:
        db.commit()
        db.refresh(board_list)
    except SQLAlchemyError:
        db.rollback()
        logger.error("Error updating list %s", list_id, exc_info=True)
        return None
    return board_list


def delete_list(db: Session, list_id: int) -> bool:
    """Delete a list with its tasks and close the gap it leaves in the board."""
    return OrderingService(list_store(db)).remove_member(list_id)


def reorder_lists(db: Session, board_id: int, list_ids: Sequence[int]) -> bool:
    return OrderingService(list_store(db)).reorder_group(board_id, list_ids)
