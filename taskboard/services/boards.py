import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from taskboard.db.models import Board, BoardList, User
from taskboard.db.schemas import BoardCreate, BoardDetailOut, BoardPatch


logger = logging.getLogger(__name__)


def get_boards(db: Session, user_id: int) -> list[Board]:
    try:
        return (
            db.query(Board)
            .filter(Board.user_id == user_id)
            .order_by(Board.created_at.desc(), Board.id.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.error("Error fetching boards for user %s", user_id, exc_info=True)
        return []


def get_board(db: Session, board_id: int) -> BoardDetailOut | None:
    """Board with its lists and each list's tasks, all sorted by position."""
    try:
        board = (
            db.query(Board)
            .options(selectinload(Board.lists).selectinload(BoardList.tasks))
            .filter(Board.id == board_id)
            .first()
        )
    except SQLAlchemyError:
        logger.error("Error fetching board %s", board_id, exc_info=True)
        return None
    if not board:
        return None

    detail = BoardDetailOut.model_validate(board)
    detail.lists.sort(key=lambda item: (item.position, item.id))
    for item in detail.lists:
        item.tasks.sort(key=lambda task: (task.position, task.id))
    return detail


def user_owns_board(db: Session, user: User, board_id: int) -> bool:
    return db.query(Board.id).filter(Board.id == board_id, Board.user_id == user.id).first() is not None


def create_board(db: Session, payload: BoardCreate, user_id: int) -> Board | None:
    board = Board(title=payload.title, description=payload.description, user_id=user_id)
    try:
        db.add(board)
        db.commit()
        db.refresh(board)
    except SQLAlchemyError:
        db.rollback()
        logger.error("Error creating board for user %s", user_id, exc_info=True)
        return None
    return board


def update_board(db: Session, board_id: int, payload: BoardPatch) -> Board | None:
    board = db.get(Board, board_id)
    if not board:
        logger.error("Error updating board %s: not found", board_id)
        return None

    patch_data = payload.model_dump(exclude_unset=True)
    if not patch_data:
        return board

    for key, value in patch_data.items():
        setattr(board, key, value)

    try:
        db.commit()
        db.refresh(board)
    except SQLAlchemyError:
        db.rollback()
        logger.error("Error updating board %s", board_id, exc_info=True)
        return None
    return board


def delete_board(db: Session, board_id: int) -> bool:
    board = db.get(Board, board_id)
    if not board:
        logger.error("Error deleting board %s: not found", board_id)
        return False

    try:
        db.delete(board)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error("Error deleting board %s", board_id, exc_info=True)
        return False
    return True
