import logging

from sqlalchemy.orm import Session

from taskboard.db.schemas import BoardCreate, BoardDetailOut, ListCreate, TaskCreate
from taskboard.services.boards import create_board, delete_board, get_board
from taskboard.services.lists import create_list
from taskboard.services.tasks import create_task


logger = logging.getLogger(__name__)

SAMPLE_BOARD_TITLE = "Welcome Board"
SAMPLE_BOARD_DESCRIPTION = "A starter board to show how lists and tasks work."
SAMPLE_LISTS: dict[str, list[dict]] = {
    "To Do": [
        {"title": "Create your first board", "priority": "high"},
        {"title": "Add a list for each stage of your work", "priority": "medium"},
    ],
    "In Progress": [
        {"title": "Drag a task to another list", "priority": "medium"},
    ],
    "Done": [
        {"title": "Sign up", "priority": "low"},
    ],
}


def create_sample_board(db: Session, user_id: int) -> BoardDetailOut | None:
    board = create_board(
        db,
        BoardCreate(title=SAMPLE_BOARD_TITLE, description=SAMPLE_BOARD_DESCRIPTION),
        user_id,
    )
    if not board:
        return None

    for list_title, tasks in SAMPLE_LISTS.items():
        board_list = create_list(db, ListCreate(title=list_title, board_id=board.id))
        if not board_list:
            return _abandon(db, board.id)
        for task in tasks:
            if not create_task(db, TaskCreate(list_id=board_list.id, **task)):
                return _abandon(db, board.id)

    logger.info("Created sample board %s for user %s", board.id, user_id)
    return get_board(db, board.id)


def _abandon(db: Session, board_id: int) -> None:
    logger.error("Error creating sample board %s, removing it", board_id)
    delete_board(db, board_id)
    return None
