from taskboard.core.config import get_settings
from taskboard.core.logging_utils import configure_logging
from taskboard.db.models import Base, User
from taskboard.db.schemas import UserCreate
from taskboard.db.session import engine, session_scope
from taskboard.services.boards import get_boards
from taskboard.services.sample import SAMPLE_BOARD_TITLE, create_sample_board
from taskboard.services.users import create_user


DEMO_EMAIL = "demo@taskboard.local"


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    Base.metadata.create_all(bind=engine)

    with session_scope() as db:
        user = db.query(User).filter(User.email == DEMO_EMAIL).first()
        if not user:
            user = create_user(db, UserCreate(email=DEMO_EMAIL, full_name="Demo User"))
        if not user:
            raise RuntimeError(f"Failed to create user: {DEMO_EMAIL}")

        if not any(board.title == SAMPLE_BOARD_TITLE for board in get_boards(db, user.id)):
            if create_sample_board(db, user.id) is None:
                raise RuntimeError(f"Failed to create sample board for {DEMO_EMAIL}")

    print(f"Demo seed complete: {settings.database_url}")


if __name__ == "__main__":
    main()
