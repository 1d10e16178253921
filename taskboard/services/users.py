import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.db.models import User
from taskboard.db.schemas import UserCreate, UserPatch


logger = logging.getLogger(__name__)


def create_user(db: Session, payload: UserCreate) -> User | None:
    user = User(email=payload.email, full_name=payload.full_name, avatar_url=payload.avatar_url)
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError:
        db.rollback()
        logger.error("Error creating user %s", payload.email, exc_info=True)
        return None
    return user


def get_user_profile(db: Session, user_id: int) -> User | None:
    try:
        return db.get(User, user_id)
    except SQLAlchemyError:
        logger.error("Error fetching user profile %s", user_id, exc_info=True)
        return None


def update_user_profile(db: Session, user_id: int, payload: UserPatch) -> User | None:
    user = get_user_profile(db, user_id)
    if not user:
        return None

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(user, key, value)

    try:
        db.commit()
        db.refresh(user)
    except SQLAlchemyError:
        db.rollback()
        logger.error("Error updating user profile %s", user_id, exc_info=True)
        return None
    return user
