from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, nullable=False, unique=True)
    full_name = Column(String)
    avatar_url = Column(String)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    boards = relationship("Board", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)


class Board(Base):
    __tablename__ = "boards"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    user_id = Column(Integer, ForeignKey("users.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="boards")
    lists = relationship(
        "BoardList",
        back_populates="board",
        order_by="BoardList.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class BoardList(Base):
    __tablename__ = "lists"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    board_id = Column(Integer, ForeignKey("boards.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("position >= 0", name="ck_lists_position"),
    )

    board = relationship("Board", back_populates="lists")
    tasks = relationship(
        "Task",
        back_populates="board_list",
        order_by="Task.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    list_id = Column(Integer, ForeignKey("lists.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    due_date = Column(Date)
    priority = Column(String)
    status = Column(String, nullable=False, default="todo")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("position >= 0", name="ck_tasks_position"),
        CheckConstraint("priority IS NULL OR priority IN ('low', 'medium', 'high')", name="ck_tasks_priority"),
        CheckConstraint("status IN ('todo', 'in_progress', 'completed')", name="ck_tasks_status"),
    )

    board_list = relationship("BoardList", back_populates="tasks")
