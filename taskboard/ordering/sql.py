from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.db.models import Board, BoardList, Task
from taskboard.ordering.errors import ReadFailure, WriteFailure
from taskboard.ordering.interfaces import Member, SiblingStore


class SqlSiblingStore(SiblingStore):
    """Sibling store over one ORM model and its group foreign key.

    ``parent_model`` is the table the group id points at. Locking a group
    takes a row lock on that parent row, which also covers empty groups.

    Writes made outside ``atomic()`` are committed one by one. Inside
    ``atomic()`` they are only flushed, and the whole block commits or
    rolls back together.
    """

    transactional = True

    def __init__(self, db: Session, model: type, group_column: str, parent_model: type) -> None:
        self.db = db
        self.model = model
        self.group_column = group_column
        self.parent_model = parent_model
        self._depth = 0

    @property
    def _group(self):
        return getattr(self.model, self.group_column)

    def _as_member(self, row: Any) -> Member:
        return Member(id=row.id, group_id=getattr(row, self.group_column), position=row.position)

    def find(self, group_id: int) -> list[Member]:
        try:
            rows = (
                self.db.query(self.model)
                .filter(self._group == group_id)
                .order_by(self.model.position.asc(), self.model.id.asc())
                .all()
            )
            return [self._as_member(row) for row in rows]
        except SQLAlchemyError as exc:
            self._failed()
            raise ReadFailure(f"could not read {self.model.__tablename__} of group {group_id}") from exc

    def get(self, member_id: int) -> Member | None:
        try:
            row = self.db.get(self.model, member_id)
        except SQLAlchemyError as exc:
            self._failed()
            raise ReadFailure(f"could not read {self.model.__tablename__} {member_id}") from exc
        if row is None:
            return None
        return self._as_member(row)

    def insert(self, group_id: int, position: int, fields: dict[str, Any]) -> Member:
        row = self.model(**fields)
        setattr(row, self.group_column, group_id)
        row.position = position
        try:
            self.db.add(row)
            self._write_done()
        except SQLAlchemyError as exc:
            self._failed()
            raise WriteFailure(f"could not insert into {self.model.__tablename__}") from exc
        return self._as_member(row)

    def update_fields(self, member_id: int, fields: dict[str, Any], group_id: int | None = None) -> Member:
        try:
            query = self.db.query(self.model).filter(self.model.id == member_id)
            if group_id is not None:
                query = query.filter(self._group == group_id)
            row = query.first()
            if row is None:
                raise WriteFailure(f"{self.model.__tablename__} {member_id} not found in group {group_id}")

            for key, value in fields.items():
                setattr(row, self.group_column if key == "group_id" else key, value)
            self._write_done()
        except SQLAlchemyError as exc:
            self._failed()
            raise WriteFailure(f"could not update {self.model.__tablename__} {member_id}") from exc
        return self._as_member(row)

    def delete(self, member_id: int) -> bool:
        try:
            row = self.db.get(self.model, member_id)
            if row is None:
                raise WriteFailure(f"{self.model.__tablename__} {member_id} not found")
            self.db.delete(row)
            self._write_done()
        except SQLAlchemyError as exc:
            self._failed()
            raise WriteFailure(f"could not delete {self.model.__tablename__} {member_id}") from exc
        return True

    def lock_group(self, group_id: int) -> None:
        if not self._depth:
            raise RuntimeError("lock_group() must run inside atomic()")
        try:
            self.db.query(self.parent_model.id).filter(self.parent_model.id == group_id).with_for_update().first()
        except SQLAlchemyError as exc:
            raise ReadFailure(f"could not lock {self.parent_model.__tablename__} {group_id}") from exc

    @contextmanager
    def atomic(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        except Exception:
            self._depth -= 1
            if not self._depth:
                self.db.rollback()
            raise

        self._depth -= 1
        if self._depth:
            return
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise WriteFailure(f"could not commit {self.model.__tablename__} changes") from exc

    def _write_done(self) -> None:
        if self._depth:
            self.db.flush()
        else:
            self.db.commit()

    def _failed(self) -> None:
        if not self._depth:
            self.db.rollback()


def list_store(db: Session) -> SqlSiblingStore:
    """Lists ordered within their board."""
    return SqlSiblingStore(db, BoardList, "board_id", Board)


def task_store(db: Session) -> SqlSiblingStore:
    """Tasks ordered within their list."""
    return SqlSiblingStore(db, Task, "list_id", BoardList)
