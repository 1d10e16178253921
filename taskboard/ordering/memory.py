from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from taskboard.ordering.errors import WriteFailure
from taskboard.ordering.interfaces import Member, SiblingStore


@dataclass
class MemberRecord:
    id: int
    group_id: int
    position: int
    created_at: str
    updated_at: str
    data: dict[str, Any] = field(default_factory=dict)

    def as_member(self) -> Member:
        return Member(id=self.id, group_id=self.group_id, position=self.position)


class MemorySiblingStore(SiblingStore):
    """In-process store with no transactions.

    Every write lands immediately, so a batch that fails halfway keeps the
    writes made before the failure.
    """

    def __init__(self) -> None:
        self._records: dict[int, MemberRecord] = {}
        self._next_id = 1

    def find(self, group_id: int) -> list[Member]:
        records = [item for item in self._records.values() if item.group_id == group_id]
        records.sort(key=lambda item: (item.position, item.id))
        return [item.as_member() for item in records]

    def get(self, member_id: int) -> Member | None:
        record = self._records.get(member_id)
        if not record:
            return None
        return record.as_member()

    def data(self, member_id: int) -> dict[str, Any] | None:
        record = self._records.get(member_id)
        if not record:
            return None
        return dict(record.data)

    def insert(self, group_id: int, position: int, fields: dict[str, Any]) -> Member:
        now = datetime.now(timezone.utc).isoformat()
        record = MemberRecord(
            id=self._next_id,
            group_id=group_id,
            position=position,
            created_at=now,
            updated_at=now,
            data=dict(fields),
        )
        self._records[record.id] = record
        self._next_id += 1
        return record.as_member()

    def update_fields(self, member_id: int, fields: dict[str, Any], group_id: int | None = None) -> Member:
        record = self._records.get(member_id)
        if not record or (group_id is not None and record.group_id != group_id):
            raise WriteFailure(f"member {member_id} not found in group {group_id}")

        for key, value in fields.items():
            if key in {"group_id", "position"}:
                setattr(record, key, value)
            else:
                record.data[key] = value
        record.updated_at = datetime.now(timezone.utc).isoformat()
        return record.as_member()

    def delete(self, member_id: int) -> bool:
        if member_id not in self._records:
            raise WriteFailure(f"member {member_id} not found")
        del self._records[member_id]
        return True

    def reset(self) -> None:
        self._records = {}
        self._next_id = 1
