from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Member:
    id: int
    group_id: int
    position: int


class SiblingStore(ABC):
    """Persistence collaborator for one kind of positioned member.

    Reads raise ``ReadFailure`` and writes raise ``WriteFailure``; the
    ordering service turns those into absent results for its callers.
    """

    transactional = False

    @abstractmethod
    def find(self, group_id: int) -> list[Member]:
        """Members of ``group_id`` ordered by position, then id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, member_id: int) -> Member | None:
        raise NotImplementedError

    @abstractmethod
    def insert(self, group_id: int, position: int, fields: dict[str, Any]) -> Member:
        raise NotImplementedError

    @abstractmethod
    def update_fields(self, member_id: int, fields: dict[str, Any], group_id: int | None = None) -> Member:
        """Write ``fields`` on one member.

        When ``group_id`` is given the write only matches a member that
        currently belongs to that group.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, member_id: int) -> bool:
        raise NotImplementedError

    def lock_group(self, group_id: int) -> None:
        """Hold off other writers to ``group_id`` until the current ``atomic()`` block ends."""

    @contextmanager
    def atomic(self) -> Iterator[None]:
        yield
