"""Dense integer positions for sibling groups.

Lists are ordered within a board and tasks within a list. Every member of a
group carries a zero-based ``position``; new members go to the end, and a
full reorder rewrites ``0..n-1`` in the requested order.

Failures never raise out of this module. Reads that fail give ``None`` and
writes that fail give ``False`` (or ``None`` where a member is returned), with
an error logged. Whether a failed batch leaves partial writes behind depends
on the store: ``SqlSiblingStore`` rolls the batch back, ``MemorySiblingStore``
keeps what was written before the failure.
"""

import logging
from collections.abc import Sequence
from typing import Any

from taskboard.ordering.errors import OrderingError
from taskboard.ordering.interfaces import Member, SiblingStore


logger = logging.getLogger(__name__)


class OrderingService:
    def __init__(self, store: SiblingStore) -> None:
        self.store = store

    def positions(self, group_id: int) -> list[tuple[int, int]] | None:
        try:
            members = self.store.find(group_id)
        except OrderingError:
            logger.error("Error reading positions of group %s", group_id, exc_info=True)
            return None
        return [(member.id, member.position) for member in members]

    def next_position(self, group_id: int) -> int | None:
        """Position for a new member appended to ``group_id``.

        ``0`` for an empty group, otherwise one past the current maximum.
        ``None`` when the group could not be read.
        """
        try:
            members = self.store.find(group_id)
        except OrderingError:
            logger.error("Error computing next position for group %s", group_id, exc_info=True)
            return None
        return _after_last(members)

    def insert_member(self, group_id: int, fields: dict[str, Any]) -> Member | None:
        """Create a member at the end of ``group_id``.

        The group is locked, then the position read and the insert share one
        ``atomic()`` block, so concurrent appends get distinct positions.
        """
        try:
            with self.store.atomic():
                self.store.lock_group(group_id)
                position = _after_last(self.store.find(group_id))
                member = self.store.insert(group_id, position, fields)
        except OrderingError:
            logger.error("Error appending member to group %s", group_id, exc_info=True)
            return None
        logger.debug("Appended member %s to group %s at %s", member.id, group_id, position)
        return member

    def move_member(self, member_id: int, group_id: int, position: int) -> bool:
        """Set a member's group and position in a single write.

        Siblings are left untouched and ``position`` is not checked against
        the target group, so two members may end up sharing it.
        """
        try:
            self.store.update_fields(member_id, {"group_id": group_id, "position": position})
        except OrderingError:
            logger.error("Error moving member %s to group %s", member_id, group_id, exc_info=True)
            return False
        return True

    def reorder_group(self, group_id: int, ordered_ids: Sequence[int]) -> bool:
        """Give ``ordered_ids[i]`` position ``i``, one write per member.

        Stops at the first failed write. An id that is not in ``group_id``
        counts as a failed write.
        """
        try:
            with self.store.atomic():
                for index, member_id in enumerate(ordered_ids):
                    self.store.update_fields(member_id, {"position": index}, group_id=group_id)
        except OrderingError:
            logger.error("Error reordering group %s", group_id, exc_info=True)
            if not self.store.transactional:
                logger.warning("Group %s may be left partially reordered", group_id)
            return False
        return True

    def compact_group(self, group_id: int) -> bool:
        """Rewrite the group's positions to ``0..n-1`` keeping their order."""
        try:
            with self.store.atomic():
                self._close_gaps(group_id)
        except OrderingError:
            logger.error("Error compacting group %s", group_id, exc_info=True)
            return False
        return True

    def remove_member(self, member_id: int) -> bool:
        """Delete a member and shift later siblings down to close the gap."""
        try:
            with self.store.atomic():
                member = self.store.get(member_id)
                if member is None:
                    logger.warning("Member %s not found for removal", member_id)
                    return False
                self.store.delete(member_id)
                self._close_gaps(member.group_id)
        except OrderingError:
            logger.error("Error removing member %s", member_id, exc_info=True)
            return False
        return True

    def _close_gaps(self, group_id: int) -> None:
        for index, member in enumerate(self.store.find(group_id)):
            if member.position != index:
                self.store.update_fields(member.id, {"position": index}, group_id=group_id)


def _after_last(members: Sequence[Member]) -> int:
    if not members:
        return 0
    return max(member.position for member in members) + 1
