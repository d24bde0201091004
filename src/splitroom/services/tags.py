from __future__ import annotations

from typing import Iterable, Optional, Sequence

from splitroom.errors import InvalidIndex, UnknownParticipant
from splitroom.models import ReceiptItem, TagAction


class TagRegistry:
    """Per-item tag sets of one receipt, as last confirmed by the room service.

    The registry never edits tags on its own. ``toggle`` only works out which action
    the caller should submit; the confirmed result comes back through ``replace``.
    """

    def __init__(self, items: Sequence[ReceiptItem], participant_ids: Iterable[str]) -> None:
        self._items = tuple(items)
        self._participant_ids = frozenset(participant_ids)

    @property
    def items(self) -> tuple[ReceiptItem, ...]:
        return self._items

    @property
    def participant_ids(self) -> frozenset[str]:
        return self._participant_ids

    def tags_for(self, item_index: int) -> frozenset[str]:
        return self._item(item_index).tags

    def is_tagged(self, item_index: int, participant_id: str) -> bool:
        return participant_id in self.tags_for(item_index)

    def toggle(self, item_index: int, participant_id: str) -> TagAction:
        item = self._item(item_index)
        self._check_participant(participant_id)
        if participant_id in item.tags:
            return TagAction.REMOVE
        return TagAction.ADD

    def replace(self, items: Sequence[ReceiptItem], participant_ids: Optional[Iterable[str]] = None) -> None:
        self._items = tuple(items)
        if participant_ids is not None:
            self._participant_ids = frozenset(participant_ids)

    def _item(self, item_index: int) -> ReceiptItem:
        if not 0 <= item_index < len(self._items):
            raise InvalidIndex(item_index, len(self._items))
        return self._items[item_index]

    def _check_participant(self, participant_id: str) -> None:
        if participant_id not in self._participant_ids:
            raise UnknownParticipant(participant_id)


def tagged_item_names(items: Iterable[ReceiptItem], participant_id: str) -> list[str]:
    return [item.name for item in items if participant_id in item.tags]


def has_any_tags(items: Iterable[ReceiptItem]) -> bool:
    return any(item.tags for item in items)
