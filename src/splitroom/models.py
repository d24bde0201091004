from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional, Sequence


class TagAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(slots=True, frozen=True)
class Participant:
    id: str
    display_name: str
    payee_identifier: str
    joined_at: Optional[datetime] = None


@dataclass(slots=True, frozen=True)
class ReceiptItem:
    index: int
    name: str
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal
    tags: frozenset[str] = frozenset()

    def with_tags(self, tags: frozenset[str]) -> ReceiptItem:
        return replace(self, tags=tags)


@dataclass(slots=True, frozen=True)
class SharedCharges:
    service_charge: Decimal = Decimal("0")
    taxes: Mapping[str, Decimal] = field(default_factory=dict)

    @property
    def total(self) -> Decimal:
        return self.service_charge + sum(self.taxes.values(), Decimal("0"))


@dataclass(slots=True, frozen=True)
class Receipt:
    items: tuple[ReceiptItem, ...]
    shared_charges: SharedCharges
    net_amount: Decimal
    subtotal: Optional[Decimal] = None

    def with_items(self, items: Sequence[ReceiptItem]) -> Receipt:
        return replace(self, items=tuple(items))


@dataclass(slots=True, frozen=True)
class Room:
    id: str
    name: str
    creator_id: str
    participants: tuple[Participant, ...]
    is_active: bool = True
    receipt: Optional[Receipt] = None

    @property
    def participant_ids(self) -> frozenset[str]:
        return frozenset(p.id for p in self.participants)

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    @property
    def creator(self) -> Optional[Participant]:
        return self.get_participant(self.creator_id)

    def with_receipt(self, receipt: Optional[Receipt]) -> Room:
        return replace(self, receipt=receipt)
