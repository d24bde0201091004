from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Sequence

from splitroom.errors import DegenerateRoom
from splitroom.logging import get_logger
from splitroom.models import Participant, ReceiptItem, SharedCharges

CENTS = Decimal("0.01")

log = get_logger(__name__)


def split_amount(amount: Decimal, consumers: Sequence[str]) -> dict[str, Decimal]:
    if not consumers:
        raise ValueError("consumers must not be empty")

    share = amount / Decimal(len(consumers))
    return {consumer: share for consumer in consumers}


def shared_cost_per_person(shared_charges: SharedCharges, participant_count: int) -> Decimal:
    if participant_count <= 0:
        raise DegenerateRoom("room has no participants to split shared charges across")
    return shared_charges.total / Decimal(participant_count)


def compute_shares(
    items: Iterable[ReceiptItem],
    participants: Sequence[Participant],
    shared_charges: SharedCharges,
) -> dict[str, Decimal]:
    """Build the share table for the room's current participants.

    Every participant gets an entry. Items nobody tagged are left unassigned, and
    shared charges are split evenly across the whole room. Nothing is rounded here;
    use ``format_amount`` or ``round_amount`` when presenting.
    """
    if not participants:
        raise DegenerateRoom("room has no participants")

    shares: dict[str, Decimal] = {participant.id: Decimal("0") for participant in participants}

    for item in items:
        if not item.tags:
            continue
        # sorted so the table is reproducible regardless of set ordering
        for participant_id, share in split_amount(item.line_total, sorted(item.tags)).items():
            if participant_id not in shares:
                log.warning(
                    "shares.unknown_participant",
                    item_index=item.index,
                    participant_id=participant_id,
                )
                continue
            shares[participant_id] += share

    per_person = shared_cost_per_person(shared_charges, len(participants))
    for participant_id in shares:
        shares[participant_id] += per_person

    return shares


def round_amount(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    return f"{round_amount(amount):.2f}"
