from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable
from urllib.parse import quote, urlencode

from splitroom.errors import SelfSettlementNotAllowed
from splitroom.models import Participant, ReceiptItem
from splitroom.services.split import round_amount
from splitroom.services.tags import tagged_item_names


@dataclass(slots=True, frozen=True)
class SettlementRequest:
    payee_identifier: str
    payee_name: str
    amount: Decimal
    currency: str
    memo: tuple[str, ...]

    @property
    def memo_text(self) -> str:
        return ", ".join(self.memo)

    def to_uri(self, scheme: str = "upi") -> str:
        params = {
            "pa": self.payee_identifier,
            "pn": self.payee_name,
            "am": f"{self.amount:.2f}",
            "cu": self.currency,
        }
        if self.memo:
            params["tn"] = self.memo_text
        return f"{scheme}://pay?{urlencode(params, quote_via=quote)}"


def build_request(
    requester: Participant,
    participant: Participant,
    share: Decimal,
    items: Iterable[ReceiptItem],
    currency: str,
) -> SettlementRequest | None:
    if participant.id == requester.id:
        raise SelfSettlementNotAllowed(participant.id)
    if share <= 0:
        return None

    amount = round_amount(share)
    if amount <= 0:
        return None

    return SettlementRequest(
        payee_identifier=participant.payee_identifier,
        payee_name=participant.display_name,
        amount=amount,
        currency=currency,
        memo=tuple(tagged_item_names(items, participant.id)),
    )
