from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from splitroom.models import Participant, Receipt, ReceiptItem, Room, SharedCharges
from splitroom.utils.parse import clean_amount

Amount = Annotated[Decimal, BeforeValidator(clean_amount)]

TAX_FIELDS = ("cgst", "sgst", "igst", "tax")


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, extra="ignore")


class ParticipantPayload(WireModel):
    user_id: str = Field(alias="userId")
    name: str
    upi_id: Optional[str] = Field(None, alias="upiId")
    joined_at: Optional[datetime] = Field(None, alias="joinedAt")

    def to_participant(self) -> Participant:
        return Participant(
            id=self.user_id,
            display_name=self.name,
            payee_identifier=self.upi_id or "",
            joined_at=self.joined_at,
        )


class CreatorPayload(WireModel):
    id: str
    name: Optional[str] = None
    upi_id: Optional[str] = Field(None, alias="upiId")


class ItemPayload(WireModel):
    item: Optional[str] = None
    name: Optional[str] = None
    quantity: Amount = Decimal("1")
    unit_price: Optional[Amount] = Field(None, alias="unitPrice")
    line_total: Optional[Amount] = Field(None, alias="lineTotal")
    total: Optional[Amount] = None
    price: Optional[Amount] = None
    tags: Optional[list[str]] = None

    @model_validator(mode="after")
    def _require_total(self) -> ItemPayload:
        if self.amount is None:
            raise ValueError("item carries no lineTotal, total or price")
        return self

    @property
    def amount(self) -> Optional[Decimal]:
        for value in (self.line_total, self.total, self.price):
            if value is not None:
                return value
        return None

    def to_item(self, index: int) -> ReceiptItem:
        line_total = self.amount
        assert line_total is not None
        unit_price = self.unit_price if self.unit_price is not None else self.price
        return ReceiptItem(
            index=index,
            name=self.item or self.name or "",
            quantity=self.quantity,
            unit_price=unit_price if unit_price is not None else Decimal("0"),
            line_total=line_total,
            tags=frozenset(self.tags or ()),
        )


class ReceiptPayload(WireModel):
    items: list[ItemPayload] = []
    total: Optional[Amount] = None
    cgst: Optional[Amount] = None
    sgst: Optional[Amount] = None
    igst: Optional[Amount] = None
    tax: Optional[Amount] = None
    service_charge: Optional[Amount] = Field(None, alias="serviceCharge")
    net_amount: Optional[Amount] = Field(None, alias="netAmount")

    def to_receipt(self) -> Receipt:
        taxes = {key: getattr(self, key) for key in TAX_FIELDS if getattr(self, key) is not None}
        return Receipt(
            items=tuple(item.to_item(index) for index, item in enumerate(self.items)),
            shared_charges=SharedCharges(
                service_charge=self.service_charge or Decimal("0"),
                taxes=taxes,
            ),
            net_amount=self.net_amount or Decimal("0"),
            subtotal=self.total,
        )


class RoomPayload(WireModel):
    id: str
    name: str = ""
    creator: CreatorPayload
    participants: list[ParticipantPayload] = []
    is_active: bool = Field(True, alias="isActive")
    receipt: Optional[ReceiptPayload] = None

    def to_room(self) -> Room:
        participants = [p.to_participant() for p in self.participants]
        if all(p.id != self.creator.id for p in participants):
            participants.insert(
                0,
                Participant(
                    id=self.creator.id,
                    display_name=self.creator.name or "",
                    payee_identifier=self.creator.upi_id or "",
                ),
            )
        return Room(
            id=self.id,
            name=self.name,
            creator_id=self.creator.id,
            participants=tuple(participants),
            is_active=self.is_active,
            receipt=self.receipt.to_receipt() if self.receipt else None,
        )


class RoomEnvelope(WireModel):
    room: RoomPayload


class TagUpdatePayload(WireModel):
    success: bool
    items: Optional[list[ItemPayload]] = None

    @model_validator(mode="after")
    def _require_items(self) -> TagUpdatePayload:
        if self.success and self.items is None:
            raise ValueError("successful tag update carries no items")
        return self

    def to_items(self) -> tuple[ReceiptItem, ...]:
        return tuple(item.to_item(index) for index, item in enumerate(self.items or ()))


def parse_room(data: Any) -> Room:
    return RoomPayload.model_validate(data).to_room()


def parse_room_envelope(data: Any) -> Room:
    return RoomEnvelope.model_validate(data).room.to_room()


def parse_receipt(data: Any) -> Receipt:
    return ReceiptPayload.model_validate(data).to_receipt()


def parse_item(index: int, data: Any) -> ReceiptItem:
    return ItemPayload.model_validate(data).to_item(index)


def parse_tag_update(data: Any) -> tuple[bool, tuple[ReceiptItem, ...]]:
    payload = TagUpdatePayload.model_validate(data)
    return payload.success, payload.to_items()


def member_body(display_name: str, payee_identifier: str) -> dict[str, str]:
    return {"name": display_name, "upiId": payee_identifier}
