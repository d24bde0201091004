from __future__ import annotations

from decimal import Decimal
from typing import Mapping
from zoneinfo import ZoneInfo

from splitroom.models import Receipt, Room
from splitroom.services.split import format_amount
from splitroom.services.tags import has_any_tags

TAX_LABELS = {
    "cgst": "CGST",
    "sgst": "SGST",
    "igst": "IGST",
    "tax": "Tax",
}


def format_money(amount: Decimal, currency: str) -> str:
    return f"{format_amount(amount)} {currency}"


def format_receipt_summary(receipt: Receipt, currency: str) -> list[str]:
    lines = []
    for item in receipt.items:
        tagged = f" [{len(item.tags)} tagged]" if item.tags else ""
        lines.append(
            f"{item.index + 1}. {item.name}: {item.quantity} x {format_amount(item.unit_price)}"
            f" = {format_money(item.line_total, currency)}{tagged}"
        )
    if receipt.subtotal is not None:
        lines.append(f"Subtotal: {format_money(receipt.subtotal, currency)}")
    for key, amount in receipt.shared_charges.taxes.items():
        lines.append(f"{TAX_LABELS.get(key, key)}: {format_money(amount, currency)}")
    lines.append(f"Service Charge: {format_money(receipt.shared_charges.service_charge, currency)}")
    lines.append(f"Total Amount: {format_money(receipt.net_amount, currency)}")
    return lines


def format_room_card(room: Room, shares: Mapping[str, Decimal], tz: ZoneInfo, currency: str) -> str:
    creator = room.creator
    header = room.name if room.is_active else f"{room.name} (closed)"
    lines = [header]
    if creator:
        lines.append(f"Created by: {creator.display_name}")

    lines.append("Participants:")
    for participant in room.participants:
        line = f"- {participant.display_name}"
        if participant.joined_at:
            line += f", joined {participant.joined_at.astimezone(tz).strftime('%d.%m.%Y %H:%M %Z')}"
        share = shares.get(participant.id, Decimal("0"))
        if share > 0:
            line += f", share {format_money(share, currency)}"
        lines.append(line)

    if room.receipt:
        lines.append("Receipt:")
        lines.extend(format_receipt_summary(room.receipt, currency))
        if not has_any_tags(room.receipt.items):
            lines.append("Nobody has tagged any items yet.")
    return "\n".join(lines)
