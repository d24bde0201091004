from decimal import Decimal

import pytest
from pydantic import ValidationError

from splitroom.api.payloads import parse_item, parse_receipt, parse_room, parse_tag_update
from splitroom.utils.parse import clean_amount, detect_image_type


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.1, "0.1"),
        ("1,250.50", "1250.50"),
        ("₹ 99", "99"),
        (150, 150),
    ],
)
def test_clean_amount(value, expected):
    assert clean_amount(value) == expected


def test_detect_image_type():
    assert detect_image_type(b"\xff\xd8\xff\xe0rest") == "image/jpeg"
    assert detect_image_type(b"\x89PNG\r\n\x1a\nrest") == "image/png"
    assert detect_image_type(b"%PDF-1.7") is None


def test_parse_item_prefers_line_total():
    parsed = parse_item(2, {"item": "Beer", "quantity": 3, "unitPrice": 100, "lineTotal": 250, "tags": ["u1"]})
    assert parsed.index == 2
    assert parsed.line_total == Decimal("250")
    assert parsed.unit_price == Decimal("100")
    assert parsed.tags == {"u1"}


def test_parse_item_price_is_line_total_when_alone():
    parsed = parse_item(0, {"item": "Naan", "quantity": 2, "price": 90.5})
    assert parsed.line_total == Decimal("90.5")
    assert parsed.tags == frozenset()


def test_parse_item_amount_strings():
    parsed = parse_item(0, {"item": "Feast", "price": "₹1,250.50", "tags": [7]})
    assert parsed.line_total == Decimal("1250.50")
    assert parsed.tags == {"7"}


@pytest.mark.parametrize(
    "data",
    [
        {"item": "Mystery", "quantity": 1},
        {"item": "Junk", "price": "abc"},
        {"item": "Nulls", "price": 10, "tags": [None]},
    ],
)
def test_parse_item_invalid(data):
    with pytest.raises(ValidationError):
        parse_item(0, data)


def test_parse_receipt_taxes():
    receipt = parse_receipt(
        {
            "items": [{"item": "Dosa", "quantity": 1, "price": 120, "tags": []}],
            "total": 120,
            "cgst": 3,
            "sgst": 3,
            "serviceCharge": 12,
            "netAmount": 138,
        }
    )
    assert receipt.shared_charges.taxes == {"cgst": Decimal("3"), "sgst": Decimal("3")}
    assert receipt.shared_charges.total == Decimal("18")
    assert receipt.net_amount == Decimal("138")
    assert receipt.subtotal == Decimal("120")


def test_parse_room_adds_missing_creator():
    room = parse_room(
        {
            "id": "r1",
            "name": "Lunch",
            "creator": {"id": "c1", "name": "Asha", "upiId": "asha@upi"},
            "participants": [
                {"userId": "p2", "name": "Vik", "upiId": "vik@upi", "joinedAt": "2024-05-10T18:00:00Z"},
            ],
            "isActive": True,
        }
    )
    assert [p.id for p in room.participants] == ["c1", "p2"]
    assert room.creator is not None
    assert room.creator.payee_identifier == "asha@upi"
    assert room.participants[1].joined_at is not None
    assert room.receipt is None


def test_parse_room_inactive_flag_as_string():
    room = parse_room(
        {
            "id": "r",
            "creator": {"id": "u"},
            "participants": [{"userId": "u", "name": "U"}],
            "isActive": "false",
        }
    )
    assert room.is_active is False


@pytest.mark.parametrize(
    "data",
    [
        {"creator": {"id": "c1"}},
        {"id": "r", "creator": {"id": "u"}, "participants": [{"userId": "u", "name": None}]},
        {"id": "r", "creator": {"id": "u"}, "isActive": "sometimes"},
    ],
)
def test_parse_room_invalid(data):
    with pytest.raises(ValidationError):
        parse_room(data)


def test_parse_tag_update():
    success, items = parse_tag_update({"success": True, "items": [{"item": "Pizza", "price": 300, "tags": ["a"]}]})
    assert success is True
    assert items[0].tags == {"a"}


def test_parse_tag_update_rejected_without_items():
    assert parse_tag_update({"success": False}) == (False, ())


def test_parse_tag_update_success_requires_items():
    with pytest.raises(ValidationError):
        parse_tag_update({"success": True})
